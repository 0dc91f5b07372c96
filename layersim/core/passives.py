"""Passive attribute table.

Offered after every cleared layer; three of the nine entries are shown,
chosen by a shuffle seeded from the season seed, layer and play time.
"""

from dataclasses import dataclass

from layersim.core.constants import PASSIVE_OFFER_COUNT
from layersim.core.seeded_random import SeededRandom
from layersim.data.models.effect import EffectKey


@dataclass(frozen=True)
class PassiveAttribute:
    """A permanent stat bump picked between layers."""
    id: str
    name: str
    description: str
    effect_key: EffectKey
    value: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "effect_key": self.effect_key.value,
            "value": self.value,
        }


PASSIVE_ATTRIBUTES: tuple[PassiveAttribute, ...] = (
    PassiveAttribute("attack_speed", "Attack Speed", "Attack speed +20%", EffectKey.ATTACK_SPEED_PCT, 0.2),
    PassiveAttribute("damage", "Damage", "Damage +25%", EffectKey.DAMAGE_PCT, 0.25),
    PassiveAttribute("crit_chance", "Critical Chance", "Crit chance +15%", EffectKey.CRIT_CHANCE_ADD, 0.15),
    PassiveAttribute("projectiles", "Multishot", "Projectiles +1", EffectKey.PROJECTILES_ADD, 1),
    PassiveAttribute("pierce", "Pierce", "Pierce +1", EffectKey.PIERCE_ADD, 1),
    PassiveAttribute("regeneration", "Regeneration", "Regenerate 5 health per second", EffectKey.REGENERATION_ADD, 5),
    PassiveAttribute("max_health", "Vitality", "Max health +50", EffectKey.MAX_HEALTH_ADD, 50),
    PassiveAttribute("move_speed", "Swiftness", "Move speed +30%", EffectKey.MOVE_SPEED_PCT, 0.3),
    PassiveAttribute("lifesteal", "Lifesteal", "Lifesteal +5%", EffectKey.LIFESTEAL_ADD, 0.05),
)

PASSIVES_BY_ID: dict[str, PassiveAttribute] = {p.id: p for p in PASSIVE_ATTRIBUTES}


def passive_seed(season_seed: str, layer: int, elapsed_ms: float) -> str:
    """Seed string for a layer's passive offer."""
    return f"{season_seed}:passive:{layer}:{int(elapsed_ms)}"


def offer_passives(
    season_seed: str, layer: int, elapsed_ms: float, count: int = PASSIVE_OFFER_COUNT
) -> list[PassiveAttribute]:
    """
    Pick the passives offered for a layer.

    Deterministic for a given (seed, layer, play time).
    """
    rng = SeededRandom(passive_seed(season_seed, layer, elapsed_ms))
    return rng.shuffle(PASSIVE_ATTRIBUTES)[:count]
