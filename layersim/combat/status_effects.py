"""Status Effects for the survival arena.

Handles timed effects on enemies and the player:
- Damage over time (poison, burn)
- Movement impairment (slow, stun)
- Healing over time

Durations are in milliseconds, matching the tick delta.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

POISON_MAX_STACKS = 3


class StatusEffectType(Enum):
    """Types of status effects."""

    # Damage Over Time
    POISON = "poison"
    BURN = "burn"

    # Crowd Control
    SLOW = "slow"  # Multiplies move speed down by intensity
    STUN = "stun"  # Cannot move

    # Healing
    REGENERATION = "regeneration"


@dataclass
class StatusEffect:
    """
    Represents an active status effect.

    Attributes:
        effect_type: Type of the effect.
        duration: Remaining duration in ms.
        intensity: Damage/heal per second, or slow fraction in [0, 1].
        max_duration: Original duration, used when stacking refreshes.
        stackable: Whether re-applying adds a stack instead of replacing.
        stacks: Number of stacks (DoT damage scales with stacks).
        max_stacks: Stack cap for stackable effects.
        source_id: Entity or effect that applied it.
    """

    effect_type: StatusEffectType
    duration: float
    intensity: float = 0.0
    max_duration: float = 0.0
    stackable: bool = False
    stacks: int = 1
    max_stacks: int = 1
    source_id: str = ""

    def __post_init__(self):
        if not self.max_duration:
            self.max_duration = self.duration

    @property
    def is_expired(self) -> bool:
        """Check if effect has expired."""
        return self.duration <= 0

    @property
    def is_cc(self) -> bool:
        """Check if this is a crowd control effect."""
        return self.effect_type in (StatusEffectType.SLOW, StatusEffectType.STUN)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.effect_type.value,
            "duration": self.duration,
            "intensity": self.intensity,
            "stacks": self.stacks,
        }


def apply_status_effect(effects: List[StatusEffect], effect: StatusEffect) -> None:
    """
    Add an effect to an effect list, honouring stacking rules.

    Stackable effects of the same type gain a stack up to max_stacks and
    refresh to full duration; non-stackable ones are replaced.
    """
    for i, existing in enumerate(effects):
        if existing.effect_type != effect.effect_type:
            continue
        if effect.stackable:
            if existing.stacks < effect.max_stacks:
                existing.stacks += 1
            existing.duration = effect.max_duration
            existing.intensity = effect.intensity
        else:
            effects[i] = effect
        return
    effects.append(effect)


def tick_status_effects(
    effects: List[StatusEffect], delta_ms: float
) -> tuple[float, float]:
    """
    Advance all effects by one tick and drop the expired ones.

    Args:
        effects: Effect list, mutated in place.
        delta_ms: Tick length in milliseconds.

    Returns:
        (damage, healing) accumulated this tick.
    """
    damage = 0.0
    healing = 0.0
    seconds = delta_ms / 1000

    for effect in effects:
        effect.duration -= delta_ms
        if effect.effect_type in (StatusEffectType.POISON, StatusEffectType.BURN):
            damage += effect.intensity * effect.stacks * seconds
        elif effect.effect_type == StatusEffectType.REGENERATION:
            healing += effect.intensity * seconds

    effects[:] = [e for e in effects if not e.is_expired]
    return damage, healing


def movement_multiplier(effects: List[StatusEffect]) -> float:
    """
    Effective move speed multiplier from active effects.

    Stun zeroes movement; each slow multiplies it down. The base stat is
    never modified.
    """
    multiplier = 1.0
    for effect in effects:
        if effect.effect_type == StatusEffectType.STUN:
            return 0.0
        if effect.effect_type == StatusEffectType.SLOW:
            multiplier *= max(0.0, 1.0 - effect.intensity)
    return multiplier


def has_effect(effects: List[StatusEffect], effect_type: StatusEffectType) -> bool:
    return any(e.effect_type == effect_type for e in effects)


# =============================================================================
# FACTORIES
# =============================================================================


def create_poison(
    damage_per_second: float,
    duration: float = 3000.0,
    source_id: str = "",
    max_stacks: int = POISON_MAX_STACKS,
) -> StatusEffect:
    """Stacking poison (damage per second per stack, capped at max_stacks)."""
    return StatusEffect(
        effect_type=StatusEffectType.POISON,
        duration=duration,
        intensity=damage_per_second,
        stackable=True,
        max_stacks=max_stacks,
        source_id=source_id,
    )


def create_burn(damage_per_second: float, duration: float = 2000.0, source_id: str = "") -> StatusEffect:
    return StatusEffect(
        effect_type=StatusEffectType.BURN,
        duration=duration,
        intensity=damage_per_second,
        source_id=source_id,
    )


def create_slow(fraction: float, duration: float = 2000.0, source_id: str = "") -> StatusEffect:
    return StatusEffect(
        effect_type=StatusEffectType.SLOW,
        duration=duration,
        intensity=fraction,
        source_id=source_id,
    )


def create_stun(duration: float = 1500.0, source_id: str = "") -> StatusEffect:
    return StatusEffect(
        effect_type=StatusEffectType.STUN,
        duration=duration,
        source_id=source_id,
    )
