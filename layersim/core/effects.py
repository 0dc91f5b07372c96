"""Effect interpreter.

Applies reward and passive effects onto the player. Stat keys mutate the
player's fields directly; flag, counter and multiplier keys are stored in
the player's EffectBag where the combat loop reads them.

A debuff is applied through the same table with the sign reversed.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Union

from layersim.data.models.effect import EFFECT_KINDS, EffectKey, EffectKind

if TYPE_CHECKING:
    from layersim.combat.entities import Player
    from layersim.data.models.reward import RewardOption

logger = logging.getLogger(__name__)

# Multiplicative stat factors never drop below this
MIN_STAT_FACTOR = 0.05


# =============================================================================
# EFFECT BAG
# =============================================================================


@dataclass(frozen=True)
class Flag:
    """Presence-only effect."""


@dataclass(frozen=True)
class Counter:
    count: int


@dataclass(frozen=True)
class Multiplier:
    value: float


EffectPayload = Union[Flag, Counter, Multiplier]


class EffectBag:
    """Typed mapping of non-stat effect keys to their payloads."""

    def __init__(self):
        self._effects: dict[EffectKey, EffectPayload] = {}

    def __contains__(self, key: EffectKey) -> bool:
        return key in self._effects

    def __len__(self) -> int:
        return len(self._effects)

    def get(self, key: EffectKey) -> Optional[EffectPayload]:
        return self._effects.get(key)

    def has(self, key: EffectKey) -> bool:
        """Check whether any payload is stored (flag set, counter > 0, ...)."""
        return key in self._effects

    def count(self, key: EffectKey) -> int:
        payload = self._effects.get(key)
        return payload.count if isinstance(payload, Counter) else 0

    def value(self, key: EffectKey) -> float:
        payload = self._effects.get(key)
        return payload.value if isinstance(payload, Multiplier) else 0.0

    def set_flag(self, key: EffectKey, enabled: bool) -> None:
        if enabled:
            self._effects[key] = Flag()
        else:
            self._effects.pop(key, None)

    def add_count(self, key: EffectKey, delta: int) -> int:
        """Add to a counter, dropping it once it reaches zero."""
        count = max(0, self.count(key) + delta)
        if count:
            self._effects[key] = Counter(count)
        else:
            self._effects.pop(key, None)
        return count

    def add_value(self, key: EffectKey, delta: float) -> float:
        value = self.value(key) + delta
        if value:
            self._effects[key] = Multiplier(value)
        else:
            self._effects.pop(key, None)
        return value

    def clear(self) -> None:
        self._effects.clear()

    def to_dict(self) -> dict[str, Union[bool, int, float]]:
        result: dict[str, Union[bool, int, float]] = {}
        for key, payload in self._effects.items():
            match payload:
                case Flag():
                    result[key.value] = True
                case Counter(count=count):
                    result[key.value] = count
                case Multiplier(value=value):
                    result[key.value] = value
        return result


# =============================================================================
# STAT HANDLERS
# =============================================================================


def _scale(value: float, sign: int) -> float:
    return max(MIN_STAT_FACTOR, 1.0 + sign * value)


def _round_count(value: float) -> int:
    return max(1, round(value))


def _damage_pct(player: "Player", value: float, sign: int) -> None:
    player.damage *= _scale(value, sign)


def _attack_speed_pct(player: "Player", value: float, sign: int) -> None:
    player.attack_speed *= _scale(value, sign)


def _move_speed_pct(player: "Player", value: float, sign: int) -> None:
    player.move_speed *= _scale(value, sign)


def _max_health_pct(player: "Player", value: float, sign: int) -> None:
    factor = _scale(value, sign)
    player.max_health *= factor
    player.health *= factor


def _crit_chance_add(player: "Player", value: float, sign: int) -> None:
    player.crit_chance += sign * value


def _crit_damage_add(player: "Player", value: float, sign: int) -> None:
    player.crit_damage = max(1.0, player.crit_damage + sign * value)


def _projectiles_add(player: "Player", value: float, sign: int) -> None:
    player.projectile_count = max(1, player.projectile_count + sign * _round_count(value))


def _pierce_add(player: "Player", value: float, sign: int) -> None:
    player.pierce = max(0, player.pierce + sign * _round_count(value))


def _lifesteal_add(player: "Player", value: float, sign: int) -> None:
    player.lifesteal = max(0.0, player.lifesteal + sign * value)


def _regeneration_add(player: "Player", value: float, sign: int) -> None:
    player.regeneration = max(0.0, player.regeneration + sign * value)


def _max_health_add(player: "Player", value: float, sign: int) -> None:
    player.max_health = max(1.0, player.max_health + sign * value)
    if sign > 0:
        player.health += value


def _armor_add(player: "Player", value: float, sign: int) -> None:
    player.armor += sign * value


def _dodge_chance_add(player: "Player", value: float, sign: int) -> None:
    player.dodge_chance += sign * value


def _block_chance_add(player: "Player", value: float, sign: int) -> None:
    player.block_chance += sign * value


def _pierce_plus_damage(player: "Player", value: float, sign: int) -> None:
    _pierce_add(player, 1, sign)
    _damage_pct(player, value, sign)


def _all_stats_pct(player: "Player", value: float, sign: int) -> None:
    _damage_pct(player, value, sign)
    _attack_speed_pct(player, value, sign)
    _move_speed_pct(player, value, sign)
    _max_health_pct(player, value, sign)


StatHandler = Callable[["Player", float, int], None]

STAT_HANDLERS: dict[EffectKey, StatHandler] = {
    EffectKey.DAMAGE_PCT: _damage_pct,
    EffectKey.ATTACK_SPEED_PCT: _attack_speed_pct,
    EffectKey.MOVE_SPEED_PCT: _move_speed_pct,
    EffectKey.MAX_HEALTH_PCT: _max_health_pct,
    EffectKey.CRIT_CHANCE_ADD: _crit_chance_add,
    EffectKey.CRIT_DAMAGE_ADD: _crit_damage_add,
    EffectKey.PROJECTILES_ADD: _projectiles_add,
    EffectKey.PIERCE_ADD: _pierce_add,
    EffectKey.LIFESTEAL_ADD: _lifesteal_add,
    EffectKey.REGENERATION_ADD: _regeneration_add,
    EffectKey.MAX_HEALTH_ADD: _max_health_add,
    EffectKey.ARMOR_ADD: _armor_add,
    EffectKey.DODGE_CHANCE_ADD: _dodge_chance_add,
    EffectKey.BLOCK_CHANCE_ADD: _block_chance_add,
    EffectKey.PIERCE_PLUS_DAMAGE: _pierce_plus_damage,
    EffectKey.ALL_STATS_PCT: _all_stats_pct,
}

_missing = {k for k, kind in EFFECT_KINDS.items() if kind == EffectKind.STAT} ^ set(STAT_HANDLERS)
if _missing:
    raise RuntimeError(f"stat handler table out of sync: {sorted(_missing)}")


# =============================================================================
# APPLICATION
# =============================================================================


def apply_effect(
    player: "Player", key: EffectKey, value: Optional[float], sign: int = 1
) -> None:
    """
    Apply one effect key to the player.

    Args:
        player: Player to mutate.
        key: Effect selector.
        value: Scaled value (None for flags).
        sign: +1 to apply, -1 to apply in reverse (debuffs).
    """
    key = EffectKey(key)
    match EFFECT_KINDS[key]:
        case EffectKind.STAT:
            if value is None:
                logger.warning("Stat effect %s applied without a value, ignoring", key)
                return
            STAT_HANDLERS[key](player, value, sign)
        case EffectKind.FLAG:
            player.effects.set_flag(key, sign > 0)
        case EffectKind.COUNTER:
            delta = _round_count(value) if value is not None else 1
            player.effects.add_count(key, sign * delta)
        case EffectKind.MULTIPLIER:
            player.effects.add_value(key, sign * (value or 0.0))
        case kind:
            raise TypeError(f"unhandled effect kind {kind}")

    player.clamp_stats()


def apply_reward(
    player: "Player", option: "RewardOption", scaled_value: Optional[float]
) -> None:
    """
    Apply a reward option, its bundled debuff, and record it in the build.

    Args:
        player: Player to mutate.
        option: Catalog entry.
        scaled_value: Layer-scaled value computed at generation time.
    """
    apply_effect(player, option.effect_key, scaled_value)
    if option.debuff is not None:
        apply_effect(player, option.debuff.effect_key, option.debuff.value, sign=-1)
    player.acquired_rewards.append(option.id)
    logger.debug("Applied reward %s (value=%s)", option.id, scaled_value)
