"""Enemy AI behaviours.

Each behaviour is a small dataclass carrying only the parameters it needs.
`steer` dispatches on the behaviour type and returns where the enemy wants
to go this tick; the combat engine applies speed and status effects.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from layersim.combat.entities import AnimationState, Enemy
from layersim.combat.geometry import direction, distance


@dataclass(frozen=True)
class Aggressive:
    """Chase the player inside aggro range, give up beyond deaggro range."""
    aggro_range: float = 150.0
    deaggro_range: float = 200.0


@dataclass(frozen=True)
class Elite:
    """Aggressive, but faster."""
    aggro_range: float = 200.0
    deaggro_range: float = 250.0
    speed_multiplier: float = 1.2


@dataclass(frozen=True)
class Defensive:
    """Back away from the player when it gets close, approach otherwise."""
    aggro_range: float = 150.0
    retreat_distance: float = 50.0


@dataclass(frozen=True)
class Support:
    """Stay with the most injured ally, fall back to the player."""
    heal_threshold: float = 0.5
    follow_distance: float = 30.0


@dataclass(frozen=True)
class Swarm:
    """Move with the pack, chase the player when alone."""
    cohesion_radius: float = 100.0


@dataclass(frozen=True)
class Ranged:
    """Close in until within attack range, then hold and attack."""
    attack_range: float = 120.0


@dataclass(frozen=True)
class Boss:
    """Always chase; enrage below a health threshold."""
    enrage_threshold: float = 0.5
    enrage_speed_multiplier: float = 1.5


Behavior = Union[Aggressive, Elite, Defensive, Support, Swarm, Ranged, Boss]


@dataclass
class Steering:
    """Desired movement for one tick."""
    dx: float = 0.0
    dy: float = 0.0
    speed_multiplier: float = 1.0
    state: AnimationState = AnimationState.IDLE


@dataclass
class SteeringContext:
    """World information a behaviour can look at."""
    player_x: float
    player_y: float
    center_x: float
    center_y: float
    enemies: Sequence[Enemy] = ()


def _toward(enemy: Enemy, tx: float, ty: float, speed_multiplier: float = 1.0) -> Steering:
    dx, dy = direction(enemy.x, enemy.y, tx, ty)
    if dx == 0 and dy == 0:
        return Steering(state=AnimationState.IDLE)
    return Steering(dx, dy, speed_multiplier, AnimationState.MOVING)


def _chase(enemy: Enemy, ctx: SteeringContext, aggro: float, deaggro: float, speed: float) -> Steering:
    dist = distance(enemy.x, enemy.y, ctx.player_x, ctx.player_y)
    if dist <= aggro:
        enemy.engaged = True
    elif dist > deaggro:
        enemy.engaged = False

    if enemy.engaged:
        return _toward(enemy, ctx.player_x, ctx.player_y, speed)
    # Unengaged enemies drift into the arena at half speed
    return _toward(enemy, ctx.center_x, ctx.center_y, speed * 0.5)


def _most_injured_ally(enemy: Enemy, ctx: SteeringContext, threshold: float) -> Optional[Enemy]:
    target = None
    for other in ctx.enemies:
        if other.id == enemy.id or not other.is_alive:
            continue
        if other.health_ratio < threshold:
            if target is None or other.health_ratio < target.health_ratio:
                target = other
    return target


def steer(enemy: Enemy, behavior: Behavior, ctx: SteeringContext) -> Steering:
    """
    Decide an enemy's movement for this tick.

    Args:
        enemy: The enemy being updated (its engaged flag may change).
        behavior: The enemy's behaviour variant.
        ctx: Player position, arena centre and the live enemy list.

    Returns:
        Steering with a unit direction (or zero) and a speed multiplier.
    """
    match behavior:
        case Aggressive(aggro_range=aggro, deaggro_range=deaggro):
            return _chase(enemy, ctx, aggro, deaggro, 1.0)

        case Elite(aggro_range=aggro, deaggro_range=deaggro, speed_multiplier=mult):
            return _chase(enemy, ctx, aggro, deaggro, mult)

        case Defensive(aggro_range=aggro, retreat_distance=retreat):
            dist = distance(enemy.x, enemy.y, ctx.player_x, ctx.player_y)
            if dist <= aggro:
                enemy.engaged = True
                away_x, away_y = direction(ctx.player_x, ctx.player_y, enemy.x, enemy.y)
                return _toward(enemy, enemy.x + away_x * retreat, enemy.y + away_y * retreat)
            enemy.engaged = False
            return _toward(enemy, ctx.player_x, ctx.player_y)

        case Support(heal_threshold=threshold, follow_distance=follow):
            ally = _most_injured_ally(enemy, ctx, threshold)
            if ally is None:
                return _toward(enemy, ctx.player_x, ctx.player_y)
            if distance(enemy.x, enemy.y, ally.x, ally.y) <= follow:
                return Steering(state=AnimationState.SPECIAL)
            return _toward(enemy, ally.x, ally.y)

        case Swarm(cohesion_radius=radius):
            sum_x = sum_y = 0.0
            count = 0
            for other in ctx.enemies:
                if other.id == enemy.id or not other.is_alive:
                    continue
                if distance(enemy.x, enemy.y, other.x, other.y) <= radius:
                    sum_x += other.x
                    sum_y += other.y
                    count += 1
            if count == 0:
                return _toward(enemy, ctx.player_x, ctx.player_y)
            return _toward(enemy, sum_x / count, sum_y / count)

        case Ranged(attack_range=reach):
            dist = distance(enemy.x, enemy.y, ctx.player_x, ctx.player_y)
            if dist <= reach:
                enemy.engaged = True
                return Steering(state=AnimationState.ATTACKING)
            enemy.engaged = False
            return _toward(enemy, ctx.player_x, ctx.player_y)

        case Boss(enrage_threshold=threshold, enrage_speed_multiplier=mult):
            enemy.engaged = True
            speed = mult if enemy.health_ratio < threshold else 1.0
            return _toward(enemy, ctx.player_x, ctx.player_y, speed)

        case _:
            raise TypeError(f"unknown enemy behaviour: {behavior!r}")
