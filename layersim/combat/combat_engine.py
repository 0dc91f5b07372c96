"""Combat Engine for the survival arena.

The per-tick simulation loop. Each tick runs, in order:
1. Player update (movement, regeneration, status effects)
2. Enemy update (AI steering, status effects, abilities, animation)
3. Projectile update (integration, culling, expiry)
4. Spawning
5. Player attack
6. Collision (projectile hits, death sweep, contact damage)
7. Time accounting (layer clear)

All physics are scaled by the tick delta so behaviour does not depend on
frame rate. All randomness comes from the injected SeededRandom.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Iterable, Optional

from layersim.combat.ai import SteeringContext, Steering, steer
from layersim.combat.entities import (
    AbilityKind,
    AnimationState,
    DropKind,
    Enemy,
    EnemyAbility,
    EnemyArchetype,
    Projectile,
)
from layersim.combat.geometry import clamp, direction, distance, rotate
from layersim.combat.spawner import EnemySpawner
from layersim.combat.status_effects import (
    apply_status_effect,
    create_burn,
    create_poison,
    create_slow,
    create_stun,
    movement_multiplier,
    tick_status_effects,
)
from layersim.core.constants import LAYER_DURATION, get_kill_score, is_shop_layer
from layersim.core.seeded_random import SeededRandom
from layersim.data.models.effect import EffectKey

if TYPE_CHECKING:
    from layersim.core.game_state import GameState

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """Held movement directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class CombatEventType(StrEnum):
    ENEMY_SPAWNED = "enemy_spawned"
    ENEMY_KILLED = "enemy_killed"
    BOSS_DEFEATED = "boss_defeated"
    PLAYER_HIT = "player_hit"
    LAYER_CLEARED = "layer_cleared"
    GAME_OVER = "game_over"


@dataclass
class CombatEvent:
    type: CombatEventType
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, **self.data}


@dataclass
class EngineConfig:
    """
    Tunable engine parameters.

    Distances are in simulation units, speeds in units per second, times in ms.
    """
    width: float = 800.0
    height: float = 600.0
    player_margin: float = 20.0
    base_player_speed: float = 200.0
    diagonal_factor: float = 0.707
    projectile_speed: float = 300.0
    projectile_spread: float = 0.2
    projectile_size: float = 5.0
    projectile_lifetime: float = 5000.0
    contact_radius: float = 20.0
    cull_margin: float = 200.0
    max_delta_ms: float = 1000.0

    # Reward effect tuning
    execute_threshold: float = 0.4
    low_health_threshold: float = 0.3
    fast_enemy_speed: float = 100.0
    fortress_damage_bonus: float = 0.2
    fortress_damage_reduction: float = 0.15
    ramp_up_max_stacks: int = 10
    extra_projectile_every: int = 4
    chain_radius: float = 150.0
    chain_targets: int = 3
    chain_damage_ratio: float = 0.5
    explode_radius: float = 60.0
    random_proc_chance: float = 0.1
    second_wind_health: float = 0.3

    def __post_init__(self):
        self.fit_viewport(self.width, self.height)

    def fit_viewport(self, width: float, height: float) -> None:
        """Set the arena size, never smaller than the player margins allow."""
        min_size = self.player_margin * 2 + 1
        self.width = max(min_size, float(width))
        self.height = max(min_size, float(height))


@dataclass
class TickResult:
    """Outcome of one engine tick."""
    tick: int
    delta_ms: float
    skipped: bool = False
    events: list[CombatEvent] = field(default_factory=list)

    def has_event(self, event_type: CombatEventType) -> bool:
        return any(e.type == event_type for e in self.events)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "delta_ms": self.delta_ms,
            "skipped": self.skipped,
            "events": [e.to_dict() for e in self.events],
        }


def _sanitize_delta(delta_ms: float, max_delta: float) -> float:
    if delta_ms is None or math.isnan(delta_ms) or delta_ms <= 0:
        return 0.0
    return min(float(delta_ms), max_delta)


def _normalize_directions(held: Optional[Iterable[Any]]) -> set[Direction]:
    directions = set()
    for d in held or ():
        try:
            directions.add(Direction(str(d).lower()))
        except ValueError:
            logger.debug("Ignoring unknown direction %r", d)
    return directions


class CombatEngine:
    """
    Survival combat simulation engine.

    Usage:
        engine = CombatEngine(state, SeededRandom("seed"))
        result = engine.tick(16.7, {Direction.UP})

    The engine mutates the combat portion of the GameState; layer
    advancement is driven from outside through begin_layer().
    """

    def __init__(
        self,
        state: "GameState",
        rng: SeededRandom,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize combat engine.

        Args:
            state: Aggregate to mutate.
            rng: Random source; forked into combat and spawn streams.
            config: Engine parameters.
        """
        self.state = state
        self.config = config or EngineConfig()
        self.rng = rng.fork("combat")
        self.tick_count = 0
        self.attack_timer = 0.0
        self.attack_count = 0

        self._enemy_seq = 0
        self._projectile_seq = 0
        self.spawner = EnemySpawner(rng.fork("spawn"), self._next_enemy_id)
        self.spawner.reset_for_layer(state.layer)

        if state.player.x == 0 and state.player.y == 0:
            state.player.x = self.config.width / 2
            state.player.y = self.config.height / 2

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _next_enemy_id(self) -> str:
        self._enemy_seq += 1
        return f"e{self._enemy_seq}"

    def _next_projectile_id(self) -> str:
        self._projectile_seq += 1
        return f"p{self._projectile_seq}"

    def begin_layer(self, layer: int) -> None:
        """Reset the arena for a new layer."""
        state = self.state
        state.layer = layer
        state.time_remaining = LAYER_DURATION
        state.layer_cleared = False
        state.enemies.clear()
        state.projectiles.clear()
        self.attack_timer = 0.0
        self.spawner.reset_for_layer(layer)
        logger.info("Layer %d started", layer)

    def resize(self, width: float, height: float) -> None:
        """Update viewport bounds and pull the player back inside."""
        self.config.fit_viewport(width, height)
        self._clamp_player()

    def _clamp_player(self) -> None:
        cfg = self.config
        player = self.state.player
        player.x = clamp(player.x, cfg.player_margin, cfg.width - cfg.player_margin)
        player.y = clamp(player.y, cfg.player_margin, cfg.height - cfg.player_margin)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, delta_ms: float, held: Optional[Iterable[Any]] = None) -> TickResult:
        """
        Advance the simulation by one frame.

        Args:
            delta_ms: Elapsed time in milliseconds.
            held: Currently held directions.

        Returns:
            TickResult with the events emitted this tick. While paused or
            after game over only the tick counter advances.
        """
        self.tick_count += 1
        dt = _sanitize_delta(delta_ms, self.config.max_delta_ms)
        result = TickResult(tick=self.tick_count, delta_ms=dt)
        state = self.state

        if state.paused or state.game_over:
            result.skipped = True
            return result

        events = result.events
        state.elapsed_ms += dt

        self._update_player(dt, _normalize_directions(held))
        self._update_enemies(dt, events)
        if state.game_over:
            return result
        self._update_projectiles(dt)
        self._spawn(dt, events)
        self._player_attack(dt)
        self._resolve_collisions(events)
        self._sweep_dead(events)
        self._apply_contact_damage(dt, events)
        if state.game_over:
            return result
        self._update_time(dt, events)
        return result

    # ------------------------------------------------------------------
    # 1. Player
    # ------------------------------------------------------------------

    def _update_player(self, dt: float, held: set[Direction]) -> None:
        cfg = self.config
        player = self.state.player
        seconds = dt / 1000

        dx = (Direction.RIGHT in held) - (Direction.LEFT in held)
        dy = (Direction.DOWN in held) - (Direction.UP in held)
        move_x, move_y = float(dx), float(dy)
        if dx and dy:
            move_x *= cfg.diagonal_factor
            move_y *= cfg.diagonal_factor

        speed = player.move_speed * cfg.base_player_speed * movement_multiplier(player.status_effects)
        player.x += move_x * speed * seconds
        player.y += move_y * speed * seconds
        self._clamp_player()
        player.is_moving = bool(dx or dy) and speed > 0

        player.heal(player.regeneration * seconds)
        if player.is_moving and player.effects.has(EffectKey.MOVE_HEAL_TRAIL):
            player.heal(player.max_health * 0.01 * seconds)
        player.restore_energy(player.energy_regen * seconds)

        damage, healing = tick_status_effects(player.status_effects, dt)
        player.heal(healing)
        if damage > 0:
            player.take_damage(damage)

        player.animation_state = AnimationState.MOVING if player.is_moving else AnimationState.IDLE

    # ------------------------------------------------------------------
    # 2. Enemies
    # ------------------------------------------------------------------

    def _update_enemies(self, dt: float, events: list[CombatEvent]) -> None:
        cfg = self.config
        state = self.state
        player = state.player
        seconds = dt / 1000
        ctx = SteeringContext(
            player_x=player.x,
            player_y=player.y,
            center_x=cfg.width / 2,
            center_y=cfg.height / 2,
            enemies=state.enemies,
        )

        survivors = []
        for enemy in state.enemies:
            steering = steer(enemy, enemy.behavior, ctx) if enemy.behavior else Steering()
            speed = enemy.move_speed * steering.speed_multiplier * movement_multiplier(enemy.status_effects)
            enemy.vx = steering.dx * speed
            enemy.vy = steering.dy * speed
            enemy.x += enemy.vx * seconds
            enemy.y += enemy.vy * seconds
            enemy.animation_state = steering.state

            damage, healing = tick_status_effects(enemy.status_effects, dt)
            enemy.heal(healing)
            enemy.take_damage(damage)

            for ability in enemy.abilities:
                ability.tick(dt)
                if ability.is_ready and enemy.is_alive and not state.game_over:
                    self._use_ability(enemy, ability, events)

            enemy.advance_animation(dt)

            if self._is_culled(enemy):
                logger.debug("Culled %s at (%.0f, %.0f)", enemy.id, enemy.x, enemy.y)
                continue
            survivors.append(enemy)

        state.enemies[:] = survivors

    def _is_culled(self, enemy: Enemy) -> bool:
        margin = self.config.cull_margin
        return (
            enemy.x < -margin
            or enemy.y < -margin
            or enemy.x > self.config.width + margin
            or enemy.y > self.config.height + margin
        )

    def _use_ability(self, enemy: Enemy, ability: EnemyAbility, events: list[CombatEvent]) -> None:
        player = self.state.player
        dist = distance(enemy.x, enemy.y, player.x, player.y)

        match ability.kind:
            case AbilityKind.STRIKE:
                if dist > ability.range:
                    return
                enemy.animation_state = AnimationState.ATTACKING
                self._damage_player(ability.damage, enemy.id, events)
            case AbilityKind.ROAR:
                if dist > ability.range:
                    return
                enemy.animation_state = AnimationState.SPECIAL
                if not player.effects.has(EffectKey.CC_IMMUNITY):
                    apply_status_effect(player.status_effects, create_slow(0.3, 2000, enemy.id))
            case AbilityKind.FORTIFY:
                if enemy.health >= enemy.max_health:
                    return
                enemy.heal(enemy.max_health * 0.15)
            case AbilityKind.HEAL_ALLIES:
                allies = [
                    other for other in self.state.enemies
                    if other.id != enemy.id
                    and other.is_alive
                    and other.health < other.max_health
                    and distance(enemy.x, enemy.y, other.x, other.y) <= ability.range
                ]
                if not allies:
                    return
                enemy.animation_state = AnimationState.SPECIAL
                for ally in allies:
                    ally.heal(ability.damage)
            case kind:
                raise TypeError(f"unhandled ability kind {kind}")

        ability.trigger()

    # ------------------------------------------------------------------
    # 3. Projectiles
    # ------------------------------------------------------------------

    def _update_projectiles(self, dt: float) -> None:
        seconds = dt / 1000
        now = self.state.elapsed_ms
        width, height = self.config.width, self.config.height

        alive = []
        for p in self.state.projectiles:
            p.x += p.vx * seconds
            p.y += p.vy * seconds
            if p.x < 0 or p.y < 0 or p.x > width or p.y > height:
                continue
            if p.is_expired(now):
                continue
            alive.append(p)
        self.state.projectiles[:] = alive

    # ------------------------------------------------------------------
    # 4. Spawning
    # ------------------------------------------------------------------

    def _spawn(self, dt: float, events: list[CombatEvent]) -> None:
        enemy = self.spawner.update(dt, self.state.enemies, self.config.width, self.config.height)
        if enemy is None:
            return
        self.state.enemies.append(enemy)
        events.append(CombatEvent(
            CombatEventType.ENEMY_SPAWNED,
            {"enemy_id": enemy.id, "archetype": enemy.archetype.value},
        ))

    # ------------------------------------------------------------------
    # 5. Player attack
    # ------------------------------------------------------------------

    def find_nearest_enemy(self) -> Optional[Enemy]:
        """Nearest live enemy; the first one found wins exact ties."""
        player = self.state.player
        nearest = None
        best = math.inf
        for enemy in self.state.enemies:
            if not enemy.is_alive:
                continue
            d = distance(player.x, player.y, enemy.x, enemy.y)
            if d < best:
                best = d
                nearest = enemy
        return nearest

    def _player_attack(self, dt: float) -> None:
        player = self.state.player
        interval = 1000 / max(player.attack_speed, 0.01)
        self.attack_timer = min(self.attack_timer + dt, interval)
        if self.attack_timer < interval:
            return

        target = self.find_nearest_enemy()
        if target is None:
            return
        aim_x, aim_y = direction(player.x, player.y, target.x, target.y)
        if aim_x == 0 and aim_y == 0:
            return

        self.attack_timer = 0.0
        self.attack_count += 1
        self.fire_volley(aim_x, aim_y)

    def _volley_size(self) -> int:
        player = self.state.player
        count = player.projectile_count
        extra = player.effects.count(EffectKey.ON_ATTACK_EXTRA_PROJECTILE)
        if extra and self.attack_count % self.config.extra_projectile_every == 0:
            count += extra
        return max(1, count)

    def _outgoing_damage(self) -> float:
        """Projectile base damage including global multipliers."""
        cfg = self.config
        player = self.state.player
        bag = player.effects
        damage = player.damage * (1 + bag.value(EffectKey.ALL_DAMAGE_PCT))
        if bag.has(EffectKey.FORTRESS_MASTER) and not player.is_moving:
            damage *= 1 + cfg.fortress_damage_bonus
        ramp = bag.value(EffectKey.ON_KILL_RAMP_UP)
        if ramp:
            damage *= 1 + ramp * min(player.combo_count, cfg.ramp_up_max_stacks)
        burst = bag.value(EffectKey.BOSS_REVEAL_BURST)
        if burst and any(e.is_boss for e in self.state.enemies):
            damage *= 1 + burst
        return max(0.0, damage)

    def fire_volley(self, aim_x: float, aim_y: float) -> list[Projectile]:
        """
        Fire the player's projectiles around an aim direction.

        Projectile i is rotated by (i - (n-1)/2) * spread radians.
        """
        cfg = self.config
        player = self.state.player
        n = self._volley_size()
        base_damage = self._outgoing_damage()

        fired = []
        for i in range(n):
            angle = (i - (n - 1) / 2) * cfg.projectile_spread
            dx, dy = rotate(aim_x, aim_y, angle)
            is_crit = self.rng.chance(player.crit_chance)
            damage = base_damage * player.crit_damage if is_crit else base_damage
            projectile = Projectile(
                id=self._next_projectile_id(),
                x=player.x,
                y=player.y,
                vx=dx * cfg.projectile_speed,
                vy=dy * cfg.projectile_speed,
                damage=damage,
                max_pierce=player.pierce,
                size=cfg.projectile_size,
                created_at=self.state.elapsed_ms,
                lifetime=cfg.projectile_lifetime,
                is_crit=is_crit,
            )
            fired.append(projectile)
        self.state.projectiles.extend(fired)
        return fired

    # ------------------------------------------------------------------
    # 6. Collision
    # ------------------------------------------------------------------

    def _target_multiplier(self, enemy: Enemy, is_crit: bool) -> float:
        cfg = self.config
        bag = self.state.player.effects
        mult = 1.0
        if enemy.is_elite:
            mult += bag.value(EffectKey.ELITE_DAMAGE_PCT)
            if is_crit:
                mult += bag.value(EffectKey.CRIT_ELITE_DAMAGE)
        if enemy.is_boss:
            mult += bag.value(EffectKey.BOSS_DAMAGE_PCT)
        if enemy.archetype == EnemyArchetype.TANK:
            mult += bag.value(EffectKey.VS_TANK_BONUS)
        if enemy.archetype == EnemyArchetype.SWARM:
            mult += bag.value(EffectKey.VS_SWARM_BONUS)
        if enemy.move_speed > cfg.fast_enemy_speed:
            mult += bag.value(EffectKey.VS_FAST_BONUS)
        if enemy.health_ratio < cfg.execute_threshold:
            mult += bag.value(EffectKey.EXECUTE_BONUS)
        return max(0.0, mult)

    @staticmethod
    def _mitigate(amount: float, armor: float) -> float:
        return amount * 100 / (100 + max(armor, -50.0))

    def _resolve_collisions(self, events: list[CombatEvent]) -> None:
        state = self.state
        for projectile in state.projectiles:
            for enemy in state.enemies:
                if not enemy.is_alive or enemy.id in projectile.hit_ids:
                    continue
                reach = projectile.size + enemy.size
                if distance(projectile.x, projectile.y, enemy.x, enemy.y) > reach:
                    continue
                self.hit_enemy(projectile, enemy)
                if projectile.is_spent:
                    break
        state.projectiles[:] = [p for p in state.projectiles if not p.is_spent]

    def hit_enemy(self, projectile: Projectile, enemy: Enemy) -> float:
        """
        Resolve one projectile hit.

        Each projectile hits a given enemy at most once; the pierce counter
        advances even when the hit is dodged.

        Returns:
            Damage dealt.
        """
        player = self.state.player
        projectile.register_hit(enemy.id)
        if self.rng.chance(enemy.dodge_chance):
            return 0.0

        raw = projectile.damage * self._target_multiplier(enemy, projectile.is_crit)
        dealt = enemy.take_damage(self._mitigate(raw, enemy.armor))
        if player.lifesteal > 0:
            player.heal(dealt * player.lifesteal)
        self._apply_on_hit(projectile, enemy, dealt)
        return dealt

    def _proc(self, chance: float) -> bool:
        """Roll a proc chance, twice with the dual proc flag."""
        if chance <= 0:
            return False
        rolls = 2 if self.state.player.effects.has(EffectKey.DUAL_SPECIAL_PROC) else 1
        return any(self.rng.chance(chance) for _ in range(rolls))

    def _apply_on_hit(self, projectile: Projectile, enemy: Enemy, dealt: float) -> None:
        cfg = self.config
        bag = self.state.player.effects
        aoe = 1 + bag.value(EffectKey.AOE_RADIUS_PCT)

        if bag.has(EffectKey.ON_HIT_POISON):
            # 50% of the hit over 3 seconds
            apply_status_effect(enemy.status_effects, create_poison(projectile.damage * 0.5 / 3, 3000, "poison"))
        if bag.has(EffectKey.ON_HIT_BURN):
            apply_status_effect(enemy.status_effects, create_burn(projectile.damage * 0.2, 2000, "burn"))
        if self._proc(bag.value(EffectKey.ON_HIT_FREEZE)):
            apply_status_effect(enemy.status_effects, create_stun(1500, "freeze"))
        if bag.has(EffectKey.RANDOM_SPECIAL_PROC) and self._proc(cfg.random_proc_chance):
            pick = self.rng.random_int(3)
            if pick == 0:
                effect = create_poison(projectile.damage * 0.5 / 3, 3000, "chaos")
            elif pick == 1:
                effect = create_burn(projectile.damage * 0.2, 2000, "chaos")
            else:
                effect = create_slow(0.5, 2000, "chaos")
            apply_status_effect(enemy.status_effects, effect)

        if dealt <= 0:
            return
        if self._proc(bag.value(EffectKey.ON_HIT_CHAIN_LIGHTNING)):
            targets = self._enemies_near(enemy, cfg.chain_radius * aoe)[: cfg.chain_targets]
            for target in targets:
                target.take_damage(self._mitigate(dealt * cfg.chain_damage_ratio, target.armor))
        explode = bag.value(EffectKey.ON_CRIT_EXPLODE)
        if projectile.is_crit and explode > 0:
            for target in self._enemies_near(enemy, cfg.explode_radius * aoe):
                target.take_damage(self._mitigate(dealt * explode, target.armor))

    def _enemies_near(self, origin: Enemy, radius: float) -> list[Enemy]:
        """Live enemies within radius of origin, nearest first."""
        nearby = []
        for enemy in self.state.enemies:
            if enemy.id == origin.id or not enemy.is_alive:
                continue
            d = distance(origin.x, origin.y, enemy.x, enemy.y)
            if d <= radius:
                nearby.append((d, enemy))
        nearby.sort(key=lambda pair: pair[0])
        return [enemy for _, enemy in nearby]

    def _sweep_dead(self, events: list[CombatEvent]) -> None:
        """Remove dead enemies, awarding score exactly once each."""
        state = self.state
        dead = [e for e in state.enemies if not e.is_alive]
        if not dead:
            return
        state.enemies[:] = [e for e in state.enemies if e.is_alive]
        for enemy in dead:
            self._on_enemy_killed(enemy, events)

    def _on_enemy_killed(self, enemy: Enemy, events: list[CombatEvent]) -> None:
        state = self.state
        player = state.player
        bag = player.effects

        enemy.animation_state = AnimationState.DYING
        points = get_kill_score(state.layer)
        state.score += points
        state.kills += 1
        player.register_kill()

        for drop in enemy.drops:
            if not self.rng.chance(drop.chance):
                continue
            match drop.kind:
                case DropKind.EXPERIENCE:
                    player.add_experience(drop.value * (1 + bag.value(EffectKey.XP_BONUS_PCT)))
                case DropKind.HEALTH:
                    player.heal(drop.value)
                case DropKind.ENERGY:
                    player.restore_energy(drop.value)

        if bag.has(EffectKey.ON_KILL_HEAL_ORB):
            player.heal(player.max_health * 0.05)
        if enemy.archetype == EnemyArchetype.SWARM and bag.has(EffectKey.HEAL_ON_SUMMONED_KILL):
            player.heal(2.0)
        if enemy.is_elite or enemy.is_boss:
            player.heal(player.max_health * bag.value(EffectKey.ON_ELITE_KILL_BONUS))
            player.damage += bag.count(EffectKey.ELITE_KILL_PERMA_STACK)

        events.append(CombatEvent(
            CombatEventType.ENEMY_KILLED,
            {
                "enemy_id": enemy.id,
                "archetype": enemy.archetype.value,
                "score": points,
                "animation_state": enemy.animation_state.value,
            },
        ))

        if enemy.is_boss:
            state.boss_defeated_layer = state.layer
            events.append(CombatEvent(CombatEventType.BOSS_DEFEATED, {"enemy_id": enemy.id, "layer": state.layer}))
            logger.info("Boss %s defeated on layer %d", enemy.id, state.layer)

    def _apply_contact_damage(self, dt: float, events: list[CombatEvent]) -> None:
        player = self.state.player
        seconds = dt / 1000
        total = 0.0
        for enemy in self.state.enemies:
            reach = self.config.contact_radius + enemy.size
            if distance(player.x, player.y, enemy.x, enemy.y) <= reach:
                total += enemy.damage * seconds
        if total > 0:
            self._damage_player(total, "contact", events)
            player.break_combo()

    def _damage_player(self, raw: float, source: str, events: list[CombatEvent]) -> float:
        """
        Apply incoming damage after mitigation.

        Armor scales by 100 / (100 + armor); dodge and block apply as their
        expected value. Reaching zero health ends the game unless a second
        wind charge is available.
        """
        cfg = self.config
        state = self.state
        player = state.player
        bag = player.effects
        if state.game_over or raw <= 0:
            return 0.0

        amount = self._mitigate(raw, player.armor)
        amount *= (1 - player.dodge_chance) * (1 - player.block_chance)
        if player.health_ratio < cfg.low_health_threshold:
            amount *= 1 - min(0.9, bag.value(EffectKey.LOW_HP_DAMAGE_REDUCTION))
        if bag.has(EffectKey.FORTRESS_MASTER) and not player.is_moving:
            amount *= 1 - cfg.fortress_damage_reduction

        taken = player.take_damage(amount)
        if taken > 0:
            events.append(CombatEvent(CombatEventType.PLAYER_HIT, {"source": source, "damage": taken}))

        if player.health <= 0:
            if bag.count(EffectKey.SECOND_WIND) > 0:
                bag.add_count(EffectKey.SECOND_WIND, -1)
                player.health = player.max_health * cfg.second_wind_health
                logger.info("Second wind triggered on layer %d", state.layer)
            else:
                state.game_over = True
                events.append(CombatEvent(
                    CombatEventType.GAME_OVER,
                    {"layer": state.layer, "score": state.score},
                ))
                logger.info("Game over on layer %d with score %d", state.layer, state.score)
        return taken

    # ------------------------------------------------------------------
    # 7. Time
    # ------------------------------------------------------------------

    def _update_time(self, dt: float, events: list[CombatEvent]) -> None:
        state = self.state
        if state.layer_cleared:
            return
        state.time_remaining -= dt / 1000
        if state.time_remaining > 0:
            return
        state.time_remaining = 0.0
        state.layer_cleared = True
        events.append(CombatEvent(
            CombatEventType.LAYER_CLEARED,
            {
                "layer": state.layer,
                "is_shop_layer": is_shop_layer(state.layer),
                "is_boss_layer": state.boss_defeated_layer == state.layer,
            },
        ))
        logger.info("Layer %d cleared (score %d)", state.layer, state.score)
