"""Entity model for the survival arena.

Player, Enemy and Projectile state records. Mutation helpers keep the
numeric invariants (health within [0, max_health], chances within [0, 1])
so the combat loop never has to re-check them.
"""

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any, Optional

from layersim.combat.status_effects import StatusEffect
from layersim.core.constants import (
    COMBO_STEP,
    MAX_COMBO_MULTIPLIER,
    PLAYER_DEFAULTS,
    get_required_experience,
)
from layersim.core.effects import EffectBag

if TYPE_CHECKING:
    from layersim.combat.ai import Behavior

# Animation frames advance every 100 ms and wrap after 4 frames
ANIMATION_FRAME_MS = 100.0
ANIMATION_FRAME_COUNT = 4


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


class AnimationState(StrEnum):
    """Animation/behaviour mode of an entity."""
    IDLE = "idle"
    MOVING = "moving"
    ATTACKING = "attacking"
    SPECIAL = "special"
    HIT = "hit"
    DYING = "dying"


class EnemyArchetype(StrEnum):
    NORMAL = "normal"
    ELITE = "elite"
    BOSS = "boss"
    SWARM = "swarm"
    RANGED = "ranged"
    TANK = "tank"
    ASSASSIN = "assassin"
    SUPPORT = "support"


class AbilityKind(Enum):
    """What an enemy ability does when it fires."""
    STRIKE = "strike"            # Damage the player within range
    ROAR = "roar"                # Slow the player within range
    FORTIFY = "fortify"          # Restore own health
    HEAL_ALLIES = "heal_allies"  # Restore health to allies within range


class DropKind(StrEnum):
    EXPERIENCE = "experience"
    HEALTH = "health"
    ENERGY = "energy"


@dataclass
class EnemyAbility:
    """
    Enemy ability with a cooldown.

    Attributes:
        id: Ability identifier.
        kind: Effect when fired.
        cooldown: Cooldown in ms.
        range: Reach in units (0 for self-targeted).
        damage: Damage dealt, or health restored for healing kinds.
        countdown: Remaining cooldown; usable when <= 0.
    """
    id: str
    kind: AbilityKind
    cooldown: float
    range: float
    damage: float
    countdown: float = 0.0

    @property
    def is_ready(self) -> bool:
        return self.countdown <= 0

    def tick(self, delta_ms: float) -> None:
        if self.countdown > 0:
            self.countdown = max(0.0, self.countdown - delta_ms)

    def trigger(self) -> None:
        self.countdown = self.cooldown


@dataclass(frozen=True)
class DropEntry:
    """Loot entry rolled once when an enemy dies."""
    id: str
    kind: DropKind
    value: float
    chance: float


# =============================================================================
# PLAYER
# =============================================================================


@dataclass
class Player:
    """
    The player character.

    Stats start from PLAYER_DEFAULTS; rewards and passives mutate them via
    the effect interpreter.
    """
    x: float = 0.0
    y: float = 0.0
    health: float = PLAYER_DEFAULTS["health"]
    max_health: float = PLAYER_DEFAULTS["max_health"]
    damage: float = PLAYER_DEFAULTS["damage"]
    attack_speed: float = PLAYER_DEFAULTS["attack_speed"]
    crit_chance: float = PLAYER_DEFAULTS["crit_chance"]
    crit_damage: float = PLAYER_DEFAULTS["crit_damage"]
    projectile_count: int = int(PLAYER_DEFAULTS["projectile_count"])
    pierce: int = int(PLAYER_DEFAULTS["pierce"])
    move_speed: float = PLAYER_DEFAULTS["move_speed"]
    lifesteal: float = PLAYER_DEFAULTS["lifesteal"]
    regeneration: float = PLAYER_DEFAULTS["regeneration"]
    armor: float = PLAYER_DEFAULTS["armor"]
    magic_resistance: float = PLAYER_DEFAULTS["magic_resistance"]
    dodge_chance: float = PLAYER_DEFAULTS["dodge_chance"]
    block_chance: float = PLAYER_DEFAULTS["block_chance"]
    energy: float = PLAYER_DEFAULTS["energy"]
    max_energy: float = PLAYER_DEFAULTS["max_energy"]
    energy_regen: float = PLAYER_DEFAULTS["energy_regen"]

    # Progression
    experience: float = 0.0
    level: int = 1
    combo_count: int = 0
    max_combo: int = 0

    status_effects: list[StatusEffect] = field(default_factory=list)
    acquired_rewards: list[str] = field(default_factory=list)
    effects: EffectBag = field(default_factory=EffectBag)

    animation_state: AnimationState = AnimationState.IDLE
    animation_frame: int = 0
    animation_timer: float = 0.0
    is_moving: bool = False

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def health_ratio(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health

    @property
    def combo_multiplier(self) -> float:
        return min(MAX_COMBO_MULTIPLIER, 1.0 + COMBO_STEP * self.combo_count)

    def clamp_stats(self) -> None:
        """Re-establish stat invariants after a mutation."""
        self.max_health = max(1.0, self.max_health)
        self.health = min(self.max_health, max(0.0, self.health))
        self.crit_chance = _clamp01(self.crit_chance)
        self.dodge_chance = _clamp01(self.dodge_chance)
        self.block_chance = _clamp01(self.block_chance)
        self.energy = min(self.max_energy, max(0.0, self.energy))

    def heal(self, amount: float) -> float:
        """Heal up to max health. Returns the amount actually restored."""
        if amount <= 0 or not self.is_alive:
            return 0.0
        before = self.health
        self.health = min(self.max_health, self.health + amount)
        return self.health - before

    def take_damage(self, amount: float) -> float:
        """Lose health, floored at zero. Returns the damage taken."""
        if amount <= 0:
            return 0.0
        before = self.health
        self.health = max(0.0, self.health - amount)
        return before - self.health

    def restore_energy(self, amount: float) -> None:
        self.energy = min(self.max_energy, self.energy + amount)

    def add_experience(self, amount: float) -> int:
        """
        Gain experience, levelling up as thresholds are crossed.

        Returns:
            Number of levels gained.
        """
        self.experience += amount
        gained = 0
        while self.experience >= get_required_experience(self.level):
            self.experience -= get_required_experience(self.level)
            self.level += 1
            gained += 1
        return gained

    def register_kill(self) -> None:
        self.combo_count += 1
        self.max_combo = max(self.max_combo, self.combo_count)

    def break_combo(self) -> None:
        self.combo_count = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "health": self.health,
            "max_health": self.max_health,
            "damage": self.damage,
            "attack_speed": self.attack_speed,
            "crit_chance": self.crit_chance,
            "crit_damage": self.crit_damage,
            "projectile_count": self.projectile_count,
            "pierce": self.pierce,
            "move_speed": self.move_speed,
            "lifesteal": self.lifesteal,
            "regeneration": self.regeneration,
            "armor": self.armor,
            "magic_resistance": self.magic_resistance,
            "dodge_chance": self.dodge_chance,
            "block_chance": self.block_chance,
            "energy": self.energy,
            "max_energy": self.max_energy,
            "experience": self.experience,
            "level": self.level,
            "combo_count": self.combo_count,
            "combo_multiplier": self.combo_multiplier,
            "status_effects": [e.to_dict() for e in self.status_effects],
            "acquired_rewards": list(self.acquired_rewards),
            "effects": self.effects.to_dict(),
            "animation_state": self.animation_state.value,
        }


# =============================================================================
# ENEMY
# =============================================================================


@dataclass
class Enemy:
    """A hostile unit. Created by the spawner, removed on death or cull."""
    id: str
    archetype: EnemyArchetype = EnemyArchetype.NORMAL
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    health: float = 20.0
    max_health: float = 20.0
    damage: float = 10.0
    move_speed: float = 50.0
    size: float = 15.0
    attack_range: float = 30.0
    armor: float = 0.0
    dodge_chance: float = 0.0
    experience_value: float = 0.0
    behavior: Optional["Behavior"] = None
    abilities: list[EnemyAbility] = field(default_factory=list)
    drops: list[DropEntry] = field(default_factory=list)
    status_effects: list[StatusEffect] = field(default_factory=list)

    # Aggro hysteresis state
    engaged: bool = False

    animation_state: AnimationState = AnimationState.IDLE
    animation_frame: int = 0
    animation_timer: float = 0.0

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def is_boss(self) -> bool:
        return self.archetype == EnemyArchetype.BOSS

    @property
    def is_elite(self) -> bool:
        return self.archetype == EnemyArchetype.ELITE

    @property
    def health_ratio(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health

    def take_damage(self, amount: float) -> float:
        """
        Apply damage, floored at zero health.

        Returns:
            Damage actually dealt.
        """
        if amount <= 0:
            return 0.0
        before = self.health
        self.health = max(0.0, self.health - amount)
        if self.health > 0:
            self.animation_state = AnimationState.HIT
        else:
            self.animation_state = AnimationState.DYING
        return before - self.health

    def heal(self, amount: float) -> None:
        if self.is_alive:
            self.health = min(self.max_health, self.health + amount)

    def advance_animation(self, delta_ms: float) -> None:
        self.animation_timer += delta_ms
        while self.animation_timer >= ANIMATION_FRAME_MS:
            self.animation_timer -= ANIMATION_FRAME_MS
            self.animation_frame = (self.animation_frame + 1) % ANIMATION_FRAME_COUNT

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "archetype": self.archetype.value,
            "x": self.x,
            "y": self.y,
            "health": self.health,
            "max_health": self.max_health,
            "damage": self.damage,
            "size": self.size,
            "behavior": type(self.behavior).__name__.lower() if self.behavior else None,
            "engaged": self.engaged,
            "status_effects": [e.to_dict() for e in self.status_effects],
            "animation_state": self.animation_state.value,
            "animation_frame": self.animation_frame,
        }


# =============================================================================
# PROJECTILE
# =============================================================================


@dataclass
class Projectile:
    """
    Player projectile.

    Destroyed once pierce exceeds max_pierce, its lifetime runs out, or it
    leaves the viewport.
    """
    id: str
    x: float
    y: float
    vx: float
    vy: float
    damage: float
    max_pierce: int = 0
    pierce: int = 0
    size: float = 5.0
    created_at: float = 0.0
    lifetime: float = 5000.0
    is_crit: bool = False
    hit_ids: set[str] = field(default_factory=set)

    @property
    def is_spent(self) -> bool:
        return self.pierce > self.max_pierce

    def is_expired(self, now_ms: float) -> bool:
        return now_ms - self.created_at >= self.lifetime

    def register_hit(self, enemy_id: str) -> None:
        self.hit_ids.add(enemy_id)
        self.pierce += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "damage": self.damage,
            "pierce": self.pierce,
            "max_pierce": self.max_pierce,
            "is_crit": self.is_crit,
        }
