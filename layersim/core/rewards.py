"""Reward Generator.

Weighted sampling of reward offers from the rarity pools:
- Boss rewards: legendary pool only, recent offers excluded then backfilled
- Shop rewards: per-slot rarity roll by layer, fallback through the pools,
  forced green pick as the last resort

Every call takes the RNG explicitly so results are reproducible per seed.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from functools import partial
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from layersim.core.constants import (
    SHOP_MAX_ATTEMPTS,
    SHOP_SIZE,
    SYNERGY_ATTACK_SPEED_THRESHOLD,
    SYNERGY_CRIT_THRESHOLD,
    SYNERGY_WEIGHT_BONUS,
    get_boss_candidate_count,
    get_shop_odds,
    get_tier_multiplier,
)
from layersim.core.seeded_random import SeededRandom
from layersim.data.loaders.reward_loader import load_pool
from layersim.data.models.reward import RewardCategory, RewardOption

logger = logging.getLogger(__name__)

# Shop rarity order (also the fallback order)
SHOP_RARITY_ORDER: tuple[RewardCategory, ...] = (
    RewardCategory.ATTRIBUTE,
    RewardCategory.SPECIAL,
    RewardCategory.EPIC,
    RewardCategory.LEGENDARY,
)

RewardPools = Mapping[RewardCategory, Sequence[RewardOption]]


@dataclass
class PlayerStats:
    """Build snapshot used to bias reward weights."""
    damage: float = 10.0
    attack_speed: float = 1.0
    crit_chance: float = 0.0
    projectiles: int = 1
    pierce: int = 0
    move_speed: float = 1.0

    @classmethod
    def from_player(cls, player: Any) -> "PlayerStats":
        return cls(
            damage=player.damage,
            attack_speed=player.attack_speed,
            crit_chance=player.crit_chance,
            projectiles=player.projectile_count,
            pierce=player.pierce,
            move_speed=player.move_speed,
        )


@dataclass
class RewardContext:
    """Inputs that shape a generation call."""
    layer: int
    player_stats: Optional[PlayerStats] = None
    recent_offered_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GeneratedReward:
    """A catalog entry with its layer-scaled value."""
    option: RewardOption
    scaled_value: Optional[float] = None

    @property
    def id(self) -> str:
        return self.option.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.option.id,
            "name": self.option.name,
            "description": self.option.description,
            "category": self.option.category.value,
            "color": self.option.color.value,
            "effect_key": self.option.effect_key.value,
            "scaled_value": self.scaled_value,
            "debuff": self.option.debuff.model_dump(mode="json") if self.option.debuff else None,
        }


class GenerationOutcome(Enum):
    """How a generation call was satisfied."""
    COMPLETE = "complete"    # All exclusions honoured
    PARTIAL = "partial"      # Recent-offer exclusions relaxed, or pool smaller than requested
    FORCED = "forced"        # At least one slot needed the forced green pick
    EXHAUSTED = "exhausted"  # Forced pick had to repeat an id, or nothing was available


_OUTCOME_RANK = {
    GenerationOutcome.COMPLETE: 0,
    GenerationOutcome.PARTIAL: 1,
    GenerationOutcome.FORCED: 2,
    GenerationOutcome.EXHAUSTED: 3,
}


def _worst(a: GenerationOutcome, b: GenerationOutcome) -> GenerationOutcome:
    return a if _OUTCOME_RANK[a] >= _OUTCOME_RANK[b] else b


@dataclass
class GenerationResult:
    """Rewards produced by a generation call plus how they were obtained."""
    rewards: list[GeneratedReward]
    requested: int
    outcome: GenerationOutcome = GenerationOutcome.COMPLETE
    attempts: int = 0

    def __len__(self) -> int:
        return len(self.rewards)

    def __iter__(self):
        return iter(self.rewards)

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.rewards]


# =============================================================================
# PRIMITIVES
# =============================================================================


def weighted_sample(
    pool: Sequence[RewardOption],
    count: int,
    exclude: Iterable[str],
    rng: SeededRandom,
    adjust_weight: Optional[Callable[[RewardOption], float]] = None,
) -> list[RewardOption]:
    """
    Sample up to `count` distinct options by weight.

    Weights are floored integers with a minimum of 1. Each pick joins the
    exclusion set for the remaining picks, so no id repeats within a call.

    Args:
        pool: Candidate options.
        count: Number of picks wanted.
        exclude: Ids never to pick.
        rng: Random source.
        adjust_weight: Optional weight override per option.

    Returns:
        Picked options (shorter than count when candidates run out).
    """
    excluded = set(exclude)
    picked: list[RewardOption] = []
    for _ in range(count):
        candidates = [opt for opt in pool if opt.id not in excluded]
        if not candidates:
            break
        weights = [
            max(1, math.floor(adjust_weight(opt) if adjust_weight else opt.weight))
            for opt in candidates
        ]
        choice = candidates[rng.weighted_choice(weights)]
        picked.append(choice)
        excluded.add(choice.id)
    return picked


def pick_tier_value(option: RewardOption, layer: int) -> Optional[float]:
    """
    Scale a reward's value for the current layer.

    Tiered rewards pick a tier by layer (last at 20+, upper third at 15+,
    lower third at 10+, first otherwise); the value is then multiplied by
    the layer multiplier. Flat values are only multiplied.
    """
    multiplier = get_tier_multiplier(layer)
    if option.tiers:
        n = len(option.tiers)
        if layer >= 20:
            index = n - 1
        elif layer >= 15:
            index = min(n - 1, math.ceil(n * 0.67) - 1)
        elif layer >= 10:
            index = min(n - 1, math.ceil(n * 0.34) - 1)
        else:
            index = 0
        return option.tiers[index] * multiplier
    if option.base_value is not None:
        return option.base_value * multiplier
    return None


def synergy_adjust(option: RewardOption, ctx: Optional[RewardContext]) -> float:
    """Bias an option's weight toward the player's current build."""
    weight = option.weight or 1
    if ctx is None or ctx.player_stats is None:
        return weight

    stats = ctx.player_stats
    key = option.effect_key.value
    if stats.attack_speed > SYNERGY_ATTACK_SPEED_THRESHOLD:
        if "projectile" in key or "attack_speed" in key:
            weight += SYNERGY_WEIGHT_BONUS
    if stats.crit_chance > SYNERGY_CRIT_THRESHOLD:
        if "crit" in key or "pierce" in key:
            weight += SYNERGY_WEIGHT_BONUS
    return max(1, weight)


def default_pools() -> dict[RewardCategory, Sequence[RewardOption]]:
    return {category: load_pool(category) for category in RewardCategory}


# =============================================================================
# GENERATOR
# =============================================================================


class RewardGenerator:
    """
    Produces boss and shop offers from the rarity pools.

    Usage:
        generator = RewardGenerator(SeededRandom("seed"))
        result = generator.generate_boss_rewards(RewardContext(layer=5))
    """

    def __init__(self, rng: SeededRandom, pools: Optional[RewardPools] = None):
        self.rng = rng
        self.pools: RewardPools = pools if pools is not None else default_pools()

    def _pool(self, category: RewardCategory) -> Sequence[RewardOption]:
        return self.pools.get(category, ())

    def _generated(self, options: Iterable[RewardOption], layer: int) -> list[GeneratedReward]:
        return [GeneratedReward(opt, pick_tier_value(opt, layer)) for opt in options]

    def generate_boss_rewards(
        self,
        ctx: RewardContext,
        selection_overrides: Optional[dict[int, int]] = None,
    ) -> GenerationResult:
        """
        Generate boss reward candidates from the legendary pool.

        Recently offered ids are avoided first; if that leaves too few
        candidates, the rest of the pool backfills. The result length is
        min(requested, pool size).
        """
        layer = ctx.layer
        requested = get_boss_candidate_count(layer, selection_overrides)
        pool = self._pool(RewardCategory.LEGENDARY)
        adjust = partial(synergy_adjust, ctx=ctx)

        picked = weighted_sample(pool, requested, ctx.recent_offered_ids, self.rng, adjust)
        outcome = GenerationOutcome.COMPLETE
        if len(picked) < requested:
            backfill = weighted_sample(
                pool, requested - len(picked), [o.id for o in picked], self.rng, adjust
            )
            if backfill:
                outcome = GenerationOutcome.PARTIAL
            picked.extend(backfill)

        if not picked and requested > 0:
            outcome = GenerationOutcome.EXHAUSTED
            logger.warning("Boss reward pool empty for layer %d", layer)
        elif len(picked) < requested:
            outcome = GenerationOutcome.PARTIAL
            logger.warning(
                "Boss reward pool too small for layer %d: %d of %d",
                layer, len(picked), requested,
            )

        return GenerationResult(self._generated(picked, layer), requested, outcome)

    def generate_shop_rewards(
        self,
        ctx: RewardContext,
        count: int = SHOP_SIZE,
        exclude_ids: Iterable[str] = (),
    ) -> GenerationResult:
        """
        Generate shop offers, always exactly `count` of them.

        Per slot: roll a rarity from the layer's odds, sample that pool, then
        fall back green, blue, purple, gold. Recent offers are avoided first
        and relaxed if needed. After SHOP_MAX_ATTEMPTS pool tries the slot
        gets a forced, unweighted green pick.

        Args:
            ctx: Layer, player stats and recently offered ids.
            count: Number of slots to fill.
            exclude_ids: Ids that must not be offered (e.g. locked slots).
        """
        layer = ctx.layer
        odds = get_shop_odds(layer)
        adjust = partial(synergy_adjust, ctx=ctx)
        taken = set(exclude_ids)
        recent = set(ctx.recent_offered_ids)

        picked: list[RewardOption] = []
        outcome = GenerationOutcome.COMPLETE
        total_attempts = 0

        for slot in range(count):
            rolled = SHOP_RARITY_ORDER[self.rng.weighted_choice(odds)]
            order = [rolled] + [c for c in SHOP_RARITY_ORDER if c != rolled]
            choice = None
            attempts = 0

            # Cycle the fallback order; recent offers are allowed after the first sweep.
            while choice is None and attempts < SHOP_MAX_ATTEMPTS:
                avoid_recent = attempts < len(order)
                category = order[attempts % len(order)]
                attempts += 1
                exclude = taken | recent if avoid_recent else taken
                sample = weighted_sample(self._pool(category), 1, exclude, self.rng, adjust)
                if sample:
                    choice = sample[0]
                    if not avoid_recent:
                        outcome = _worst(outcome, GenerationOutcome.PARTIAL)

            total_attempts += attempts
            if choice is None:
                choice, slot_outcome = self._force_green(taken)
                outcome = _worst(outcome, slot_outcome)
                logger.warning(
                    "Shop slot %d on layer %d forced after %d attempts (%s)",
                    slot, layer, attempts, slot_outcome.value,
                )
            if choice is None:
                break

            picked.append(choice)
            taken.add(choice.id)

        if len(picked) < count:
            outcome = GenerationOutcome.EXHAUSTED
            logger.warning("Shop generation exhausted on layer %d: %d of %d", layer, len(picked), count)

        return GenerationResult(self._generated(picked, layer), count, outcome, total_attempts)

    def _force_green(self, taken: set[str]) -> tuple[Optional[RewardOption], GenerationOutcome]:
        """Unweighted green pick, preferring ids not already taken."""
        green = list(self._pool(RewardCategory.ATTRIBUTE))
        if not green:
            return None, GenerationOutcome.EXHAUSTED
        fresh = [opt for opt in green if opt.id not in taken]
        if fresh:
            return self.rng.choice(fresh), GenerationOutcome.FORCED
        return self.rng.choice(green), GenerationOutcome.EXHAUSTED


def generate_boss_rewards(
    layer: int,
    ctx: Optional[RewardContext],
    rng: SeededRandom,
    selection_overrides: Optional[dict[int, int]] = None,
) -> list[GeneratedReward]:
    """Convenience wrapper around RewardGenerator.generate_boss_rewards."""
    ctx = replace(ctx, layer=layer) if ctx else RewardContext(layer=layer)
    return RewardGenerator(rng).generate_boss_rewards(ctx, selection_overrides).rewards


def generate_shop_rewards(
    layer: int,
    ctx: Optional[RewardContext],
    rng: SeededRandom,
    count: int = SHOP_SIZE,
) -> list[GeneratedReward]:
    """Convenience wrapper around RewardGenerator.generate_shop_rewards."""
    ctx = replace(ctx, layer=layer) if ctx else RewardContext(layer=layer)
    return RewardGenerator(rng).generate_shop_rewards(ctx, count).rewards
