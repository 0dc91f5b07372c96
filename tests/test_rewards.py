"""Tests for boss and shop reward generation."""

import pytest

from layersim.core.constants import (
    SHOP_MAX_ATTEMPTS,
    SHOP_RARITY_ODDS,
    get_boss_candidate_count,
    get_shop_odds,
)
from layersim.core.rewards import (
    GenerationOutcome,
    PlayerStats,
    RewardContext,
    RewardGenerator,
    generate_boss_rewards,
    generate_shop_rewards,
    pick_tier_value,
    synergy_adjust,
    weighted_sample,
)
from layersim.core.seeded_random import SeededRandom
from layersim.data.loaders import load_all_rewards, load_legendary_rewards
from layersim.data.models import RewardCategory, RewardOption


def make_option(option_id, category="attribute", color="green", **fields):
    data = {
        "id": option_id,
        "name": option_id,
        "category": category,
        "color": color,
        "effect_key": "damage_pct",
        "base_value": 0.1,
    }
    data.update(fields)
    return RewardOption.model_validate(data)


@pytest.fixture
def legendary_ids():
    return [r.id for r in load_legendary_rewards()]


class TestTierValue:
    """Tests for layer-scaled reward values."""

    @pytest.fixture
    def tiered(self):
        return make_option("tiered", base_value=None, tiers=[1.0, 2.0, 3.0])

    @pytest.mark.parametrize(
        "layer, expected",
        [(1, 1.0), (9, 1.0), (10, 2.0 * 1.3), (15, 3.0 * 1.6), (20, 3.0 * 2.0), (40, 3.0 * 2.0)],
    )
    def test_tier_by_layer(self, tiered, layer, expected):
        assert pick_tier_value(tiered, layer) == pytest.approx(expected)

    def test_flat_value_scaled(self):
        option = make_option("flat", base_value=0.5)
        assert pick_tier_value(option, 1) == pytest.approx(0.5)
        assert pick_tier_value(option, 12) == pytest.approx(0.65)

    def test_no_value(self):
        option = make_option("flag", effect_key="on_hit_burn", base_value=None)
        assert pick_tier_value(option, 20) is None


class TestWeightedSample:
    """Tests for weighted sampling without replacement."""

    def test_distinct(self):
        pool = [make_option(f"o{i}") for i in range(5)]
        picked = weighted_sample(pool, 5, [], SeededRandom("s"))
        assert len({o.id for o in picked}) == 5

    def test_excludes(self):
        pool = [make_option(f"o{i}") for i in range(5)]
        picked = weighted_sample(pool, 3, ["o0", "o1"], SeededRandom("s"))
        assert {o.id for o in picked} == {"o2", "o3", "o4"}

    def test_runs_out(self):
        pool = [make_option("only")]
        assert len(weighted_sample(pool, 3, [], SeededRandom("s"))) == 1

    def test_zero_weight_still_sampled(self):
        """Weights floor at one so zero-weight entries stay reachable."""
        pool = [make_option("zero", weight=0)]
        assert weighted_sample(pool, 1, [], SeededRandom("s"))[0].id == "zero"


class TestSynergyAdjust:
    """Tests for build-biased weights."""

    def test_no_context(self):
        option = make_option("o", weight=3)
        assert synergy_adjust(option, None) == 3

    def test_attack_speed_build_favours_projectiles(self):
        option = make_option("proj", effect_key="projectiles_add", base_value=1, weight=3)
        ctx = RewardContext(layer=1, player_stats=PlayerStats(attack_speed=1.5))
        assert synergy_adjust(option, ctx) == 5

    def test_crit_build_favours_crit(self):
        option = make_option("crit", effect_key="crit_chance_add", base_value=0.1, weight=2)
        ctx = RewardContext(layer=1, player_stats=PlayerStats(crit_chance=0.3))
        assert synergy_adjust(option, ctx) == 4

    def test_unrelated_option_unchanged(self):
        option = make_option("armor", effect_key="armor_add", base_value=5, weight=2)
        ctx = RewardContext(layer=1, player_stats=PlayerStats(attack_speed=2.0, crit_chance=0.5))
        assert synergy_adjust(option, ctx) == 2


class TestBossRewards:
    """Tests for boss reward generation."""

    def test_layer_five_returns_three_distinct_legendaries(self):
        rewards = generate_boss_rewards(5, None, SeededRandom("test_seed"))
        assert len(rewards) == 3
        assert len({r.id for r in rewards}) == 3
        assert all(r.option.category == RewardCategory.LEGENDARY for r in rewards)

    @pytest.mark.parametrize("layer", [5, 10, 15, 20, 25])
    def test_length_follows_schedule(self, layer):
        result = RewardGenerator(SeededRandom("len")).generate_boss_rewards(RewardContext(layer=layer))
        expected = min(get_boss_candidate_count(layer), len(load_legendary_rewards()))
        assert len(result) == expected

    def test_deterministic(self):
        a = generate_boss_rewards(10, None, SeededRandom("same"))
        b = generate_boss_rewards(10, None, SeededRandom("same"))
        assert [r.id for r in a] == [r.id for r in b]

    def test_recent_offers_avoided(self, legendary_ids):
        recent = legendary_ids[:5]
        ctx = RewardContext(layer=5, recent_offered_ids=recent)
        result = RewardGenerator(SeededRandom("recent")).generate_boss_rewards(ctx)
        assert set(result.ids) == set(legendary_ids[5:])
        assert result.outcome == GenerationOutcome.COMPLETE

    def test_recent_offers_backfilled(self, legendary_ids):
        recent = legendary_ids[:7]
        ctx = RewardContext(layer=5, recent_offered_ids=recent)
        result = RewardGenerator(SeededRandom("backfill")).generate_boss_rewards(ctx)
        assert len(result) == 3
        assert legendary_ids[7] in result.ids
        assert len(set(result.ids)) == 3
        assert result.outcome == GenerationOutcome.PARTIAL

    def test_overrides(self):
        result = RewardGenerator(SeededRandom("o")).generate_boss_rewards(RewardContext(layer=5), {5: 8})
        assert len(result) == 8

    def test_pool_smaller_than_request(self):
        result = RewardGenerator(SeededRandom("o")).generate_boss_rewards(RewardContext(layer=5), {5: 20})
        assert len(result) == len(load_legendary_rewards())
        assert result.outcome == GenerationOutcome.PARTIAL

    def test_empty_pool(self):
        generator = RewardGenerator(SeededRandom("e"), pools={})
        result = generator.generate_boss_rewards(RewardContext(layer=5))
        assert len(result) == 0
        assert result.outcome == GenerationOutcome.EXHAUSTED

    def test_values_scaled(self):
        rewards = generate_boss_rewards(20, None, SeededRandom("scaled"), {20: 8})
        glass = next(r for r in rewards if r.id == "lgd_glass_cannon")
        assert glass.scaled_value == pytest.approx(0.8 * 2.0)


class TestShopRewards:
    """Tests for shop reward generation."""

    def test_always_four(self):
        for layer in (1, 3, 12, 30, 60):
            rewards = generate_shop_rewards(layer, None, SeededRandom(f"shop{layer}"))
            assert len(rewards) == 4
            assert len({r.id for r in rewards}) == 4

    def test_all_recent_still_four(self):
        """Every id recently offered: exclusions relax, four distinct offers."""
        ctx = RewardContext(layer=8, recent_offered_ids=[r.id for r in load_all_rewards()])
        result = RewardGenerator(SeededRandom("adversarial")).generate_shop_rewards(ctx)
        assert len(result) == 4
        assert len(set(result.ids)) == 4
        assert result.outcome == GenerationOutcome.PARTIAL

    def test_exclude_ids_respected(self):
        exclude = [r.id for r in load_all_rewards()][:40]
        ctx = RewardContext(layer=3)
        result = RewardGenerator(SeededRandom("ex")).generate_shop_rewards(ctx, exclude_ids=exclude)
        assert not set(result.ids) & set(exclude)

    def test_forced_green_when_pools_dry(self):
        pools = {RewardCategory.ATTRIBUTE: [make_option("a1"), make_option("a2")]}
        generator = RewardGenerator(SeededRandom("dry"), pools=pools)
        result = generator.generate_shop_rewards(RewardContext(layer=1), count=4)
        assert len(result) == 4
        assert set(result.ids) == {"a1", "a2"}
        assert result.outcome == GenerationOutcome.EXHAUSTED

    def test_nothing_available(self):
        generator = RewardGenerator(SeededRandom("none"), pools={})
        result = generator.generate_shop_rewards(RewardContext(layer=1))
        assert len(result) == 0
        assert result.outcome == GenerationOutcome.EXHAUSTED

    def test_dry_slot_uses_full_attempt_budget(self):
        """A slot keeps retrying the pools until the attempt cap."""
        generator = RewardGenerator(SeededRandom("none"), pools={})
        result = generator.generate_shop_rewards(RewardContext(layer=1))
        assert result.attempts == SHOP_MAX_ATTEMPTS

    def test_forced_slots_each_use_attempt_budget(self):
        pools = {RewardCategory.ATTRIBUTE: [make_option("a1"), make_option("a2")]}
        generator = RewardGenerator(SeededRandom("dry"), pools=pools)
        result = generator.generate_shop_rewards(RewardContext(layer=1), count=4)
        # two slots fill normally, the last two exhaust the budget before forcing
        assert result.attempts >= 2 * SHOP_MAX_ATTEMPTS + 2

    def test_fallback_to_other_rarities(self):
        """A rolled rarity with an empty pool falls back to the others."""
        pools = {RewardCategory.LEGENDARY: [make_option(f"g{i}", "legendary", "gold") for i in range(4)]}
        generator = RewardGenerator(SeededRandom("fallback"), pools=pools)
        result = generator.generate_shop_rewards(RewardContext(layer=1))
        assert sorted(result.ids) == ["g0", "g1", "g2", "g3"]
        assert result.outcome == GenerationOutcome.COMPLETE

    def test_deterministic(self):
        a = generate_shop_rewards(7, None, SeededRandom("d"))
        b = generate_shop_rewards(7, None, SeededRandom("d"))
        assert [r.id for r in a] == [r.id for r in b]


class TestShopOdds:
    """Tests for the rarity odds table."""

    def test_rows_sum_to_100(self):
        for _, row in SHOP_RARITY_ODDS:
            assert sum(row) == 100

    def test_rarer_pools_grow_with_layer(self):
        layers = range(1, 80)
        greens = [get_shop_odds(layer)[0] for layer in layers]
        golds = [get_shop_odds(layer)[3] for layer in layers]
        assert greens == sorted(greens, reverse=True)
        assert golds == sorted(golds)

    def test_row_boundaries(self):
        assert get_shop_odds(5) == [75, 20, 4, 1]
        assert get_shop_odds(6) == [65, 25, 8, 2]
        assert get_shop_odds(100) == [15, 33, 32, 20]
