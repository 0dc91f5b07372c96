"""Tests for the passive attribute table."""

from layersim.core.passives import PASSIVE_ATTRIBUTES, offer_passives, passive_seed


class TestPassives:
    """Tests for passive offers."""

    def test_nine_unique_passives(self):
        assert len({p.id for p in PASSIVE_ATTRIBUTES}) == 9

    def test_offer_size_and_distinct(self):
        offers = offer_passives("season", 4, 12000)
        assert len(offers) == 3
        assert len({p.id for p in offers}) == 3

    def test_offer_deterministic(self):
        assert offer_passives("season", 4, 12000) == offer_passives("season", 4, 12000)

    def test_seed_includes_play_time(self):
        assert passive_seed("s", 2, 1500.7) == "s:passive:2:1500"
