"""Tests for the nutrient registry and priority weights."""

from __future__ import annotations

import pytest

from nutriopt.data.nutrients import (
    DEFAULT_PRIORITIES,
    NUTRIENT_COUNT,
    NUTRIENT_INDEX,
    Nutrient,
    PriorityTier,
    PriorityWeights,
    find_nutrient,
    get_extractor,
    get_nutrient,
    get_nutrient_display_name,
    get_nutrient_unit,
)
from nutriopt.optimizer.models import Food


class TestRegistry:
    """Tests for nutrient lookup."""

    def test_thirty_five_nutrients(self):
        assert NUTRIENT_COUNT == 35
        assert sorted(NUTRIENT_INDEX.values()) == list(range(35))

    def test_index_follows_enum_order(self):
        assert NUTRIENT_INDEX[Nutrient.KCAL] == 0
        assert NUTRIENT_INDEX[Nutrient.VITAMIN_B12] == 34

    def test_lookup_is_case_insensitive(self):
        assert find_nutrient("Protein_G") is Nutrient.PROTEIN
        assert find_nutrient("VITAMIN_C_MG") is Nutrient.VITAMIN_C

    def test_lookup_normalizes_separators(self):
        assert find_nutrient("vitamin c mg") is Nutrient.VITAMIN_C
        assert find_nutrient("saturated-fat-g") is Nutrient.SATURATED_FAT

    def test_unknown_key(self):
        assert find_nutrient("unobtainium_mg") is None
        with pytest.raises(KeyError, match="Unknown nutrient"):
            get_nutrient("unobtainium_mg")

    def test_extractor_reads_food_vector(self):
        food = Food.create(id="x", name="X", nutrients={"iron_mg": 2.5})
        extract = get_extractor("IRON_MG")
        assert extract is not None
        assert extract(food) == 2.5
        assert get_extractor("nope") is None

    def test_units_and_names(self):
        assert get_nutrient_unit(Nutrient.KCAL) == "kcal"
        assert get_nutrient_unit(Nutrient.SELENIUM) == "ug"
        assert get_nutrient_display_name(Nutrient.VITAMIN_B1) == "Thiamin (B1)"


class TestPriorityWeights:
    """Tests for tier classification."""

    def test_default_tiers(self):
        assert DEFAULT_PRIORITIES.tier(Nutrient.KCAL) is PriorityTier.PRIMARY
        assert DEFAULT_PRIORITIES.tier(Nutrient.FAT) is PriorityTier.SECONDARY
        assert DEFAULT_PRIORITIES.tier(Nutrient.SELENIUM) is PriorityTier.TERTIARY
        assert DEFAULT_PRIORITIES.tier(Nutrient.SODIUM) is PriorityTier.DEFAULT

    def test_default_weights(self):
        assert DEFAULT_PRIORITIES.weight(Nutrient.PROTEIN) == 100.0
        assert DEFAULT_PRIORITIES.weight(Nutrient.VITAMIN_B12) == 10.0
        assert DEFAULT_PRIORITIES.weight(Nutrient.IODINE) == 5.0
        assert DEFAULT_PRIORITIES.weight(Nutrient.MOISTURE) == 1.0

    def test_custom_weights(self):
        """Custom tables replace the defaults entirely."""
        priorities = PriorityWeights(
            tiers={Nutrient.SODIUM: PriorityTier.PRIMARY},
            weights={PriorityTier.PRIMARY: 7.0, PriorityTier.DEFAULT: 2.0},
        )
        assert priorities.weight(Nutrient.SODIUM) == 7.0
        assert priorities.weight(Nutrient.KCAL) == 2.0
