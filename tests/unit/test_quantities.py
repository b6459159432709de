"""Unit tests for recipe_extract.quantities module."""

import pytest

from recipe_extract.quantities import (
    amount_value,
    canonical_unit,
    classify_consistency,
    disambiguate_unit,
    expand_vulgar_fractions,
    normalize_amount,
    normalize_unit,
)


class TestAmounts:
    """Tests for amount normalization."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("1 1/2", "1.5"),
            ("3/4", "0.75"),
            ("1/3", "0.333"),
            ("½", "0.5"),
            ("2¼", "2.25"),
            ("2", "2"),
            ("0.75", "0.75"),
        ],
    )
    def test_normalize_amount(self, amount: str, expected: str) -> None:
        """Fractions and mixed numbers become decimals."""
        assert normalize_amount(amount) == expected

    def test_zero_denominator_unchanged(self) -> None:
        """A fraction over zero is left as written."""
        assert normalize_amount("1/0") == "1/0"

    def test_expand_vulgar_fractions(self) -> None:
        """Unicode fractions become ASCII fractions."""
        assert expand_vulgar_fractions("1½ cups and ¼ tsp") == "1 1/2 cups and 1/4 tsp"

    def test_amount_value(self) -> None:
        """Amounts parse to floats, non-numbers to None."""
        assert amount_value("1 1/2") == 1.5
        assert amount_value("1,5") == 1.5
        assert amount_value("a few") is None


class TestUnits:
    """Tests for the unit vocabulary."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("Tablespoons", "tbsp"),
            ("tbsp.", "tbsp"),
            ("teaspoon", "tsp"),
            ("grams", "g"),
            ("fl. oz", "fl_oz"),
            ("fl oz", "fl_oz"),
            ("Pounds", "lb"),
            ("tins", "can"),
        ],
    )
    def test_canonical_unit(self, token: str, expected: str) -> None:
        """Unit synonyms map to one token."""
        assert canonical_unit(token) == expected

    def test_not_a_unit(self) -> None:
        """Non-units map to None or an empty string."""
        assert canonical_unit("banana") is None
        assert normalize_unit("banana") == ""


class TestConsistency:
    """Tests for the oz / fl_oz rule."""

    def test_head_noun_decides(self) -> None:
        """The rightmost known word decides."""
        assert classify_consistency("chicken broth") == "liquid"
        assert classify_consistency("Ground Beef") == "solid"
        assert classify_consistency("cream cheese") == "solid"
        assert classify_consistency("saffron") is None

    def test_plural_names(self) -> None:
        """Plural names are matched through their singular."""
        assert classify_consistency("chicken breasts") == "solid"

    def test_disambiguate_unit(self) -> None:
        """Liquids take fl_oz, solids oz, others keep their unit."""
        assert disambiguate_unit("oz", "olive oil") == "fl_oz"
        assert disambiguate_unit("fl_oz", "ground beef") == "oz"
        assert disambiguate_unit("oz", "saffron") == "oz"
        assert disambiguate_unit("cup", "olive oil") == "cup"
