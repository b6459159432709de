"""Unit tests for recipe_extract.models module.

Tests the recipe model, section handling and the remote payload shape.
"""

import pytest
from pydantic import ValidationError

from recipe_extract.models import (
    IngredientItem,
    IngredientSection,
    Language,
    ParsedRecipe,
    base_language,
    is_english_tag,
)


class TestLanguageTags:
    """Tests for language tag helpers."""

    def test_base_language(self) -> None:
        """The primary subtag is returned lowercased."""
        assert base_language("zh-Hant") == "zh"
        assert base_language("pt_BR") == "pt"
        assert base_language("DE") == "de"

    def test_is_english_tag(self) -> None:
        """en and en-* are English, None is not."""
        assert is_english_tag("en")
        assert is_english_tag("en-GB")
        assert not is_english_tag("de")
        assert not is_english_tag(None)

    def test_language_from_tag(self) -> None:
        """Supported table languages are mapped, others are None."""
        assert Language.from_tag("de-AT") is Language.GERMAN
        assert Language.from_tag("zh-Hans") is Language.CHINESE
        assert Language.from_tag("ko") is None
        assert Language.from_tag(None) is None


class TestIngredientItem:
    """Tests for IngredientItem."""

    def test_str_skips_empty_parts(self) -> None:
        """String form joins only non-empty parts."""
        assert str(IngredientItem(amount="2", unit="tbsp", name="Butter")) == "2 tbsp Butter"
        assert str(IngredientItem(name="Salt")) == "Salt"

    def test_key_ignores_name_case(self) -> None:
        """Duplicate detection is case-insensitive on the name."""
        assert IngredientItem(amount="1", name="Salt").key() == IngredientItem(
            amount="1", name="salt"
        ).key()

    def test_is_frozen(self) -> None:
        """Items cannot be mutated."""
        item = IngredientItem(name="Salt")
        with pytest.raises(ValidationError):
            item.name = "Pepper"  # type: ignore[misc]


class TestParsedRecipe:
    """Tests for ParsedRecipe."""

    def test_empty_recipe(self) -> None:
        """A recipe with no title, ingredient or instruction is empty."""
        assert ParsedRecipe().is_empty
        assert ParsedRecipe(description="Just a note", servings=2).is_empty

    def test_title_alone_is_not_empty(self) -> None:
        """A title is enough to be a recipe."""
        assert not ParsedRecipe(title="Soup").is_empty

    def test_negative_numbers_rejected(self) -> None:
        """Servings and times are non-negative."""
        with pytest.raises(ValidationError):
            ParsedRecipe(servings=-1)

    def test_all_ingredients_in_canonical_order(self) -> None:
        """Sections are listed in declaration order, not insertion order."""
        recipe = ParsedRecipe(
            ingredients_by_section={
                IngredientSection.SAUCE: [IngredientItem(name="Soy Sauce")],
                IngredientSection.DISH: [IngredientItem(name="Rice")],
            }
        )
        assert [item.name for item in recipe.all_ingredients] == ["Rice", "Soy Sauce"]

    def test_ingredients_of_missing_section(self) -> None:
        """A missing section returns an empty list."""
        assert ParsedRecipe().ingredients(IngredientSection.DOUGH) == []

    def test_without_duplicate_ingredients(self) -> None:
        """An ingredient is kept only in its first section."""
        salt = IngredientItem(amount="0", name="Salt")
        recipe = ParsedRecipe(
            title="Steak",
            ingredients_by_section={
                IngredientSection.SEASONING: [salt],
                IngredientSection.DISH: [IngredientItem(name="Steak"), salt],
            },
        )

        deduplicated = recipe.without_duplicate_ingredients()

        assert deduplicated.ingredients(IngredientSection.DISH) == [IngredientItem(name="Steak")]
        assert deduplicated.ingredients(IngredientSection.SEASONING) == [salt]


class TestPayload:
    """Tests for the remote model JSON shape."""

    def test_to_payload_lists_every_section(self, sample_recipe: ParsedRecipe) -> None:
        """Every section key is present, empty ones as []."""
        payload = sample_recipe.to_payload()

        for section in IngredientSection:
            assert section.payload_key in payload
        assert payload["sauceIngredients"] == []
        assert payload["dishIngredients"][1] == {"amount": "3", "unit": "tbsp", "name": "Butter"}
        assert payload["prepTime"] == 10
        assert payload["cookTime"] == 25

    def test_from_payload_restores_recipe(self, sample_recipe: ParsedRecipe) -> None:
        """A payload converts back to an equal recipe."""
        assert ParsedRecipe.from_payload(sample_recipe.to_payload()) == sample_recipe

    def test_from_payload_coerces_loose_values(self) -> None:
        """Missing keys default, numbers may be strings, nameless items are dropped."""
        recipe = ParsedRecipe.from_payload(
            {
                "title": "  Pancakes ",
                "servings": "4-6",
                "prepTime": 10.0,
                "dishIngredients": [{"amount": 2, "name": "Eggs"}, {"amount": "1"}],
                "instructions": ["Mix.", "", None],
            }
        )

        assert recipe.title == "Pancakes"
        assert recipe.servings == 4
        assert recipe.prep_time_minutes == 10
        assert recipe.cook_time_minutes == 0
        assert recipe.ingredients(IngredientSection.DISH) == [
            IngredientItem(amount="2", unit="", name="Eggs")
        ]
        assert recipe.instructions == ["Mix."]

    def test_from_payload_rejects_wrong_shapes(self) -> None:
        """A section that is not a list raises TypeError."""
        with pytest.raises(TypeError):
            ParsedRecipe.from_payload({"dishIngredients": "2 eggs"})

    def test_from_payload_normalizes_ingredients(self) -> None:
        """Model amounts and units follow the same rules as parsed lines."""
        recipe = ParsedRecipe.from_payload(
            {
                "dishIngredients": [
                    {"amount": "1/2", "unit": "oz", "name": "olive oil"},
                    {"amount": "8", "unit": "fl oz", "name": "ground beef"},
                    {"amount": "1 1/2", "unit": "Tablespoons", "name": "sugar"},
                ]
            }
        )

        assert recipe.ingredients(IngredientSection.DISH) == [
            IngredientItem(amount="0.5", unit="fl_oz", name="olive oil"),
            IngredientItem(amount="8", unit="oz", name="ground beef"),
            IngredientItem(amount="1.5", unit="tbsp", name="sugar"),
        ]

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_from_payload_rejects_non_finite_numbers(self, value: float) -> None:
        """Infinite or NaN counts raise ValueError."""
        with pytest.raises(ValueError, match="finite"):
            ParsedRecipe.from_payload({"title": "X", "servings": value})
