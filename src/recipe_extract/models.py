"""Recipe data model.

Pydantic models for the structured recipe produced by the pipeline, plus the
conversion to and from the JSON object exchanged with the remote model.

All models are frozen: a ParsedRecipe is created fresh per extraction call and
every later step (merge, translation) builds a new value with ``model_copy``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .quantities import disambiguate_unit, normalize_amount, normalize_unit

LanguageTag: TypeAlias = str
"""BCP-47-like language code, e.g. ``"de"`` or ``"zh-Hans"``."""


class Language(str, Enum):
    """Languages with static term tables for dictionary translation."""

    GERMAN = "de"
    FRENCH = "fr"
    SPANISH = "es"
    ITALIAN = "it"
    DUTCH = "nl"
    CHINESE = "zh"
    JAPANESE = "ja"

    @classmethod
    def from_tag(cls, tag: LanguageTag | None) -> Language | None:
        """Map a language tag to a supported table language, if any."""
        if not tag:
            return None
        try:
            return cls(base_language(tag))
        except ValueError:
            return None


def base_language(tag: LanguageTag) -> str:
    """Return the primary subtag, lowercased.

    Example:
        >>> base_language("zh-Hant")
        'zh'
    """
    return tag.replace("_", "-").split("-", 1)[0].lower()


def is_english_tag(tag: LanguageTag | None) -> bool:
    """True for ``en`` and any ``en-*`` tag."""
    return tag is not None and base_language(tag) == "en"


class IngredientSection(str, Enum):
    """Structural role of an ingredient within a recipe.

    Declaration order is the canonical display and payload order.
    """

    DISH = "dish"
    MARINADE = "marinade"
    SEASONING = "seasoning"
    BATTER = "batter"
    SAUCE = "sauce"
    BASE = "base"
    DOUGH = "dough"
    TOPPING = "topping"

    @property
    def payload_key(self) -> str:
        """Key of this section in the remote model JSON object."""
        return f"{self.value}Ingredients"


class IngredientItem(BaseModel):
    """A single ingredient line.

    ``amount`` is a decimal-formatted string. It is ``""`` when the source gave
    no amount and ``"0"`` for qualitative amounts such as "to taste", whose
    qualifier is folded into ``name``.
    """

    amount: str = Field(default="", description="Decimal amount, e.g. '1.5'; '0' for to taste")
    unit: str = Field(default="", description="Unit token, e.g. 'tbsp', 'fl_oz', 'pinch'")
    name: str = Field(description="Ingredient name, e.g. 'Olive Oil'")

    model_config = ConfigDict(extra="forbid", frozen=True)

    def key(self) -> tuple[str, str, str]:
        """Identity used for duplicate detection."""
        return (self.amount, self.unit, self.name.lower())

    def __str__(self) -> str:
        return " ".join(part for part in (self.amount, self.unit, self.name) if part)


def _empty_sections() -> dict[IngredientSection, list[IngredientItem]]:
    return {}


class ParsedRecipe(BaseModel):
    """Structured recipe produced by one extraction call.

    Time fields and servings use 0 for "unknown".
    """

    title: str = ""
    description: str = ""
    servings: int = Field(default=0, ge=0)
    prep_time_minutes: int = Field(default=0, ge=0)
    cook_time_minutes: int = Field(default=0, ge=0)
    ingredients_by_section: dict[IngredientSection, list[IngredientItem]] = Field(
        default_factory=_empty_sections
    )
    instructions: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def ingredients(self, section: IngredientSection) -> list[IngredientItem]:
        """Ingredients of one section (empty list when absent)."""
        return list(self.ingredients_by_section.get(section, []))

    @property
    def all_ingredients(self) -> list[IngredientItem]:
        """Ingredients of every section in canonical section order."""
        return [
            item
            for section in IngredientSection
            for item in self.ingredients_by_section.get(section, [])
        ]

    @property
    def has_ingredients(self) -> bool:
        return any(self.ingredients_by_section.values())

    @property
    def is_empty(self) -> bool:
        """True when there is no title, no ingredient and no instruction."""
        return not self.title.strip() and not self.has_ingredients and not self.instructions

    def without_duplicate_ingredients(self) -> ParsedRecipe:
        """Return a copy in which every ingredient appears in one section only.

        The first occurrence in canonical section order is kept.
        """
        seen: set[tuple[str, str, str]] = set()
        sections: dict[IngredientSection, list[IngredientItem]] = {}
        for section in IngredientSection:
            kept: list[IngredientItem] = []
            for item in self.ingredients_by_section.get(section, []):
                if item.key() in seen:
                    continue
                seen.add(item.key())
                kept.append(item)
            if kept:
                sections[section] = kept
        return self.model_copy(update={"ingredients_by_section": sections})

    def to_payload(self) -> dict[str, Any]:
        """Convert to the remote model JSON object shape.

        Every section key is present, empty sections as ``[]``.
        """
        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "servings": self.servings,
            "prepTime": self.prep_time_minutes,
            "cookTime": self.cook_time_minutes,
        }
        for section in IngredientSection:
            payload[section.payload_key] = [
                item.model_dump() for item in self.ingredients_by_section.get(section, [])
            ]
        payload["instructions"] = list(self.instructions)
        payload["tips"] = list(self.tips)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ParsedRecipe:
        """Build a recipe from a remote model JSON object.

        Missing keys default to empty values, numbers may arrive as strings,
        and ingredient entries without a name are dropped.

        Args:
            payload: Decoded JSON object

        Returns:
            New ParsedRecipe

        Raises:
            TypeError: If a field has a shape that cannot be coerced
        """
        sections: dict[IngredientSection, list[IngredientItem]] = {}
        for section in IngredientSection:
            items = [
                item
                for item in (_coerce_item(raw) for raw in _as_list(payload.get(section.payload_key)))
                if item is not None
            ]
            if items:
                sections[section] = items

        return cls(
            title=_as_text(payload.get("title")),
            description=_as_text(payload.get("description")),
            servings=_as_int(payload.get("servings")),
            prep_time_minutes=_as_int(payload.get("prepTime")),
            cook_time_minutes=_as_int(payload.get("cookTime")),
            ingredients_by_section=sections,
            instructions=[text for text in map(_as_text, _as_list(payload.get("instructions"))) if text],
            tips=[text for text in map(_as_text, _as_list(payload.get("tips"))) if text],
        )


@dataclass(frozen=True)
class CorrectionCandidate:
    """A proposed spelling fix for one OCR word."""

    original: str
    suggestion: str
    similarity: float


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    raise TypeError(f"expected text, got {type(value).__name__}")


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise TypeError("expected a number, got bool")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value}")
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    if isinstance(value, str):
        digits = "".join(ch for ch in value.split("-")[0] if ch.isdigit() or ch == ".")
        return max(int(float(digits)), 0) if digits.strip(".") else 0
    raise TypeError(f"expected a number, got {type(value).__name__}")


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise TypeError(f"expected a list, got {type(value).__name__}")


def _coerce_item(raw: Any) -> IngredientItem | None:
    if not isinstance(raw, dict):
        raise TypeError(f"expected an ingredient object, got {type(raw).__name__}")
    name = _as_text(raw.get("name"))
    if not name:
        return None
    unit = normalize_unit(_as_text(raw.get("unit")))
    return IngredientItem(
        amount=normalize_amount(_as_text(raw.get("amount"))),
        unit=disambiguate_unit(unit, name),
        name=name,
    )
