"""Amounts and units.

Fraction normalization, the controlled unit vocabulary and the oz/fl_oz
disambiguation rule.

Example:
    >>> normalize_amount("1 1/2")
    '1.5'
    >>> canonical_unit("Tablespoons")
    'tbsp'
    >>> disambiguate_unit("oz", "olive oil")
    'fl_oz'
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Final, Literal

from .lexicon import LIQUID_WORDS, SOLID_WORDS

VULGAR_FRACTIONS: Final[dict[str, str]] = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

UNIT_SYNONYMS: Final[dict[str, tuple[str, ...]]] = {
    "tbsp": ("tbsp", "tbsps", "tbs", "tbl", "tablespoon", "tablespoons"),
    "tsp": ("tsp", "tsps", "teaspoon", "teaspoons"),
    "cup": ("cup", "cups"),
    "g": ("g", "gr", "gram", "grams", "gramme", "grammes"),
    "kg": ("kg", "kgs", "kilo", "kilos", "kilogram", "kilograms"),
    "ml": ("ml", "milliliter", "milliliters", "millilitre", "millilitres"),
    "l": ("l", "liter", "liters", "litre", "litres"),
    "fl_oz": ("fl_oz", "fl oz", "fl. oz", "fl.oz", "floz", "fluid ounce", "fluid ounces"),
    "oz": ("oz", "ounce", "ounces"),
    "lb": ("lb", "lbs", "pound", "pounds"),
    "piece": ("piece", "pieces", "pc", "pcs"),
    "pinch": ("pinch", "pinches"),
    "dash": ("dash", "dashes"),
    "clove": ("clove", "cloves"),
    "slice": ("slice", "slices"),
    "bunch": ("bunch", "bunches"),
    "head": ("head", "heads"),
    "strand": ("strand", "strands"),
    "can": ("can", "cans", "tin", "tins"),
    "stick": ("stick", "sticks"),
    "sprig": ("sprig", "sprigs"),
    "handful": ("handful", "handfuls"),
}

UNITS: Final[frozenset[str]] = frozenset(UNIT_SYNONYMS)

_SYNONYM_TO_UNIT: Final[dict[str, str]] = {
    synonym: unit for unit, synonyms in UNIT_SYNONYMS.items() for synonym in synonyms
}


def _variant_pattern(variant: str) -> str:
    return re.escape(variant).replace(r"\ ", r"\s*")


# Longest first so "tablespoons" wins over "tablespoon" and "fl oz" over "fl"
UNIT_ALTERNATION: Final[str] = "|".join(
    _variant_pattern(variant) for variant in sorted(_SYNONYM_TO_UNIT, key=len, reverse=True)
)

_FRACTION_CHARS: Final[str] = "".join(VULGAR_FRACTIONS)

AMOUNT_ALTERNATION: Final[str] = (
    rf"\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?\s*[{_FRACTION_CHARS}]?|[{_FRACTION_CHARS}]"
)

_MIXED_PATTERN: Final = re.compile(r"^\s*(\d+)\s+(\d+)/(\d+)\s*$")
_FRACTION_PATTERN: Final = re.compile(r"^\s*(\d+)/(\d+)\s*$")
_VULGAR_PATTERN: Final = re.compile(rf"(\d*)(\s*)([{_FRACTION_CHARS}])")


def expand_vulgar_fractions(text: str) -> str:
    """Rewrite Unicode fractions as ASCII.

    Example:
        >>> expand_vulgar_fractions("1½ cups")
        '1 1/2 cups'
    """

    def replace(match: re.Match[str]) -> str:
        whole, space, fraction = match.groups()
        if whole:
            return f"{whole} {VULGAR_FRACTIONS[fraction]}"
        return f"{space}{VULGAR_FRACTIONS[fraction]}"

    return _VULGAR_PATTERN.sub(replace, text.replace("⁄", "/"))


def format_decimal(value: Fraction | float) -> str:
    """Format a number with at most three decimals and no trailing zeros.

    Example:
        >>> format_decimal(Fraction(1, 12))
        '0.083'
    """
    text = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return text or "0"


def normalize_amount(amount: str) -> str:
    """Convert a mixed number or fraction to a decimal string.

    Strings that are neither a mixed number nor a fraction, including
    already-decimal values, are returned unchanged.

    Example:
        >>> normalize_amount("3/4")
        '0.75'
        >>> normalize_amount("0.75")
        '0.75'
    """
    expanded = expand_vulgar_fractions(amount)

    mixed = _MIXED_PATTERN.match(expanded)
    if mixed:
        whole, numerator, denominator = (int(part) for part in mixed.groups())
        if denominator == 0:
            return amount
        return format_decimal(whole + Fraction(numerator, denominator))

    simple = _FRACTION_PATTERN.match(expanded)
    if simple:
        numerator, denominator = (int(part) for part in simple.groups())
        if denominator == 0:
            return amount
        return format_decimal(Fraction(numerator, denominator))

    return amount


def amount_value(amount: str) -> float | None:
    """Numeric value of an amount string, or None when it is not a number."""
    normalized = normalize_amount(amount.strip()).replace(",", ".")
    try:
        return float(normalized)
    except ValueError:
        return None


def canonical_unit(token: str) -> str | None:
    """Map a unit word to its controlled-vocabulary token.

    Returns:
        The canonical unit, or None if the token is not a unit
    """
    key = re.sub(r"\s+", " ", token.strip().lower()).rstrip(".")
    if key in _SYNONYM_TO_UNIT:
        return _SYNONYM_TO_UNIT[key]
    return _SYNONYM_TO_UNIT.get(key.replace(". ", " ").replace(".", " ").strip())


def normalize_unit(unit: str) -> str:
    """Controlled-vocabulary token for a unit word, ``""`` when it is not a unit.

    Example:
        >>> normalize_unit("fl. oz")
        'fl_oz'
    """
    return canonical_unit(unit) or ""


def is_unit_token(token: str) -> bool:
    return canonical_unit(token) is not None


Consistency = Literal["liquid", "solid"]


def _singular(word: str) -> str:
    if word.endswith("oes"):
        return word[:-2]
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def classify_consistency(name: str) -> Consistency | None:
    """Classify an ingredient name as liquid or solid.

    Words are read from the right so the head noun decides: "chicken broth"
    is liquid, "ground beef" and "cream cheese" are solid.

    Returns:
        "liquid", "solid", or None when the name is not in the lexicon
    """
    plain = re.sub(r"\([^)]*\)", " ", name.lower())
    words = re.findall(r"[a-z]+", plain)
    for word in reversed(words):
        for candidate in (word, _singular(word)):
            if candidate in LIQUID_WORDS:
                return "liquid"
            if candidate in SOLID_WORDS:
                return "solid"
    return None


def disambiguate_unit(unit: str, name: str) -> str:
    """Pick oz or fl_oz from the ingredient name.

    Liquids take ``fl_oz`` and solids take ``oz``; other units and unknown
    names keep the unit as written.

    Example:
        >>> disambiguate_unit("fl_oz", "ground beef")
        'oz'
    """
    if unit not in ("oz", "fl_oz"):
        return unit
    consistency = classify_consistency(name)
    if consistency == "liquid":
        return "fl_oz"
    if consistency == "solid":
        return "oz"
    return unit
