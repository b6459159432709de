"""Heuristic recipe detection.

Scores English text on seven independent signals and calls it a recipe once
the total reaches a threshold. Non-English text should be translated first.

Example:
    >>> classifier = RecipeContentClassifier()
    >>> classifier.score("Ingredients: 2 cups flour, 1 tsp salt ...").structure
    2
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from .lexicon import COMMON_INGREDIENTS, COOKING_VERBS

logger = logging.getLogger(__name__)

DEFAULT_SCORE_THRESHOLD: Final[int] = 2
DEFAULT_MIN_CHARS: Final[int] = 120
DEFAULT_MAX_CHARS: Final[int] = 50_000

STRUCTURE_KEYWORDS: Final[tuple[str, ...]] = (
    "ingredient",
    "instruction",
    "directions",
    "recipe",
    "method",
    "steps",
    "preparation",
    "servings",
    "serves",
    "yield",
    "how to",
    "make",
)

_MEASUREMENT: Final = re.compile(
    r"\d+\s*(?:cups?|tbsp|tsp|oz|lb|g|kg|ml|l|grams?|ounces?|pounds?|tablespoons?|teaspoons?)",
    re.IGNORECASE,
)
_STEP_MARKERS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\d+\.\s+[a-z]", re.IGNORECASE),
    re.compile(r"step\s+\d+|step\s+[a-z]+:", re.IGNORECASE),
)
_INGREDIENT_LIST: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"ingredients?:", re.IGNORECASE),
    re.compile(r"\d+\s+\w+\s+(?:cup|tbsp|tsp|oz|lb|g|kg|ml|l|gram|ounce|pound)", re.IGNORECASE),
    re.compile(r"^\s*[-•]\s*\w+", re.MULTILINE),
)
_TIME_OR_SERVING: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"(?:prep|cook|preparation|cooking)\s+time", re.IGNORECASE),
    re.compile(r"\d+\s*(?:minutes?|min|hours?|hr)", re.IGNORECASE),
    re.compile(r"serves?\s+\d+|servings?:\s*\d+", re.IGNORECASE),
)
_COMMON_INGREDIENT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE) for word in COMMON_INGREDIENTS
)


def _tiered(count: int) -> int:
    if count >= 2:
        return 2
    return 1 if count == 1 else 0


@dataclass(frozen=True)
class RecipeScore:
    """Points per signal category.

    Attributes:
        structure: Recipe structure keywords (0 or 2)
        measurements: Amount followed by a unit (0 or 2)
        verbs: Cooking verbs (0, 1 or 2)
        steps: Numbered or "step N" markers (0 or 1)
        ingredient_list: Ingredient list shapes (0 or 1)
        time_or_servings: Time or serving phrases (0 or 1)
        ingredients: Common ingredient words (0, 1 or 2)
    """

    structure: int = 0
    measurements: int = 0
    verbs: int = 0
    steps: int = 0
    ingredient_list: int = 0
    time_or_servings: int = 0
    ingredients: int = 0

    @property
    def total(self) -> int:
        return (
            self.structure
            + self.measurements
            + self.verbs
            + self.steps
            + self.ingredient_list
            + self.time_or_servings
            + self.ingredients
        )


class RecipeContentClassifier:
    """Decides whether a text holds a recipe.

    Args:
        threshold: Minimum total score for a recipe
        min_chars: Shorter texts are never recipes
        max_chars: Longer texts are never recipes
        logger: Logger to use instead of the module logger
    """

    def __init__(
        self,
        threshold: int = DEFAULT_SCORE_THRESHOLD,
        min_chars: int = DEFAULT_MIN_CHARS,
        max_chars: int = DEFAULT_MAX_CHARS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.threshold = threshold
        self.min_chars = min_chars
        self.max_chars = max_chars
        self.logger = logger or logging.getLogger(__name__)

    def score(self, text: str) -> RecipeScore:
        """Score a text on every signal, ignoring the length guard."""
        lowered = text.lower()

        structure = 2 if any(keyword in lowered for keyword in STRUCTURE_KEYWORDS) else 0
        measurements = 2 if _MEASUREMENT.search(text) else 0
        verbs = _tiered(sum(1 for verb in COOKING_VERBS if verb in lowered))
        steps = 1 if any(pattern.search(text) for pattern in _STEP_MARKERS) else 0
        ingredient_list = 1 if any(pattern.search(text) for pattern in _INGREDIENT_LIST) else 0
        time_or_servings = 1 if any(pattern.search(text) for pattern in _TIME_OR_SERVING) else 0
        ingredients = _tiered(
            sum(1 for pattern in _COMMON_INGREDIENT_PATTERNS if pattern.search(text))
        )

        return RecipeScore(
            structure=structure,
            measurements=measurements,
            verbs=verbs,
            steps=steps,
            ingredient_list=ingredient_list,
            time_or_servings=time_or_servings,
            ingredients=ingredients,
        )

    def is_recipe(self, text: str) -> bool:
        """Whether the text is long enough and scores at least the threshold."""
        if not text.strip():
            return False
        if not self.min_chars <= len(text) <= self.max_chars:
            self.logger.debug(f"Text length {len(text)} outside recipe bounds")
            return False
        result = self.score(text)
        self.logger.debug(f"Recipe score {result.total} (threshold {self.threshold}): {result}")
        return result.total >= self.threshold
