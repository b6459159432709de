"""Dominant-language detection for recipe text.

Wraps ``langdetect`` with a confidence floor and an English vocabulary
heuristic for text too short or too noisy to detect reliably.

Example:
    >>> identifier = LanguageIdentifier()
    >>> identifier.detect("Den Backofen auf 180 Grad vorheizen und die Butter schmelzen.")
    'de'
"""

from __future__ import annotations

import logging
import re
from typing import Final

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from .models import LanguageTag, is_english_tag

# langdetect is non-deterministic unless seeded
DetectorFactory.seed = 0

logger = logging.getLogger(__name__)

# langdetect codes that differ from the tags used elsewhere
_TAG_ALIASES: Final[dict[str, LanguageTag]] = {
    "zh-cn": "zh-Hans",
    "zh-tw": "zh-Hant",
}

ENGLISH_RECIPE_WORDS: Final[tuple[str, ...]] = (
    "ingredient",
    "ingredients",
    "instruction",
    "instructions",
    "recipe",
    "cook",
    "bake",
    "roast",
    "chicken",
    "beef",
    "pork",
    "fish",
    "salt",
    "pepper",
    "garlic",
    "onion",
    "tomato",
    "oil",
    "butter",
    "flour",
    "sugar",
    "water",
    "tablespoon",
    "teaspoon",
    "cup",
    "ounce",
    "pound",
    "gram",
    "heat",
    "add",
    "mix",
    "stir",
    "fry",
    "boil",
    "simmer",
)

_ENGLISH_WORD_PATTERN: Final = re.compile(
    r"\b(?:" + "|".join(ENGLISH_RECIPE_WORDS) + r")\b", re.IGNORECASE
)
_ENGLISH_MEASUREMENT_PATTERN: Final = re.compile(
    r"\d+\s*(?:tbsp|tsp|cups?|oz|lbs?|g|kg|ml|l|tablespoons?|teaspoons?)\b", re.IGNORECASE
)
_LETTER_PATTERN: Final = re.compile(r"[^\W\d_]")


def has_english_patterns(text: str) -> bool:
    """Check for common English recipe vocabulary or measurements.

    Args:
        text: Text to inspect

    Returns:
        True if an English recipe word or an English measurement appears
    """
    return bool(_ENGLISH_WORD_PATTERN.search(text) or _ENGLISH_MEASUREMENT_PATTERN.search(text))


class LanguageIdentifier:
    """Detect the dominant language of a text blob.

    Args:
        min_confidence: Minimum probability of the top guess
        min_letters: Texts with fewer letters are reported as undetectable
        logger: Optional logger (defaults to the module logger)
    """

    def __init__(
        self,
        min_confidence: float = 0.5,
        min_letters: int = 12,
        logger: logging.Logger | None = None,
    ) -> None:
        self.min_confidence = min_confidence
        self.min_letters = min_letters
        self.logger = logger or logging.getLogger(__name__)

    def detect(self, text: str) -> LanguageTag | None:
        """Return the best-guess language tag, or None when undetectable.

        Args:
            text: Text blob of any length

        Returns:
            Language tag such as "en", "de" or "zh-Hans", or None
        """
        if len(_LETTER_PATTERN.findall(text)) < self.min_letters:
            return None

        try:
            guesses = detect_langs(text)
        except LangDetectException as e:
            self.logger.debug(f"Language detection failed: {e}")
            return None

        if not guesses:
            return None

        best = guesses[0]
        if best.prob < self.min_confidence:
            self.logger.debug(f"Language guess {best.lang} below confidence ({best.prob:.2f})")
            return None

        return _TAG_ALIASES.get(best.lang, best.lang)

    def is_english(self, text: str) -> bool:
        """Decide whether text can be used without translation.

        Undetectable text counts as English when it carries English recipe
        vocabulary or measurements.
        """
        tag = self.detect(text)
        if tag is None:
            return has_english_patterns(text)
        return is_english_tag(tag)
