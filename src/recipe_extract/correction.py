"""OCR text correction.

Recognized text is repaired in four steps before anything tries to
understand it:

1. Whitespace normalization (line endings, per-line trimming, trailing blank
   lines).
2. Spell repair with ``pyspellchecker``, accepting a suggestion only when it
   is close to the recognized word.
3. A fixed table of recipe words OCR tends to garble.
4. Structural cleanup of numbered and bulleted lines.

Measurement lines ("2 tbsp soy sauce") are never touched: quantities are
easier to misread than to repair.

Example:
    >>> corrector = OCRTextCorrector()
    >>> corrector.correct("INGREDIANTS\\n2 tbsp soy sauce\\n3) Heat the wok")
    'INGREDIENTS\\n2 tbsp soy sauce\\n3. Heat the wok'
"""

from __future__ import annotations

import logging
import re
from functools import cached_property
from typing import TYPE_CHECKING, Final

from spellchecker import SpellChecker

from .lexicon import (
    ACTION_VERBS,
    COMMON_INGREDIENTS,
    INGREDIENT_KEYWORDS,
    INSTRUCTION_OPENERS,
)
from .models import CorrectionCandidate
from .quantities import AMOUNT_ALTERNATION, UNIT_ALTERNATION, UNIT_SYNONYMS, is_unit_token

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD: Final[float] = 0.6
DEFAULT_MIN_WORD_LENGTH: Final[int] = 3

RECIPE_MISSPELLINGS: Final[dict[str, str]] = {
    "ingrediant": "ingredient",
    "ingrediants": "ingredients",
    "ingrediens": "ingredients",
    "instrucion": "instruction",
    "instrucions": "instructions",
    "tablespon": "tablespoon",
    "tablespons": "tablespoons",
    "teaspon": "teaspoon",
    "teaspons": "teaspoons",
    "garli": "garlic",
    "receipe": "recipe",
    "recipie": "recipe",
    "minuts": "minutes",
    "chiken": "chicken",
    "marinde": "marinade",
    "cinamon": "cinnamon",
    "tumeric": "turmeric",
    "parmesean": "parmesan",
    "brocoli": "broccoli",
    "zuchini": "zucchini",
    "vanila": "vanilla",
    "oregeno": "oregano",
    "tomatos": "tomatoes",
    "potatos": "potatoes",
}

# Recipe vocabulary pyspellchecker's English list lacks or ranks too low
DOMAIN_WORDS: Final[tuple[str, ...]] = (
    *ACTION_VERBS,
    *COMMON_INGREDIENTS,
    *INGREDIENT_KEYWORDS,
    *(synonym for synonyms in UNIT_SYNONYMS.values() for synonym in synonyms if " " not in synonym),
    "bok",
    "choy",
    "gochujang",
    "mirin",
    "miso",
    "panko",
    "tahini",
    "sriracha",
    "scallions",
    "shallots",
    "cilantro",
    "marinade",
    "seasoning",
    "seasonings",
)

MEASUREMENT_LINE: Final = re.compile(
    rf"^\s*(?:{AMOUNT_ALTERNATION})\s*(?:{UNIT_ALTERNATION})\b", re.IGNORECASE
)
_MEASUREMENT_ANYWHERE: Final = re.compile(
    rf"\d+\s*(?:{UNIT_ALTERNATION})\b", re.IGNORECASE
)
_INGREDIENT_KEYWORD: Final = re.compile(
    r"\b(?:" + "|".join(INGREDIENT_KEYWORDS) + r")(?:s|es)?\b", re.IGNORECASE
)
_NUMBERED_LINE: Final = re.compile(r"^\s*(\d{1,2})\s*[.):](?!\d)\s*(.+)$")
_NUMBERED_VERB: Final = re.compile(r"^\s*\d{1,2}\s*[.):]?\s*([A-Za-z]+)")
_NUMBER_WORD: Final = re.compile(r"^(?:\d+(?:[.,]\d+)?|\d+/\d+|x)$", re.IGNORECASE)
_WORD_PARTS: Final = re.compile(r"^(\W*)(.*?)(\W*)$", re.DOTALL)
_SPACE_BEFORE_PUNCT: Final = re.compile(r" +([,.:])")
_MISSPELLING_PATTERN: Final = re.compile(
    r"\b(" + "|".join(sorted(RECIPE_MISSPELLINGS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit costs for insertion, deletion and substitution."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]: one minus the edit distance over the longer length.

    Example:
        >>> similarity("garlic", "garlic")
        1.0
        >>> round(similarity("chiken", "chicken"), 3)
        0.857
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def preserve_case(original: str, corrected: str) -> str:
    """Carry the capitalization of ``original`` over to ``corrected``."""
    if len(original) > 1 and original.isupper():
        return corrected.upper()
    if original[:1].isupper():
        return corrected[:1].upper() + corrected[1:]
    return corrected


def build_spellchecker() -> SpellChecker:
    """English spell checker that also knows common recipe vocabulary."""
    spell = SpellChecker(language="en")
    spell.word_frequency.load_words([word.lower() for word in DOMAIN_WORDS])
    return spell


def is_measurement_line(line: str) -> bool:
    return bool(MEASUREMENT_LINE.match(line))


def _is_ingredient_like(line: str) -> bool:
    numbered = _NUMBERED_VERB.match(line)
    if numbered and numbered.group(1).lower() in ACTION_VERBS | INSTRUCTION_OPENERS:
        return False
    return bool(_MEASUREMENT_ANYWHERE.search(line) or _INGREDIENT_KEYWORD.search(line))


class OCRTextCorrector:
    """Repairs OCR output on-device.

    Args:
        similarity_threshold: Minimum similarity a spelling suggestion must
            exceed to replace the recognized word
        min_word_length: Words shorter than this are never spell-checked
        spellchecker: Spell checker to use; an English ``SpellChecker``
            loaded with recipe vocabulary is built on first use otherwise
        logger: Logger to use instead of the module logger
    """

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
        spellchecker: SpellChecker | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.similarity_threshold = similarity_threshold
        self.min_word_length = min_word_length
        self._spellchecker = spellchecker
        self.logger = logger or logging.getLogger(__name__)

    @cached_property
    def spellchecker(self) -> SpellChecker:
        if self._spellchecker is not None:
            return self._spellchecker
        return build_spellchecker()

    def correct(self, raw_text: str, spell_check: bool = True) -> str:
        """Correct recognized text.

        Args:
            raw_text: Text straight from OCR
            spell_check: Run the English spell-repair step. Callers turn this
                off for text in other languages.

        Returns:
            Corrected text. Never empty unless ``raw_text`` was blank.
        """
        if not raw_text.strip():
            return raw_text

        steps: list[tuple[str, Callable[[str], str]]] = [("normalize", self._normalize)]
        if spell_check:
            steps.append(("spell repair", self._repair_spelling))
        steps.append(("recipe misspellings", self._fix_recipe_misspellings))
        steps.append(("structure", self._clean_structure))

        text = raw_text
        for name, step in steps:
            result = step(text)
            if not result.strip():
                self.logger.warning(f"Correction step '{name}' removed all text, keeping input")
                continue
            text = result
        return text

    def suggest(self, word: str) -> CorrectionCandidate | None:
        """Suggest a spelling for one word, or None when it should stay.

        Example:
            >>> OCRTextCorrector().suggest("chiken").suggestion
            'chicken'
        """
        lowered = word.lower()
        if len(lowered) < self.min_word_length or not lowered.isascii() or not lowered.isalpha():
            return None
        spell = self.spellchecker
        if lowered in spell:
            return None
        suggestion = spell.correction(lowered)
        if not suggestion or suggestion == lowered:
            return None
        score = similarity(suggestion, lowered)
        if score <= self.similarity_threshold:
            return None
        return CorrectionCandidate(original=word, suggestion=suggestion, similarity=score)

    def _normalize(self, text: str) -> str:
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        normalized = [line if is_measurement_line(line) else line.strip() for line in lines]
        while normalized and not normalized[-1].strip():
            normalized.pop()
        return "\n".join(normalized)

    def _map_lines(self, text: str, fix: Callable[[str], str]) -> str:
        return "\n".join(
            line if is_measurement_line(line) or not line.strip() else fix(line)
            for line in text.split("\n")
        )

    def _repair_spelling(self, text: str) -> str:
        return self._map_lines(text, self._repair_line)

    def _repair_line(self, line: str) -> str:
        return " ".join(self._repair_word(word) for word in line.split(" "))

    def _repair_word(self, word: str) -> str:
        lead, core, trail = _WORD_PARTS.match(word).groups()
        if not core or _NUMBER_WORD.match(core) or any(ch.isdigit() for ch in core):
            return word
        if is_unit_token(core):
            return word
        candidate = self.suggest(core)
        if candidate is None:
            return word
        self.logger.debug(
            f"Spelling: {core!r} -> {candidate.suggestion!r} ({candidate.similarity:.2f})"
        )
        return f"{lead}{preserve_case(core, candidate.suggestion)}{trail}"

    def _fix_recipe_misspellings(self, text: str) -> str:
        def replace(match: re.Match[str]) -> str:
            found = match.group(1)
            return preserve_case(found, RECIPE_MISSPELLINGS[found.lower()])

        def fix(line: str) -> str:
            return _SPACE_BEFORE_PUNCT.sub(r"\1", _MISSPELLING_PATTERN.sub(replace, line))

        return self._map_lines(text, fix)

    def _clean_structure(self, text: str) -> str:
        return self._map_lines(text, self._clean_line)

    def _clean_line(self, line: str) -> str:
        cleaned = line.strip()
        if _is_ingredient_like(cleaned):
            cleaned = re.sub(r"^([–\-•]?\s*)(\d+)\.\s+", r"\1\2 ", cleaned)
            cleaned = re.sub(
                rf"(\d+)\.\s+({UNIT_ALTERNATION})\b", r"\1 \2", cleaned, flags=re.IGNORECASE
            )
            return re.sub(r"^[–—]\s*", "- ", cleaned)
        numbered = _NUMBERED_LINE.match(cleaned)
        if numbered:
            return f"{numbered.group(1)}. {numbered.group(2).strip()}"
        return cleaned
