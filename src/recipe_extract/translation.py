"""Tiered translation of recipe text.

``TranslationOrchestrator.translate_to_english`` walks a fixed chain and never
raises to its caller:

1. English (or undetectable but English-looking) text is returned unchanged.
2. The remote model translator, then the configured translation endpoints,
   each under its own timeout.
3. Static dictionary substitution for the detected language.
4. The original text.

Translating *from* English (for presenting a recipe in the reader's language)
only goes through the remote model, since no static table covers arbitrary
target languages.

Example:
    >>> orchestrator = TranslationOrchestrator(LanguageIdentifier())
    >>> await orchestrator.translate_to_english("ZUTATEN\\n2 Hähnchenbrust\\nSalz")
    'INGREDIENTS\\n2 chicken breast\\nsalt'
"""

from __future__ import annotations

import asyncio
import logging
import unicodedata
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import httpx

from .dictionaries import all_terms_longest_first, terms_longest_first, translate_unit
from .exceptions import RemoteModelError, TranslationUnavailableError
from .language import LanguageIdentifier, has_english_patterns
from .models import (
    IngredientItem,
    IngredientSection,
    Language,
    LanguageTag,
    ParsedRecipe,
    base_language,
    is_english_tag,
)

if TYPE_CHECKING:
    from .protocols import Translator

logger = logging.getLogger(__name__)

_TRADITIONAL_CHINESE = frozenset({"zh-hant", "zh-hk", "zh-tw", "zh-mo"})
_SIMPLIFIED_CHINESE = frozenset({"zh", "zh-hans", "zh-cn", "zh-sg"})


def normalize_language_code(code: LanguageTag) -> LanguageTag:
    """Normalize regional Chinese codes to script codes.

    Example:
        >>> normalize_language_code("zh-TW")
        'zh-Hant'
        >>> normalize_language_code("de-AT")
        'de-AT'
    """
    lowered = code.replace("_", "-").lower()
    if lowered in _TRADITIONAL_CHINESE or lowered.startswith("zh-hant-"):
        return "zh-Hant"
    if lowered in _SIMPLIFIED_CHINESE or lowered.startswith("zh-hans-"):
        return "zh-Hans"
    return code


def source_code(tag: LanguageTag | None) -> str:
    """Source code sent to remote translators ("auto" when unknown)."""
    if tag is None:
        return "auto"
    return base_language(tag)


def fold(text: str) -> str:
    """Lowercase and strip diacritics, keeping one output char per input char.

    Equal length lets match positions in the folded text address the
    original text directly.

    Example:
        >>> fold("Hähnchen")
        'hahnchen'
    """
    return "".join(_fold_char(ch) for ch in text)


def _fold_char(ch: str) -> str:
    lowered = ch.lower()
    if len(lowered) != 1:
        lowered = ch
    base = "".join(c for c in unicodedata.normalize("NFD", lowered) if not unicodedata.combining(c))
    return base if len(base) == 1 else lowered


def _is_latin(term: str) -> bool:
    return all(unicodedata.name(ch, "").startswith("LATIN") for ch in term if ch.isalpha())


def _replace_in_segment(
    segment: str, folded_key: str, replacement: str, whole_word: bool
) -> tuple[list[tuple[str, bool]], int]:
    folded = fold(segment)
    pieces: list[tuple[str, bool]] = []
    hits = 0
    cursor = 0
    index = folded.find(folded_key)
    while index != -1:
        end = index + len(folded_key)
        if whole_word and (
            (index > 0 and segment[index - 1].isalpha())
            or (end < len(segment) and segment[end].isalpha())
        ):
            index = folded.find(folded_key, index + 1)
            continue
        if index > cursor:
            pieces.append((segment[cursor:index], False))
        pieces.append((replacement, True))
        hits += 1
        cursor = end
        index = folded.find(folded_key, end)
    if cursor < len(segment):
        pieces.append((segment[cursor:], False))
    return pieces, hits


def _join(segments: list[tuple[str, bool]]) -> str:
    parts: list[str] = []
    previous_translated = False
    for text, translated in segments:
        if (
            parts
            and (translated or previous_translated)
            and parts[-1][-1:].isalnum()
            and text[:1].isalnum()
        ):
            parts.append(" ")
        parts.append(text)
        previous_translated = translated
    return "".join(parts)


def substitute_terms(text: str, terms: Iterable[tuple[str, str]]) -> tuple[str, int]:
    """Replace dictionary terms in text.

    Terms are applied in the order given (callers pass them longest first).
    Matching is case- and diacritic-insensitive. Replaced text is never
    matched again, so "Öl" cannot fire inside an earlier "olive oil". Latin
    terms of three characters or fewer must stand as whole words; longer
    terms also match inside compounds ("Knoblauchzehen" gives
    "garlic cloves").

    Args:
        text: Source text
        terms: (foreign, english) pairs

    Returns:
        Tuple of (translated text, number of substitutions)
    """
    segments: list[tuple[str, bool]] = [(text, False)]
    count = 0
    for term, replacement in terms:
        folded_key = fold(term)
        if not folded_key:
            continue
        whole_word = len(term) <= 3 and _is_latin(term)
        updated: list[tuple[str, bool]] = []
        for segment, translated in segments:
            if translated:
                updated.append((segment, translated))
                continue
            pieces, hits = _replace_in_segment(segment, folded_key, replacement, whole_word)
            count += hits
            updated.extend(pieces)
        segments = updated
    return _join(segments), count


class EndpointTranslator:
    """LibreTranslate-style HTTP translation endpoints, tried in order.

    Each endpoint is asked with the detected source language first and with
    "auto" second.

    Args:
        endpoints: Endpoint URLs accepting ``{q, source, target, format}``
        http_client: Shared async HTTP client
        logger: Optional logger (defaults to the module logger)
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        http_client: httpx.AsyncClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self.endpoints = list(endpoints)
        self.http_client = http_client
        self.logger = logger or logging.getLogger(__name__)

    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate through the first endpoint that answers.

        Raises:
            TranslationUnavailableError: If no endpoint returns a translation
        """
        if not self.endpoints:
            raise TranslationUnavailableError("No translation endpoints configured")

        sources = [source] if source == "auto" else [source, "auto"]
        for endpoint in self.endpoints:
            for candidate in sources:
                body = {"q": text, "source": candidate, "target": target, "format": "text"}
                try:
                    response = await self.http_client.post(endpoint, json=body)
                    response.raise_for_status()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    self.logger.warning(f"Endpoint {endpoint} failed (source={candidate}): {e}")
                    continue

                translated = data.get("translatedText") if isinstance(data, dict) else None
                if isinstance(translated, str) and translated.strip():
                    self.logger.info(f"Translated via {endpoint} (source={candidate})")
                    return translated
                self.logger.warning(f"Endpoint {endpoint} returned no translatedText")

        raise TranslationUnavailableError(
            "All translation endpoints failed",
            endpoints=len(self.endpoints),
        )


class TranslationOrchestrator:
    """Translate recipe text with tiered fallback.

    Attributes:
        identifier: Language detector
        model: Remote model translator (None when no API key is configured)
        endpoints: Endpoint translator tried after the model (optional)
        timeout: Seconds allowed per remote tier

    Example:
        >>> orchestrator = TranslationOrchestrator(identifier, model=remote_model)
        >>> english = await orchestrator.translate_to_english(text)
    """

    def __init__(
        self,
        identifier: LanguageIdentifier,
        model: Translator | None = None,
        endpoints: Translator | None = None,
        timeout: float = 15.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.identifier = identifier
        self.model = model
        self.endpoints = endpoints
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def _remote_tiers(self) -> list[tuple[str, Translator]]:
        tiers: list[tuple[str, Translator]] = []
        if self.model is not None:
            tiers.append(("model", self.model))
        if self.endpoints is not None:
            tiers.append(("endpoints", self.endpoints))
        return tiers

    async def _attempt(
        self, tier: str, translator: Translator, text: str, source: str, target: str
    ) -> str:
        try:
            result = await asyncio.wait_for(
                translator.translate(text, source, target), timeout=self.timeout
            )
        except TimeoutError as e:
            raise TranslationUnavailableError(
                "Translation timed out", tier=tier, timeout=self.timeout
            ) from e
        except (RemoteModelError, TranslationUnavailableError) as e:
            raise TranslationUnavailableError(
                "Translation failed", tier=tier, error=e.message
            ) from e

        if not result.strip():
            raise TranslationUnavailableError("Translation was empty", tier=tier)
        return result

    async def translate_to_english(self, text: str) -> str:
        """Translate text to English, degrading to best effort.

        Args:
            text: Text in any language

        Returns:
            English text, or the input when nothing could translate it
        """
        if not text.strip():
            return text
        return await self.translate_detected(text, self.identifier.detect(text))

    async def translate_detected(self, text: str, language: LanguageTag | None) -> str:
        """Translate text whose language was already detected.

        Args:
            text: Source text
            language: Detected tag, or None when undetectable

        Returns:
            English text, or the input when nothing could translate it
        """
        if not text.strip() or is_english_tag(language):
            return text
        if language is None and has_english_patterns(text):
            return text

        source = source_code(language)
        for tier, translator in self._remote_tiers():
            try:
                translated = await self._attempt(tier, translator, text, source, "en")
            except TranslationUnavailableError as e:
                self.logger.warning(f"{e}; trying next tier")
                continue
            self.logger.info(f"Translated {len(text)} chars from {source} via {tier}")
            return translated

        return self.dictionary_translate(text, language)

    def dictionary_translate(self, text: str, language: LanguageTag | None) -> str:
        """Apply the static term table for a language.

        Undetected text is matched against every table. Languages without a
        table are returned unchanged.
        """
        table_language = Language.from_tag(language)
        if table_language is not None:
            terms = terms_longest_first(table_language)
        elif language is None:
            terms = all_terms_longest_first()
        else:
            self.logger.info(f"No dictionary for language {language}; keeping original text")
            return text

        translated, count = substitute_terms(text, terms)
        if count == 0:
            self.logger.info("Dictionary translation found no known terms")
            return text

        self.logger.info(f"Dictionary translation replaced {count} term(s)")
        return translated

    async def translate_from_english(self, text: str, target: LanguageTag) -> str:
        """Translate English text into a target language.

        Args:
            text: English text
            target: Target language tag

        Returns:
            Translated text (the input for English targets)

        Raises:
            TranslationUnavailableError: If the remote model is missing or fails
        """
        if not text.strip() or is_english_tag(target):
            return text
        if self.model is None:
            raise TranslationUnavailableError("No remote model configured", target=target)
        return await self._attempt(
            "model", self.model, text, "en", normalize_language_code(target)
        )

    async def _translate_or_keep(self, text: str, target: LanguageTag) -> str:
        try:
            return await self.translate_from_english(text, target)
        except TranslationUnavailableError as e:
            self.logger.warning(f"Keeping English text: {e}")
            return text

    async def translate_recipe(self, recipe: ParsedRecipe, target: LanguageTag) -> ParsedRecipe:
        """Translate a finished recipe for display in another language.

        Each field is translated on its own; a field whose translation fails
        keeps its English value. Units use the static unit table.

        Args:
            recipe: English recipe
            target: Target language tag

        Returns:
            New translated recipe (the input for English targets)
        """
        if is_english_tag(target):
            return recipe

        async def translate_all(texts: list[str]) -> list[str]:
            return list(await asyncio.gather(*(self._translate_or_keep(t, target) for t in texts)))

        title, description = await translate_all([recipe.title, recipe.description])
        instructions = await translate_all(recipe.instructions)
        tips = await translate_all(recipe.tips)

        sections: dict[IngredientSection, list[IngredientItem]] = {}
        for section, items in recipe.ingredients_by_section.items():
            names = await translate_all([item.name for item in items])
            sections[section] = [
                IngredientItem(
                    amount=item.amount,
                    unit=translate_unit(item.unit, target),
                    name=name,
                )
                for item, name in zip(items, names, strict=True)
            ]

        return recipe.model_copy(
            update={
                "title": title,
                "description": description,
                "instructions": instructions,
                "tips": tips,
                "ingredients_by_section": sections,
            }
        )
