"""Builds every pipeline collaborator from one ExtractionConfig.

No component reads settings or holds a client on its own; the factory
creates them and shares the expensive ones.

Shared per factory:
- One AsyncOpenAI client (connection pooling, no automatic retries)
- One httpx.AsyncClient for web ingest and translation endpoints
- One spell checker (loading its word list is slow)

Example:
    >>> from recipe_extract.config import ExtractionConfig
    >>> config = ExtractionConfig.load()
    >>> factory = ServiceFactory(config)
    >>> translator = factory.create_translator()
    >>> extractor = factory.create_extractor()
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

import httpx
from openai import AsyncOpenAI

if TYPE_CHECKING:
    from spellchecker import SpellChecker

    from ..classifier import RecipeContentClassifier
    from ..config import ExtractionConfig
    from ..correction import OCRTextCorrector
    from ..extractor import RecipeFieldExtractor
    from ..language import LanguageIdentifier
    from ..ocr import TesseractTextRecognizer
    from ..remote import RemoteRecipeModel
    from ..repository import FileRecipeRepository
    from ..translation import TranslationOrchestrator


@dataclass
class ServiceFactory:
    """Factory for creating service instances with shared dependencies.

    Attributes:
        config: Extraction configuration for all services

    Example:
        >>> factory = ServiceFactory(ExtractionConfig())
        >>> corrector = factory.create_corrector()
        >>> classifier = factory.create_classifier()

    Note:
        Clients are created lazily on first access and cached, so a factory
        that never calls a remote service never needs an API key.
    """

    config: ExtractionConfig

    @cached_property
    def client(self) -> AsyncOpenAI:
        """Get the shared async OpenAI client.

        Raises:
            ConfigurationError: If no API key is configured
        """
        return AsyncOpenAI(
            api_key=self.config.require_api_key(),
            timeout=self.config.refinement_timeout,
            max_retries=0,
        )

    @cached_property
    def http_client(self) -> httpx.AsyncClient:
        """Get the shared HTTP client for web pages and translation endpoints."""
        return httpx.AsyncClient(
            timeout=self.config.fetch_timeout,
            headers={"User-Agent": "recipe-extract"},
        )

    @cached_property
    def spellchecker(self) -> SpellChecker:
        """Get the shared spell checker, loaded with recipe vocabulary."""
        from ..correction import build_spellchecker

        return build_spellchecker()

    def create_language_identifier(self) -> LanguageIdentifier:
        """Create a language identifier with configured thresholds."""
        from ..language import LanguageIdentifier

        return LanguageIdentifier(
            min_confidence=self.config.min_language_confidence,
            min_letters=self.config.min_detect_letters,
        )

    def create_remote_model(self) -> RemoteRecipeModel | None:
        """Create the remote model client.

        Returns:
            Configured RemoteRecipeModel, or None when no API key is configured
        """
        if not self.config.has_api_key:
            return None

        from ..remote import RemoteRecipeModel

        return RemoteRecipeModel(
            client=self.client,
            model=self.config.model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

    def create_translator(
        self, identifier: LanguageIdentifier | None = None
    ) -> TranslationOrchestrator:
        """Create a translation orchestrator.

        The remote model tier is present only with an API key, the endpoint
        tier only when endpoints are configured.

        Args:
            identifier: Language identifier to share (a new one otherwise)

        Example:
            >>> translator = factory.create_translator()
            >>> english = await translator.translate_to_english(text)
        """
        from ..translation import EndpointTranslator, TranslationOrchestrator

        endpoints = None
        if self.config.translation_endpoints:
            endpoints = EndpointTranslator(
                endpoints=self.config.translation_endpoints,
                http_client=self.http_client,
            )

        return TranslationOrchestrator(
            identifier=identifier or self.create_language_identifier(),
            model=self.create_remote_model(),
            endpoints=endpoints,
            timeout=self.config.translation_timeout,
        )

    def create_corrector(self) -> OCRTextCorrector:
        """Create an OCR text corrector sharing the factory's spell checker."""
        from ..correction import OCRTextCorrector

        return OCRTextCorrector(
            similarity_threshold=self.config.similarity_threshold,
            min_word_length=self.config.min_word_length,
            spellchecker=self.spellchecker,
        )

    def create_classifier(self) -> RecipeContentClassifier:
        """Create a recipe content classifier with configured thresholds."""
        from ..classifier import RecipeContentClassifier

        return RecipeContentClassifier(
            threshold=self.config.recipe_score_threshold,
            min_chars=self.config.min_recipe_chars,
            max_chars=self.config.max_recipe_chars,
        )

    def create_extractor(self) -> RecipeFieldExtractor:
        """Create the rule-based field extractor."""
        from ..extractor import RecipeFieldExtractor

        return RecipeFieldExtractor(max_instructions=self.config.max_instructions)

    def create_recognizer(self) -> TesseractTextRecognizer:
        """Create the on-device text recognizer."""
        from ..ocr import TesseractTextRecognizer

        return TesseractTextRecognizer(language=self.config.ocr_language)

    def create_repository(self) -> FileRecipeRepository:
        """Create a recipe repository for persistence.

        Example:
            >>> repository = factory.create_repository()
            >>> path = repository.save(recipe)
        """
        from ..repository import FileRecipeRepository

        return FileRecipeRepository(output_dir=self.config.output_dir)

    async def aclose(self) -> None:
        """Close the shared clients that were created."""
        if "http_client" in self.__dict__:
            await self.http_client.aclose()
        if "client" in self.__dict__:
            await self.client.close()
