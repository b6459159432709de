"""Unit tests for recipe_extract.services module.

Tests ServiceFactory client creation and the collaborators it builds.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from recipe_extract.classifier import RecipeContentClassifier
from recipe_extract.config import ExtractionConfig
from recipe_extract.correction import OCRTextCorrector
from recipe_extract.exceptions import ConfigurationError
from recipe_extract.extractor import RecipeFieldExtractor
from recipe_extract.language import LanguageIdentifier
from recipe_extract.ocr import TesseractTextRecognizer
from recipe_extract.remote import RemoteRecipeModel
from recipe_extract.repository import FileRecipeRepository
from recipe_extract.services import ServiceFactory
from recipe_extract.translation import EndpointTranslator, TranslationOrchestrator


class TestServiceFactoryInit:
    """Tests for ServiceFactory initialization."""

    def test_init_with_config(self) -> None:
        """ServiceFactory stores the config."""
        config = ExtractionConfig()
        factory = ServiceFactory(config)
        assert factory.config is config


@patch("recipe_extract.services.factory.AsyncOpenAI")
class TestServiceFactoryClient:
    """Tests for the shared OpenAI client."""

    def test_client_is_created(self, mock_openai: MagicMock) -> None:
        """Client is created with the key, the timeout and no retries."""
        factory = ServiceFactory(ExtractionConfig(api_key="sk-test", refinement_timeout=9.0))

        _ = factory.client

        mock_openai.assert_called_once_with(api_key="sk-test", timeout=9.0, max_retries=0)

    def test_client_is_cached(self, mock_openai: MagicMock) -> None:
        """Client is created only once."""
        factory = ServiceFactory(ExtractionConfig(api_key="sk-test"))

        client1 = factory.client
        client2 = factory.client

        assert client1 is client2
        mock_openai.assert_called_once()

    def test_client_requires_key(self, mock_openai: MagicMock) -> None:
        """Without an API key the client cannot be built."""
        factory = ServiceFactory(ExtractionConfig())

        with pytest.raises(ConfigurationError):
            _ = factory.client
        mock_openai.assert_not_called()


@patch("recipe_extract.services.factory.AsyncOpenAI")
class TestServiceFactoryCreateRemoteModel:
    """Tests for ServiceFactory.create_remote_model."""

    def test_creates_model(self, mock_openai: MagicMock) -> None:
        """A key gives a remote model using the configured settings."""
        config = ExtractionConfig(api_key="sk-test", model="gpt-4o-mini", max_tokens=800)

        model = ServiceFactory(config).create_remote_model()

        assert isinstance(model, RemoteRecipeModel)
        assert model.model == "gpt-4o-mini"
        assert model.max_tokens == 800
        assert model.client is mock_openai.return_value

    def test_none_without_key(self, mock_openai: MagicMock) -> None:
        """No key means no remote model and no client."""
        assert ServiceFactory(ExtractionConfig()).create_remote_model() is None
        mock_openai.assert_not_called()

    def test_shares_client(self, mock_openai: MagicMock) -> None:
        """Remote models share one client."""
        factory = ServiceFactory(ExtractionConfig(api_key="sk-test"))

        first = factory.create_remote_model()
        second = factory.create_remote_model()

        assert first.client is second.client


class TestServiceFactoryCreateTranslator:
    """Tests for ServiceFactory.create_translator."""

    def test_dictionary_only_without_key_or_endpoints(self) -> None:
        """Without key and endpoints only the dictionary tier is left."""
        translator = ServiceFactory(ExtractionConfig()).create_translator()

        assert isinstance(translator, TranslationOrchestrator)
        assert translator.model is None
        assert translator.endpoints is None

    def test_endpoints_configured(self) -> None:
        """Configured endpoints become the endpoint tier."""
        config = ExtractionConfig(
            translation_endpoints=["https://translate.example.com/translate"],
            translation_timeout=7.0,
        )

        translator = ServiceFactory(config).create_translator()

        assert isinstance(translator.endpoints, EndpointTranslator)
        assert translator.endpoints.endpoints == ["https://translate.example.com/translate"]
        assert translator.timeout == 7.0

    def test_shares_identifier(self) -> None:
        """A given identifier is used as is."""
        identifier = LanguageIdentifier()

        translator = ServiceFactory(ExtractionConfig()).create_translator(identifier)

        assert translator.identifier is identifier


class TestServiceFactoryLocalServices:
    """Tests for the on-device collaborators."""

    def test_language_identifier_uses_config(self) -> None:
        """Identifier thresholds come from the config."""
        config = ExtractionConfig(min_language_confidence=0.8, min_detect_letters=20)

        identifier = ServiceFactory(config).create_language_identifier()

        assert identifier.min_confidence == 0.8
        assert identifier.min_letters == 20

    def test_corrector_shares_spellchecker(self, fake_spellchecker) -> None:
        """Correctors share the factory's spell checker."""
        config = ExtractionConfig(similarity_threshold=0.75, min_word_length=4)
        factory = ServiceFactory(config)
        factory.__dict__["spellchecker"] = fake_spellchecker

        corrector = factory.create_corrector()

        assert isinstance(corrector, OCRTextCorrector)
        assert corrector.similarity_threshold == 0.75
        assert corrector.min_word_length == 4
        assert corrector.spellchecker is fake_spellchecker

    def test_classifier_uses_config(self) -> None:
        """Classifier thresholds come from the config."""
        config = ExtractionConfig(recipe_score_threshold=4, min_recipe_chars=50)

        classifier = ServiceFactory(config).create_classifier()

        assert isinstance(classifier, RecipeContentClassifier)
        assert classifier.threshold == 4
        assert classifier.min_chars == 50

    def test_extractor_uses_config(self) -> None:
        """The extractor cap comes from the config."""
        extractor = ServiceFactory(ExtractionConfig(max_instructions=6)).create_extractor()

        assert isinstance(extractor, RecipeFieldExtractor)
        assert extractor.max_instructions == 6

    def test_recognizer_uses_config(self) -> None:
        """The OCR language comes from the config."""
        recognizer = ServiceFactory(ExtractionConfig(ocr_language="eng+jpn")).create_recognizer()

        assert isinstance(recognizer, TesseractTextRecognizer)
        assert recognizer.language == "eng+jpn"

    def test_repository_uses_output_dir(self, tmp_path: Path) -> None:
        """The repository writes to the configured directory."""
        repository = ServiceFactory(ExtractionConfig(output_dir=tmp_path)).create_repository()

        assert isinstance(repository, FileRecipeRepository)
        assert repository.output_dir == tmp_path


class TestServiceFactoryClose:
    """Tests for ServiceFactory.aclose."""

    @pytest.mark.asyncio
    async def test_closes_created_clients(self) -> None:
        """Only clients that were created are closed."""
        factory = ServiceFactory(ExtractionConfig())
        http_client = factory.http_client

        await factory.aclose()

        assert isinstance(http_client, httpx.AsyncClient)
        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_nothing_created(self) -> None:
        """Closing an unused factory creates nothing."""
        factory = ServiceFactory(ExtractionConfig())

        await factory.aclose()

        assert "http_client" not in factory.__dict__
        assert "client" not in factory.__dict__


class TestServicesPackageExports:
    """Tests for services package exports."""

    def test_exports_service_factory(self) -> None:
        """ServiceFactory is exported from services package."""
        from recipe_extract import services

        assert services.ServiceFactory is ServiceFactory
