"""Unit tests for recipe_extract.protocols module.

Tests Protocol definitions and runtime checkability.
"""

from collections.abc import Sequence

from recipe_extract.models import ParsedRecipe
from recipe_extract.ocr import TesseractTextRecognizer
from recipe_extract.protocols import RecipeRefiner, RecipeSink, TextRecognizer, Translator
from recipe_extract.repository import FileRecipeRepository
from recipe_extract.translation import EndpointTranslator


class TestTextRecognizerProtocol:
    """Tests for TextRecognizer protocol."""

    def test_is_runtime_checkable(self) -> None:
        """TextRecognizer can be used with isinstance."""

        class MockRecognizer:
            async def extract_text(self, image: bytes) -> str:
                return ""

        assert isinstance(MockRecognizer(), TextRecognizer)

    def test_missing_method_fails_check(self) -> None:
        """Class without extract_text fails isinstance check."""

        class BadRecognizer:
            pass

        assert not isinstance(BadRecognizer(), TextRecognizer)

    def test_tesseract_recognizer_conforms(self) -> None:
        """The default recognizer satisfies the protocol."""
        assert isinstance(TesseractTextRecognizer(), TextRecognizer)


class TestTranslatorProtocol:
    """Tests for Translator protocol."""

    def test_is_runtime_checkable(self) -> None:
        """Translator can be used with isinstance."""

        class MockTranslator:
            async def translate(self, text: str, source: str, target: str) -> str:
                return text

        assert isinstance(MockTranslator(), Translator)

    def test_endpoint_translator_conforms(self) -> None:
        """The endpoint tier satisfies the protocol."""
        from unittest.mock import MagicMock

        assert isinstance(EndpointTranslator([], http_client=MagicMock()), Translator)


class TestRecipeRefinerProtocol:
    """Tests for RecipeRefiner protocol."""

    def test_is_runtime_checkable(self) -> None:
        """RecipeRefiner can be used with isinstance."""

        class MockRefiner:
            async def parse_recipe_from_text(self, text: str) -> ParsedRecipe:
                return ParsedRecipe()

        assert isinstance(MockRefiner(), RecipeRefiner)

    def test_missing_method_fails_check(self) -> None:
        """Class without parse_recipe_from_text fails isinstance check."""

        class BadRefiner:
            async def parse(self, text: str) -> ParsedRecipe:
                return ParsedRecipe()

        assert not isinstance(BadRefiner(), RecipeRefiner)


class TestRecipeSinkProtocol:
    """Tests for RecipeSink protocol."""

    def test_is_runtime_checkable(self) -> None:
        """RecipeSink can be used with isinstance."""

        class InMemorySink:
            def __init__(self) -> None:
                self.saved: list[ParsedRecipe] = []

            def save(self, recipe: ParsedRecipe, media: Sequence[bytes] = ()) -> None:
                self.saved.append(recipe)

        assert isinstance(InMemorySink(), RecipeSink)

    def test_file_repository_conforms(self, tmp_path) -> None:
        """The file repository satisfies the protocol."""
        assert isinstance(FileRecipeRepository(tmp_path), RecipeSink)
