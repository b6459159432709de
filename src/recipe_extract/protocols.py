"""Structural interfaces for the pipeline's pluggable collaborators.

Any object with the right async methods can stand in for the OCR engine, a
translation tier, the refinement model or the output sink; all four are
runtime checkable.

Example:
    >>> class FakeRecognizer:
    ...     async def extract_text(self, image: bytes) -> str:
    ...         return "Pancakes\\n2 eggs"
    ...
    >>> isinstance(FakeRecognizer(), TextRecognizer)
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import ParsedRecipe


@runtime_checkable
class TextRecognizer(Protocol):
    """Image-to-text OCR capability.

    Example:
        >>> class TesseractRecognizer:
        ...     async def extract_text(self, image: bytes) -> str:
        ...         ...
    """

    async def extract_text(self, image: bytes) -> str:
        """Recognize the text on one image.

        Args:
            image: Encoded image bytes

        Returns:
            Recognized text (may be empty)

        Raises:
            TextRecognitionError: If the image cannot be processed
        """
        ...


@runtime_checkable
class Translator(Protocol):
    """A remote translation tier."""

    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate text.

        Args:
            text: Text to translate
            source: Source language code, or "auto"
            target: Target language code

        Returns:
            Translated text

        Raises:
            RemoteModelError: If a remote model call fails
            TranslationUnavailableError: If no endpoint answers
        """
        ...


@runtime_checkable
class RecipeRefiner(Protocol):
    """Paid remote re-parse of recipe text."""

    async def parse_recipe_from_text(self, text: str) -> ParsedRecipe:
        """Parse English recipe text into a structured recipe.

        Raises:
            RemoteModelError: If the call fails
            MalformedModelResponseError: If the reply is not a recipe object
        """
        ...


@runtime_checkable
class RecipeSink(Protocol):
    """Persistence layer accepting finished recipes.

    Example:
        >>> class InMemorySink:
        ...     def save(self, recipe, media=()):
        ...         self.saved = recipe
    """

    def save(self, recipe: ParsedRecipe, media: Sequence[bytes] = ()) -> object:
        """Store a recipe together with its source media.

        Args:
            recipe: Finished recipe
            media: Uploaded images belonging to the recipe

        Returns:
            Implementation-defined handle (path, id, ...)
        """
        ...
