"""Custom exceptions for recipe_extract.

This module defines the exception hierarchy used throughout the extraction
pipeline. Only two conditions are terminal for a caller (no text and no
recipe); the others mark a degraded tier and are caught where the pipeline
falls back.

The exception hierarchy:
- Base exception for all recipe_extract errors, carrying keyword context
- Fatal conditions surfaced to the caller
- Non-fatal conditions raised by one tier and handled by the next

Example:
    >>> try:
    ...     raise NoRecipeDetectedError("Nothing usable", characters=42)
    ... except RecipeExtractError as e:
    ...     print(f"Error with {e.context}: {e}")
"""


class RecipeExtractError(Exception):
    """Base exception for all recipe_extract errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about where/when the error occurred
    """

    def __init__(self, message: str, **context: str | int | float | bool | None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional context (e.g., image=2, language="de")
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Format error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(RecipeExtractError):
    """Error in configuration or settings.

    Raised when:
    - Configuration file is invalid
    - Required settings are missing (e.g. no API key for a remote call)
    - Settings have invalid values
    - Environment variables are malformed

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid model name in configuration",
        ...     model="gpt-invalid",
        ... )
    """

    pass


class NoTextExtractedError(RecipeExtractError):
    """OCR produced no text across all source images.

    This is a terminal failure returned to the caller.

    Example:
        >>> raise NoTextExtractedError("No text recognized", images=3, failed=3)
    """

    pass


class NoRecipeDetectedError(RecipeExtractError):
    """Extraction produced no title, ingredients or instructions.

    This is a terminal failure returned to the caller.
    """

    pass


class TextRecognitionError(RecipeExtractError):
    """OCR failed for a single image.

    The pipeline logs and skips the image as long as another one yields text.
    """

    pass


class TranslationUnavailableError(RecipeExtractError):
    """A translation tier could not produce a translation.

    Raised when:
    - The remote model call fails, times out or returns nothing
    - Every configured translation endpoint fails
    - No API key is configured for the remote model

    ``translate_to_english`` catches this and falls through to the next tier;
    ``translate_from_english`` lets it propagate.
    """

    pass


class RemoteModelError(RecipeExtractError):
    """A call to the remote model failed.

    Raised when:
    - The OpenAI API returns an error
    - The network call fails or times out
    - The response carries no content

    Example:
        >>> raise RemoteModelError("Model call failed", model="gpt-4o", error="timeout")
    """

    pass


class MalformedModelResponseError(RemoteModelError):
    """The remote model answered with something that is not a recipe object.

    Fatal on the direct model extraction path, non-fatal during refinement.

    Example:
        >>> raise MalformedModelResponseError("Response is not JSON", preview="Sure! Here")
    """

    pass


class RemoteRefinementError(RecipeExtractError):
    """Optional remote refinement failed and the baseline result was kept.

    Never raised to the caller; recorded on the pipeline context so callers
    can inspect why a result was not refined.
    """

    pass


class IngestError(RecipeExtractError):
    """A web page could not be fetched or held no recipe text.

    Example:
        >>> raise IngestError("Page returned no text", url="https://example.com/r/1")
    """

    pass
