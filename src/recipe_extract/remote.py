"""Remote model client for recipe parsing and translation.

Wraps the shared ``AsyncOpenAI`` client with the three calls the pipeline
makes: parse recipe text into the JSON recipe object, extract a recipe
directly from page images, and translate text. Each call is made once; the
client is built with ``max_retries=0`` so failures surface immediately and
the caller's fallback policy takes over.
"""

from __future__ import annotations

import base64
import io
import json
import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Final

from openai import OpenAIError
from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from .exceptions import MalformedModelResponseError, NoRecipeDetectedError, RemoteModelError
from .models import ParsedRecipe
from .prompts import (
    RECIPE_IMAGE_PROMPT,
    RECIPE_SYSTEM_PROMPT,
    RECIPE_TEXT_PROMPT,
    translation_system_prompt,
)

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

_FENCE_PATTERN: Final = re.compile(r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(content: str) -> str:
    """Remove a surrounding Markdown code fence, if any.

    Example:
        >>> strip_code_fences('```json\\n{"title": "Soup"}\\n```')
        '{"title": "Soup"}'
    """
    match = _FENCE_PATTERN.match(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def parse_recipe_response(content: str) -> ParsedRecipe:
    """Parse a model reply into a recipe.

    Args:
        content: Raw message content, possibly fenced

    Returns:
        Parsed recipe with cross-section duplicates removed

    Raises:
        MalformedModelResponseError: If the reply is not a JSON recipe object
        NoRecipeDetectedError: If the object has no title, ingredients or steps
    """
    body = strip_code_fences(content)
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedModelResponseError(
            "Model response is not valid JSON",
            error=str(e),
            preview=body[:80],
        ) from e

    if not isinstance(payload, dict):
        raise MalformedModelResponseError(
            "Model response is not a JSON object",
            type=type(payload).__name__,
        )

    try:
        recipe = ParsedRecipe.from_payload(payload)
    except (TypeError, ValueError, ValidationError) as e:
        raise MalformedModelResponseError(
            "Model response does not match the recipe schema",
            error=str(e),
        ) from e

    if recipe.is_empty:
        raise NoRecipeDetectedError("Model found no recipe in the input")

    return recipe.without_duplicate_ingredients()


def image_data_url(image: bytes) -> str:
    """Encode image bytes as a data URL for a vision message.

    Raises:
        ValueError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(image)) as img:
            image_format = (img.format or "JPEG").lower()
    except UnidentifiedImageError as e:
        raise ValueError("Unsupported image data") from e
    mime = "jpeg" if image_format == "jpg" else image_format
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:image/{mime};base64,{encoded}"


class RemoteRecipeModel:
    """Recipe parsing and translation through the OpenAI chat API.

    Attributes:
        client: Shared async OpenAI client
        model: Model name
        temperature: Sampling temperature (not sent to gpt-5 models)
        max_tokens: Completion token limit for recipe parses

    Example:
        >>> model = RemoteRecipeModel(client, model="gpt-4o")
        >>> recipe = await model.parse_recipe_from_text(text)
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o",
        temperature: float = 0.1,
        max_tokens: int = 1500,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger or logging.getLogger(__name__)

    async def _complete(
        self,
        messages: list[dict[str, Any]],
        json_mode: bool,
        max_tokens: int | None = None,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_completion_tokens": max_tokens or self.max_tokens,
        }
        if not self.model.startswith("gpt-5"):
            kwargs["temperature"] = self.temperature
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            self.logger.error(f"Model call failed ({self.model}): {e}")
            raise RemoteModelError("Model call failed", model=self.model, error=str(e)) from e

        if not response.choices:
            raise RemoteModelError("Model returned no choices", model=self.model)

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise RemoteModelError("Model returned empty content", model=self.model)
        return content

    async def parse_recipe_from_text(self, text: str) -> ParsedRecipe:
        """Parse English recipe text into a structured recipe.

        Args:
            text: Recipe text, already translated to English

        Returns:
            Parsed recipe

        Raises:
            RemoteModelError: If the call fails
            MalformedModelResponseError: If the reply is not a recipe object
            NoRecipeDetectedError: If the model found nothing
        """
        self.logger.info(f"Parsing recipe text with {self.model} ({len(text)} chars)")
        content = await self._complete(
            [
                {"role": "system", "content": RECIPE_SYSTEM_PROMPT},
                {"role": "user", "content": RECIPE_TEXT_PROMPT.format(text=text)},
            ],
            json_mode=True,
        )
        return parse_recipe_response(content)

    async def extract_from_images(self, images: Sequence[bytes]) -> ParsedRecipe:
        """Extract a recipe directly from page images.

        Args:
            images: Encoded images (JPEG, PNG, ...)

        Returns:
            Parsed recipe

        Raises:
            ValueError: If no image is given or an image cannot be decoded
            RemoteModelError: If the call fails
            MalformedModelResponseError: If the reply is not a recipe object
            NoRecipeDetectedError: If the model found nothing
        """
        if not images:
            raise ValueError("At least one image is required")

        user_content: list[dict[str, Any]] = [{"type": "text", "text": RECIPE_IMAGE_PROMPT}]
        for image in images:
            user_content.append(
                {"type": "image_url", "image_url": {"url": image_data_url(image), "detail": "high"}}
            )

        self.logger.info(f"Extracting recipe from {len(images)} image(s) with {self.model}")
        content = await self._complete(
            [
                {"role": "system", "content": RECIPE_SYSTEM_PROMPT},
                {"role": "user", "content": user_content},
            ],
            json_mode=True,
        )
        return parse_recipe_response(content)

    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate text between languages.

        Args:
            text: Text to translate
            source: Source language code, or "auto"
            target: Target language code

        Returns:
            Translated text

        Raises:
            RemoteModelError: If the call fails or returns nothing
        """
        content = await self._complete(
            [
                {"role": "system", "content": translation_system_prompt(source, target)},
                {"role": "user", "content": text},
            ],
            json_mode=False,
            max_tokens=max(self.max_tokens, len(text)),
        )
        return content.strip()
