"""Text recognition for recipe photos.

``TesseractTextRecognizer`` is the default on-device recognizer. Recognition
of several images runs concurrently with ``recognize_all``; an image that
fails is logged and skipped as long as at least one image yields text.
"""

from __future__ import annotations

import asyncio
import io
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import NoTextExtractedError, TextRecognitionError

if TYPE_CHECKING:
    from .protocols import TextRecognizer

logger = logging.getLogger(__name__)

DEFAULT_TESSERACT_CONFIG = "--psm 6"


class TesseractTextRecognizer:
    """Recognizes printed text with Tesseract.

    Blocking Tesseract calls run in a worker thread.

    Args:
        language: Tesseract language pack(s), e.g. ``"eng"`` or ``"eng+deu"``
        config: Extra Tesseract command-line options
        logger: Logger to use instead of the module logger
    """

    def __init__(
        self,
        language: str = "eng",
        config: str = DEFAULT_TESSERACT_CONFIG,
        logger: logging.Logger | None = None,
    ) -> None:
        self.language = language
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    async def extract_text(self, image: bytes) -> str:
        """Recognize the text in one encoded image.

        Raises:
            TextRecognitionError: If the image cannot be decoded or Tesseract fails
        """
        return await asyncio.to_thread(self._recognize, image)

    def _recognize(self, image: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image)) as picture:
                grayscale = ImageOps.exif_transpose(picture).convert("L")
                text = pytesseract.image_to_string(
                    grayscale, lang=self.language, config=self.config
                )
        except UnidentifiedImageError as e:
            raise TextRecognitionError("Unreadable image", size=len(image)) from e
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise TextRecognitionError(f"Tesseract failed: {e}", language=self.language) from e
        return text.strip()


async def recognize_all(
    recognizer: TextRecognizer,
    images: Sequence[bytes],
    max_concurrent: int = 4,
    logger: logging.Logger | None = None,
) -> list[str]:
    """Recognize every image concurrently and keep the non-empty texts.

    Args:
        recognizer: Text recognizer to use
        images: Encoded images, in page order
        max_concurrent: Maximum number of images recognized at once
        logger: Logger to use instead of the module logger

    Returns:
        Recognized texts in page order, failed and empty images left out

    Raises:
        NoTextExtractedError: If no image yields any text
    """
    log = logger or logging.getLogger(__name__)
    semaphore = asyncio.Semaphore(max(max_concurrent, 1))

    async def recognize(image: bytes) -> str:
        async with semaphore:
            return await recognizer.extract_text(image)

    results = await asyncio.gather(
        *(recognize(image) for image in images), return_exceptions=True
    )

    texts: list[str] = []
    failed = 0
    for index, result in enumerate(results, start=1):
        if isinstance(result, BaseException):
            failed += 1
            log.warning(f"Text recognition failed for image {index}: {result}")
            continue
        if result.strip():
            texts.append(result.strip())
        else:
            log.info(f"No text recognized in image {index}")

    if not texts:
        raise NoTextExtractedError(
            "No text recognized in any image", images=len(images), failed=failed
        )

    log.info(f"Recognized text in {len(texts)} of {len(images)} images")
    return texts
