"""JSON file output for extracted recipes.

FileRecipeRepository is the default RecipeSink. Each recipe becomes a
``<slug>.json`` file holding the recipe payload plus its source images.

Example:
    >>> from recipe_extract.repository import FileRecipeRepository
    >>> repository = FileRecipeRepository(Path("output"))
    >>> path = repository.save(recipe, media=[photo_bytes])
"""

from __future__ import annotations

import base64
import json
import logging
import re
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import ParsedRecipe

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Lowercase hyphenated file stem for a title; "recipe" when nothing is left.

    Example:
        >>> slugify("CrÃ¨me BrÃ»lÃ©e, the classic way")
        'crÃ¨me-brÃ»lÃ©e-the-classic-way'
    """
    words = re.findall(r"[^\W_]+", re.sub(r"['’]", "", text.lower()))
    return "-".join(words) or "recipe"


class FileRecipeRepository:
    """Writes each recipe to its own JSON file, never overwriting one.

    Attributes:
        output_dir: Directory used when save() is not given one
    """

    def __init__(self, output_dir: Path = Path("output")) -> None:
        self.output_dir = Path(output_dir)
        self._saved_titles: set[str] = set()

    def save(
        self,
        recipe: ParsedRecipe,
        media: Sequence[bytes] = (),
        output_dir: Path | None = None,
    ) -> Path | None:
        """Write one recipe with its images as base64.

        Empty recipes and titles already saved by this repository are
        skipped. A file name already taken gets a numeric suffix.

        Args:
            recipe: Recipe to save
            media: Source images stored alongside the recipe
            output_dir: Directory to save to (defaults to ``self.output_dir``)

        Returns:
            Path to the saved file, or None if skipped
        """
        if recipe.is_empty:
            logger.info("Skipping empty recipe")
            return None

        title_key = recipe.title.strip().casefold()
        if title_key and title_key in self._saved_titles:
            logger.debug(f"Already saved '{recipe.title}', skipping")
            return None

        directory = Path(output_dir) if output_dir is not None else self.output_dir
        directory.mkdir(parents=True, exist_ok=True)
        filepath = self._free_path(directory, slugify(recipe.title))

        payload = self._to_dict(recipe, media)
        filepath.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

        if title_key:
            self._saved_titles.add(title_key)
        logger.info(f"Wrote {filepath}")
        return filepath

    @staticmethod
    def _free_path(directory: Path, slug: str) -> Path:
        candidate = directory / f"{slug}.json"
        counter = 2
        while candidate.exists():
            candidate = directory / f"{slug}-{counter}.json"
            counter += 1
        return candidate

    @staticmethod
    def _to_dict(recipe: ParsedRecipe, media: Sequence[bytes]) -> dict[str, Any]:
        return {
            "id": str(uuid.uuid4()),
            **recipe.to_payload(),
            "images": [base64.b64encode(image).decode("ascii") for image in media],
        }
