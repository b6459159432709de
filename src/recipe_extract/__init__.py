"""
Recipe Extract - Turn photographed or scraped recipes into structured data.

This package recognizes text on recipe photos, repairs OCR errors, translates
the text to English, and extracts title, ingredients grouped by section,
ordered instructions, times and servings. Everything runs on-device except an
optional single remote refinement.
"""

__version__ = "0.1.0"

from .config import ExtractionConfig
from .exceptions import NoRecipeDetectedError, NoTextExtractedError, RecipeExtractError
from .models import IngredientItem, IngredientSection, ParsedRecipe
from .pipeline import RecipeExtractionService, create_default_pipeline
from .services import ServiceFactory

__all__ = [
    "ExtractionConfig",
    "IngredientItem",
    "IngredientSection",
    "NoRecipeDetectedError",
    "NoTextExtractedError",
    "ParsedRecipe",
    "RecipeExtractError",
    "RecipeExtractionService",
    "ServiceFactory",
    "create_default_pipeline",
]
