"""Pytest configuration and fixtures for recipe_extract tests.

Environment fixtures go through monkeypatch, file fixtures through tmp_path.
The spell checker, OCR engine and OpenAI client are replaced by fakes so no
test touches the network, Tesseract or a word list on disk.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all RECIPE_EXTRACT_* environment variables and OPENAI_API_KEY.

    Use this fixture when testing configuration loading to ensure
    no environment variables interfere with test expectations.
    """
    import os

    for key in list(os.environ.keys()):
        if key.startswith("RECIPE_EXTRACT_") or key == "OPENAI_API_KEY":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mock_env(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> dict[str, str]:
    """Provide a helper to set RECIPE_EXTRACT_* environment variables.

    Returns a dict that, when populated, sets the corresponding env vars.

    Example:
        def test_env_loading(mock_env):
            mock_env["MODEL"] = "gpt-4o-mini"
            # RECIPE_EXTRACT_MODEL is now set
    """

    class EnvSetter(dict[str, str]):
        def __setitem__(self, key: str, value: str) -> None:
            super().__setitem__(key, value)
            monkeypatch.setenv(f"RECIPE_EXTRACT_{key}", value)

    return EnvSetter()


@pytest.fixture
def default_config():
    """Create a default ExtractionConfig instance without an API key."""
    from recipe_extract.config import ExtractionConfig

    return ExtractionConfig()


@pytest.fixture
def keyed_config():
    """Create an ExtractionConfig with a (fake) API key."""
    from recipe_extract.config import ExtractionConfig

    return ExtractionConfig(api_key="sk-test")


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Provide valid configuration values as a dictionary."""
    return {
        "model": "gpt-4o-mini",
        "temperature": 0.0,
        "translation_timeout": 10.0,
        "refinement_timeout": 20.0,
        "similarity_threshold": 0.7,
        "min_word_length": 4,
        "recipe_score_threshold": 3,
        "max_instructions": 8,
        "ocr_language": "eng+deu",
        "debug_mode": False,
    }


# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeSpellChecker:
    """Stand-in for pyspellchecker's SpellChecker with a fixed vocabulary."""

    def __init__(self, known: set[str], corrections: dict[str, str] | None = None) -> None:
        self.known = known
        self.corrections = corrections or {}

    def __contains__(self, word: str) -> bool:
        return word in self.known

    def correction(self, word: str) -> str | None:
        return self.corrections.get(word)


@pytest.fixture
def fake_spellchecker() -> FakeSpellChecker:
    """Spell checker knowing a handful of recipe words."""
    return FakeSpellChecker(
        known={"heat", "the", "oil", "add", "garlic", "stir", "chicken", "onion", "salt", "and"},
        corrections={
            "chiken": "chicken",
            "onoin": "onion",
            "garlc": "garlic",
            "stri": "stir",
            "xqzt": "quiz",
        },
    )


class FakeRecognizer:
    """TextRecognizer returning canned text per image."""

    def __init__(self, texts: dict[bytes, str | Exception]) -> None:
        self.texts = texts
        self.calls: list[bytes] = []

    async def extract_text(self, image: bytes) -> str:
        self.calls.append(image)
        result = self.texts[image]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_recognizer_cls() -> type[FakeRecognizer]:
    """The FakeRecognizer class, for tests that build their own."""
    return FakeRecognizer


# ============================================================================
# Recipe Fixtures
# ============================================================================


@pytest.fixture
def english_recipe_text() -> str:
    """A short English recipe as OCR might deliver it after correction."""
    return (
        "Garlic Butter Chicken\n"
        "Serves 4\n"
        "Prep time: 10 minutes\n"
        "Cook time: 25 minutes\n"
        "\n"
        "Ingredients\n"
        "2 chicken breasts\n"
        "3 tbsp butter\n"
        "4 cloves garlic, minced\n"
        "Salt and pepper to taste\n"
        "\n"
        "Instructions\n"
        "1. Season the chicken with salt and pepper.\n"
        "2. Melt the butter in a pan over medium heat.\n"
        "3. Add the garlic and cook for 1 minute.\n"
        "4. Cook the chicken for 6 minutes per side until golden.\n"
    )


@pytest.fixture
def sample_recipe():
    """Create a sample ParsedRecipe for testing."""
    from recipe_extract.models import IngredientItem, IngredientSection, ParsedRecipe

    return ParsedRecipe(
        title="Garlic Butter Chicken",
        description="Weeknight chicken in a garlic butter sauce.",
        servings=4,
        prep_time_minutes=10,
        cook_time_minutes=25,
        ingredients_by_section={
            IngredientSection.DISH: [
                IngredientItem(amount="2", unit="", name="Chicken Breasts"),
                IngredientItem(amount="3", unit="tbsp", name="Butter"),
            ],
            IngredientSection.SEASONING: [IngredientItem(amount="0", unit="", name="Salt")],
        },
        instructions=[
            "Season the chicken.",
            "Melt the butter in a pan.",
            "Cook the chicken until golden.",
        ],
        tips=["Rest the chicken for 5 minutes before slicing."],
    )


# ============================================================================
# OpenAI Client Mocking Fixtures
# ============================================================================


@pytest.fixture
def mock_async_openai_client():
    """Create a mock AsyncOpenAI client.

    Returns a MagicMock whose chat.completions.create is an AsyncMock that
    individual tests configure.
    """
    from unittest.mock import AsyncMock, MagicMock

    client = MagicMock()
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def make_completion():
    """Build a fake chat completion response carrying the given content."""
    from unittest.mock import MagicMock

    def _make(content: str | None) -> MagicMock:
        response = MagicMock()
        choice = MagicMock()
        choice.message.content = content
        response.choices = [choice]
        return response

    return _make
