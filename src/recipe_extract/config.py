"""Settings for recipe_extract.

Every tunable value lives on ExtractionConfig: model choice, timeouts,
correction and classification thresholds, OCR and output options. Sources,
strongest first:

1. CLI arguments, applied with update()
2. RECIPE_EXTRACT_* environment variables (OPENAI_API_KEY also supplies the key)
3. The project file, .recipe-extract.toml or an explicit path
4. The user file, ~/.config/recipe-extract/config.toml
5. Field defaults

The configuration is built once at process start and threaded through
constructors via ServiceFactory; nothing reads the environment later.

Example:
    >>> config = ExtractionConfig.load()
    >>> config.update(model="gpt-4o-mini")
    >>> config.save("~/.config/recipe-extract/config.toml")
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from .exceptions import ConfigurationError

VALID_MODELS = frozenset(
    {"gpt-4o", "gpt-4o-mini", "gpt-4.1", "gpt-4.1-mini", "gpt-5-mini", "gpt-5-nano"}
)

ENV_PREFIX = "RECIPE_EXTRACT_"

# Keys read from the environment as comma-separated lists
_LIST_KEYS = frozenset({"translation_endpoints"})

# Never written to disk by save()
_SECRET_KEYS = frozenset({"api_key"})


@dataclass
class ExtractionConfig:
    """Settings shared by every extraction component.

    Attributes:
        Model Settings:
            model: OpenAI model used for translation, refinement and vision
            temperature: Sampling temperature
            max_tokens: Completion token limit for recipe parses
            api_key: OpenAI API key (None means the call tier is unavailable)

        Network Settings:
            translation_timeout: Seconds allowed for one translation call
            refinement_timeout: Seconds allowed for the refinement call
            fetch_timeout: Seconds allowed for fetching a web page
            translation_endpoints: LibreTranslate-style endpoints tried in order

        Correction Settings:
            similarity_threshold: Minimum similarity to accept a spelling fix
            min_word_length: Words shorter than this are never corrected

        Classification Settings:
            recipe_score_threshold: Points needed to classify text as a recipe
            min_recipe_chars: Shorter text is never a recipe
            max_recipe_chars: Longer text is never a single recipe

        Language Settings:
            min_language_confidence: Minimum detector probability
            min_detect_letters: Fewer letters than this is undetectable

        Extraction Settings:
            max_instructions: Cap on the number of instruction steps

        OCR Settings:
            ocr_language: Tesseract language pack(s), e.g. "eng+deu"
            max_concurrent_ocr: Images recognized at the same time

        Output Settings:
            output_dir: Directory the CLI writes recipes to
            debug_mode: Enable debug logging

    Example:
        >>> config = ExtractionConfig(model="gpt-4o-mini", max_instructions=8)
    """

    # Model settings
    model: str = "gpt-4o"
    temperature: float = 0.1
    max_tokens: int = 1500
    api_key: str | None = None

    # Network settings
    translation_timeout: float = 15.0
    refinement_timeout: float = 15.0
    fetch_timeout: float = 15.0
    translation_endpoints: list[str] = field(default_factory=list)

    # Correction settings
    similarity_threshold: float = 0.6
    min_word_length: int = 3

    # Classification settings
    recipe_score_threshold: int = 2
    min_recipe_chars: int = 120
    max_recipe_chars: int = 50000

    # Language settings
    min_language_confidence: float = 0.5
    min_detect_letters: int = 12

    # Extraction settings
    max_instructions: int = 10

    # OCR settings
    ocr_language: str = "eng"
    max_concurrent_ocr: int = 4

    # Output settings
    output_dir: Path = field(default_factory=lambda: Path("output"))
    debug_mode: bool = False

    def __post_init__(self) -> None:
        """Check values as soon as the object is built."""
        self._validate()

    def _validate(self) -> None:
        """Reject out-of-range values and coerce loosely typed ones.

        Raises:
            ConfigurationError: On the first invalid value
        """
        if self.model not in VALID_MODELS:
            raise ConfigurationError(
                f"Invalid model: {self.model}",
                model=self.model,
                valid_models=", ".join(sorted(VALID_MODELS)),
            )

        if not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(
                "Temperature must be between 0.0 and 2.0",
                temperature=self.temperature,
            )

        if self.max_tokens < 1:
            raise ConfigurationError(
                "max_tokens must be at least 1",
                max_tokens=self.max_tokens,
            )

        for name in ("translation_timeout", "refinement_timeout", "fetch_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive", **{name: value})

        if isinstance(self.translation_endpoints, str):
            self.translation_endpoints = _split_list(self.translation_endpoints)

        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ConfigurationError(
                "similarity_threshold must be between 0.0 and 1.0",
                similarity_threshold=self.similarity_threshold,
            )

        if self.min_word_length < 1:
            raise ConfigurationError(
                "min_word_length must be at least 1",
                min_word_length=self.min_word_length,
            )

        if self.recipe_score_threshold < 0:
            raise ConfigurationError(
                "recipe_score_threshold must be non-negative",
                recipe_score_threshold=self.recipe_score_threshold,
            )

        if not 0 <= self.min_recipe_chars <= self.max_recipe_chars:
            raise ConfigurationError(
                "min_recipe_chars must be non-negative and not exceed max_recipe_chars",
                min_recipe_chars=self.min_recipe_chars,
                max_recipe_chars=self.max_recipe_chars,
            )

        if not 0.0 <= self.min_language_confidence <= 1.0:
            raise ConfigurationError(
                "min_language_confidence must be between 0.0 and 1.0",
                min_language_confidence=self.min_language_confidence,
            )

        if self.min_detect_letters < 1:
            raise ConfigurationError(
                "min_detect_letters must be at least 1",
                min_detect_letters=self.min_detect_letters,
            )

        if self.max_instructions < 1:
            raise ConfigurationError(
                "max_instructions must be at least 1",
                max_instructions=self.max_instructions,
            )

        if self.max_concurrent_ocr < 1:
            raise ConfigurationError(
                "max_concurrent_ocr must be at least 1",
                max_concurrent_ocr=self.max_concurrent_ocr,
            )

        # TOML and env values arrive as str
        if not isinstance(self.output_dir, Path):
            self.output_dir = Path(self.output_dir)

    @property
    def has_api_key(self) -> bool:
        """Whether remote model calls can be attempted."""
        return bool(self.api_key)

    def require_api_key(self) -> str:
        """Return the API key or fail.

        Raises:
            ConfigurationError: If no key is configured
        """
        if not self.api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured",
                hint=f"set {ENV_PREFIX}API_KEY or OPENAI_API_KEY",
            )
        return self.api_key

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        load_user_config: bool = True,
        load_env: bool = True,
    ) -> "ExtractionConfig":
        """Build a config from the user file, the project file and the environment.

        Each source overrides the ones before it; a missing file is skipped.

        Args:
            config_path: Project TOML file; defaults to .recipe-extract.toml
            load_user_config: Read ~/.config/recipe-extract/config.toml
            load_env: Apply RECIPE_EXTRACT_* and OPENAI_API_KEY

        Returns:
            A validated ExtractionConfig

        Raises:
            ConfigurationError: If a file is unreadable or a value is invalid

        Example:
            >>> config = ExtractionConfig.load("myproject.toml", load_user_config=False)
        """
        config_dict: dict[str, Any] = {}

        if load_user_config:
            user_config_path = Path.home() / ".config" / "recipe-extract" / "config.toml"
            if user_config_path.exists():
                config_dict.update(cls._load_toml(user_config_path))

        if config_path:
            project_path = Path(config_path)
            if project_path.exists():
                config_dict.update(cls._load_toml(project_path))
        else:
            default_path = Path(".recipe-extract.toml")
            if default_path.exists():
                config_dict.update(cls._load_toml(default_path))

        if load_env:
            config_dict.update(cls._load_env())

        return cls(**config_dict)

    @staticmethod
    def _load_toml(path: Path) -> dict[str, Any]:
        """Read one TOML file, unwrapping a [recipe-extract] table if present.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "recipe-extract" in data:
                return data["recipe-extract"]
            return data

        except (OSError, tomllib.TOMLDecodeError, KeyError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {path}",
                path=str(path),
                error=str(e),
            ) from e

    @staticmethod
    def _load_env() -> dict[str, Any]:
        """Collect RECIPE_EXTRACT_* variables, coercing booleans and numbers.

        The suffix names the field in upper case, e.g.:
        - RECIPE_EXTRACT_MODEL=gpt-4o-mini
        - RECIPE_EXTRACT_TRANSLATION_TIMEOUT=10
        - RECIPE_EXTRACT_TRANSLATION_ENDPOINTS=https://a/translate,https://b/translate

        OPENAI_API_KEY is honoured when RECIPE_EXTRACT_API_KEY is not set.
        """
        config: dict[str, Any] = {}

        openai_key = os.environ.get("OPENAI_API_KEY")
        if openai_key:
            config["api_key"] = openai_key

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            config_key = key[len(ENV_PREFIX) :].lower()

            if config_key in _LIST_KEYS:
                config[config_key] = _split_list(value)
            elif config_key in _SECRET_KEYS:
                config[config_key] = value
            elif value.lower() in ("true", "1", "yes"):
                config[config_key] = True
            elif value.lower() in ("false", "0", "no"):
                config[config_key] = False
            elif value.isdigit():
                config[config_key] = int(value)
            elif value.replace(".", "", 1).isdigit():  # Float
                config[config_key] = float(value)
            else:
                config[config_key] = value

        return config

    def save(self, path: str | Path) -> None:
        """Write the settings to a TOML file, leaving out the API key.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            path = Path(path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)

            config_dict = {
                key: value
                for key, value in self.to_dict().items()
                if key not in _SECRET_KEYS and value is not None
            }

            with open(path, "wb") as f:
                tomli_w.dump(config_dict, f)

        except (OSError, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to save configuration to {path}",
                path=str(path),
                error=str(e),
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Plain-value copy of the settings; paths become strings."""
        result: dict[str, Any] = {}
        for key, value in self.__dict__.items():
            if isinstance(value, Path):
                result[key] = str(value)
            elif isinstance(value, list):
                result[key] = list(value)
            else:
                result[key] = value
        return result

    def update(self, **kwargs: Any) -> None:
        """Set fields by name and re-run validation.

        Raises:
            ConfigurationError: For an unknown field or an invalid value

        Example:
            >>> config = ExtractionConfig()
            >>> config.update(model="gpt-4o-mini", refinement_timeout=10.0)
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ConfigurationError(
                    f"Unknown configuration key: {key}",
                    key=key,
                    valid_keys=", ".join(self.__dataclass_fields__.keys()),
                )

        self._validate()


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]
