"""Unit tests for recipe_extract.config module.

Tests ExtractionConfig validation, loading, and serialization.
"""

from pathlib import Path

import pytest

from recipe_extract.config import ExtractionConfig
from recipe_extract.exceptions import ConfigurationError


class TestExtractionConfigDefaults:
    """Tests for ExtractionConfig default values."""

    def test_default_model(self) -> None:
        """Default model is gpt-4o."""
        config = ExtractionConfig()
        assert config.model == "gpt-4o"

    def test_default_timeouts(self) -> None:
        """Remote calls default to 15 seconds."""
        config = ExtractionConfig()
        assert config.translation_timeout == 15.0
        assert config.refinement_timeout == 15.0

    def test_default_thresholds(self) -> None:
        """Correction and classification thresholds have their tuned defaults."""
        config = ExtractionConfig()
        assert config.similarity_threshold == 0.6
        assert config.min_word_length == 3
        assert config.recipe_score_threshold == 2
        assert config.max_instructions == 10

    def test_no_api_key_by_default(self) -> None:
        """Without a key the remote tier is unavailable."""
        config = ExtractionConfig()
        assert config.api_key is None
        assert not config.has_api_key

    def test_default_output_dir_is_path(self) -> None:
        """Default output_dir is a Path object."""
        config = ExtractionConfig()
        assert isinstance(config.output_dir, Path)
        assert config.output_dir == Path("output")


class TestExtractionConfigValidation:
    """Tests for ExtractionConfig validation logic."""

    def test_valid_models(self) -> None:
        """Supported models are accepted."""
        for model in ["gpt-4o", "gpt-4o-mini", "gpt-5-mini"]:
            config = ExtractionConfig(model=model)
            assert config.model == model

    def test_invalid_model_raises(self) -> None:
        """Invalid model raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid model"):
            ExtractionConfig(model="invalid-model")

    def test_temperature_bounds(self) -> None:
        """Temperature must be between 0.0 and 2.0."""
        ExtractionConfig(temperature=0.0)
        ExtractionConfig(temperature=2.0)

        with pytest.raises(ConfigurationError, match="Temperature"):
            ExtractionConfig(temperature=-0.1)

        with pytest.raises(ConfigurationError, match="Temperature"):
            ExtractionConfig(temperature=2.1)

    def test_timeouts_must_be_positive(self) -> None:
        """Every timeout must be positive."""
        with pytest.raises(ConfigurationError, match="translation_timeout"):
            ExtractionConfig(translation_timeout=0)

        with pytest.raises(ConfigurationError, match="refinement_timeout"):
            ExtractionConfig(refinement_timeout=-1.0)

    def test_similarity_threshold_bounds(self) -> None:
        """similarity_threshold must be between 0.0 and 1.0."""
        ExtractionConfig(similarity_threshold=0.0)
        ExtractionConfig(similarity_threshold=1.0)

        with pytest.raises(ConfigurationError, match="similarity_threshold"):
            ExtractionConfig(similarity_threshold=1.1)

    def test_recipe_char_bounds(self) -> None:
        """min_recipe_chars may not exceed max_recipe_chars."""
        with pytest.raises(ConfigurationError, match="min_recipe_chars"):
            ExtractionConfig(min_recipe_chars=500, max_recipe_chars=100)

    def test_max_instructions_minimum(self) -> None:
        """max_instructions must be at least 1."""
        ExtractionConfig(max_instructions=1)

        with pytest.raises(ConfigurationError, match="max_instructions"):
            ExtractionConfig(max_instructions=0)

    def test_max_concurrent_ocr_minimum(self) -> None:
        """max_concurrent_ocr must be at least 1."""
        with pytest.raises(ConfigurationError, match="max_concurrent_ocr"):
            ExtractionConfig(max_concurrent_ocr=0)

    def test_endpoint_string_is_split(self) -> None:
        """A comma-separated endpoint string becomes a list."""
        config = ExtractionConfig(translation_endpoints="https://a/translate, https://b/translate")  # type: ignore[arg-type]
        assert config.translation_endpoints == ["https://a/translate", "https://b/translate"]

    def test_output_dir_string_becomes_path(self) -> None:
        """A string output_dir is converted to Path."""
        config = ExtractionConfig(output_dir="recipes")  # type: ignore[arg-type]
        assert config.output_dir == Path("recipes")


class TestExtractionConfigApiKey:
    """Tests for API key handling."""

    def test_require_api_key_returns_key(self) -> None:
        """require_api_key returns the configured key."""
        config = ExtractionConfig(api_key="sk-test")
        assert config.has_api_key
        assert config.require_api_key() == "sk-test"

    def test_require_api_key_raises_without_key(self) -> None:
        """require_api_key raises ConfigurationError when unset."""
        with pytest.raises(ConfigurationError, match="API key"):
            ExtractionConfig().require_api_key()


class TestExtractionConfigUpdate:
    """Tests for ExtractionConfig.update method."""

    def test_update_multiple_values(self) -> None:
        """update() modifies multiple values."""
        config = ExtractionConfig()
        config.update(model="gpt-4o-mini", temperature=0.5, max_instructions=6)

        assert config.model == "gpt-4o-mini"
        assert config.temperature == 0.5
        assert config.max_instructions == 6

    def test_update_validates(self) -> None:
        """update() validates new values."""
        config = ExtractionConfig()

        with pytest.raises(ConfigurationError, match="Invalid model"):
            config.update(model="invalid")

    def test_update_unknown_key_raises(self) -> None:
        """update() raises on unknown configuration key."""
        config = ExtractionConfig()

        with pytest.raises(ConfigurationError, match="Unknown configuration key"):
            config.update(unknown_key="value")


class TestExtractionConfigToDict:
    """Tests for ExtractionConfig.to_dict method."""

    def test_to_dict_converts_path(self) -> None:
        """to_dict converts Path to string."""
        config = ExtractionConfig(output_dir=Path("/some/path"))
        result = config.to_dict()
        assert result["output_dir"] == "/some/path"

    def test_to_dict_copies_lists(self) -> None:
        """to_dict returns a copy of list values."""
        config = ExtractionConfig(translation_endpoints=["https://a/translate"])
        result = config.to_dict()
        result["translation_endpoints"].append("https://b/translate")
        assert config.translation_endpoints == ["https://a/translate"]


class TestExtractionConfigEnvLoading:
    """Tests for ExtractionConfig environment variable loading."""

    def test_load_from_env(self, mock_env: dict[str, str]) -> None:
        """Typed values are read from RECIPE_EXTRACT_* variables."""
        mock_env["MODEL"] = "gpt-4o-mini"
        mock_env["MAX_INSTRUCTIONS"] = "7"
        mock_env["SIMILARITY_THRESHOLD"] = "0.75"
        mock_env["DEBUG_MODE"] = "true"

        config = ExtractionConfig.load(load_user_config=False)

        assert config.model == "gpt-4o-mini"
        assert config.max_instructions == 7
        assert config.similarity_threshold == 0.75
        assert config.debug_mode is True

    def test_endpoints_from_env(self, mock_env: dict[str, str]) -> None:
        """Endpoint lists are comma separated."""
        mock_env["TRANSLATION_ENDPOINTS"] = "https://a/translate,https://b/translate"

        config = ExtractionConfig.load(load_user_config=False)

        assert config.translation_endpoints == ["https://a/translate", "https://b/translate"]

    def test_openai_api_key_fallback(
        self, monkeypatch: pytest.MonkeyPatch, clean_env: None
    ) -> None:
        """OPENAI_API_KEY is used when no prefixed key is set."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")

        config = ExtractionConfig.load(load_user_config=False)

        assert config.api_key == "sk-openai"

    def test_prefixed_api_key_wins(
        self, monkeypatch: pytest.MonkeyPatch, mock_env: dict[str, str]
    ) -> None:
        """RECIPE_EXTRACT_API_KEY overrides OPENAI_API_KEY, even if numeric-looking."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        mock_env["API_KEY"] = "12345"

        config = ExtractionConfig.load(load_user_config=False)

        assert config.api_key == "12345"

    def test_env_can_be_disabled(self, mock_env: dict[str, str]) -> None:
        """load_env=False ignores the environment."""
        mock_env["MODEL"] = "gpt-4o-mini"

        config = ExtractionConfig.load(load_user_config=False, load_env=False)

        assert config.model == "gpt-4o"


class TestExtractionConfigFileLoading:
    """Tests for TOML loading and saving."""

    def test_load_from_toml_section(self, tmp_path: Path, clean_env: None) -> None:
        """A [recipe-extract] section is read from the config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[recipe-extract]\nmodel = "gpt-4o-mini"\nmax_instructions = 5\n')

        config = ExtractionConfig.load(config_file, load_user_config=False)

        assert config.model == "gpt-4o-mini"
        assert config.max_instructions == 5

    def test_env_overrides_file(self, tmp_path: Path, mock_env: dict[str, str]) -> None:
        """Environment variables take priority over the config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('model = "gpt-4o-mini"\n')
        mock_env["MODEL"] = "gpt-5-mini"

        config = ExtractionConfig.load(config_file, load_user_config=False)

        assert config.model == "gpt-5-mini"

    def test_invalid_toml_raises(self, tmp_path: Path, clean_env: None) -> None:
        """A malformed file raises ConfigurationError."""
        config_file = tmp_path / "broken.toml"
        config_file.write_text("model = [unclosed")

        with pytest.raises(ConfigurationError, match="Failed to load"):
            ExtractionConfig.load(config_file, load_user_config=False)

    def test_save_and_reload(self, tmp_path: Path, clean_env: None) -> None:
        """Saved settings load back; the API key is never written."""
        path = tmp_path / "saved.toml"
        ExtractionConfig(model="gpt-4o-mini", api_key="sk-secret", max_instructions=6).save(path)

        assert "sk-secret" not in path.read_text()

        config = ExtractionConfig.load(path, load_user_config=False)
        assert config.model == "gpt-4o-mini"
        assert config.max_instructions == 6
        assert config.api_key is None
