"""Unit tests for engine configuration loading."""

import json

import pytest

from a11y_engine.config import (
    CONFIG_FILENAME,
    AnnotationConfig,
    EngineConfig,
    ReportingConfig,
    load_engine_config,
)
from a11y_engine.errors import ConfigurationError
from a11y_engine.models import Severity


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove engine environment overrides."""
    for suffix in (
        "PAGE_URL",
        "SNIPPET_MAX_LENGTH",
        "FAIL_ON",
        "COLOR_SCHEME",
        "SETTLE_MAX_ROUNDS",
        "RENDER_TIMEOUT_MS",
        "INSERT_BADGES",
        "BADGE_CLASS",
    ):
        monkeypatch.delenv(f"A11Y_ENGINE_{suffix}", raising=False)


class TestEngineConfigDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        """Test default settings."""
        config = EngineConfig()

        assert config.color_scheme == "light"
        assert config.settle_max_rounds == 10
        assert config.annotation.outline_width == "2px"
        assert config.annotation.insert_badges is True
        assert config.reporting.fail_on_severity is Severity.HIGH
        assert config.reporting.snippet_max_length == 200

    def test_colors_for_scheme(self):
        """Test each scheme has its own colors."""
        annotation = AnnotationConfig()

        assert annotation.colors_for("light") is annotation.light
        assert annotation.colors_for("dark") is annotation.dark
        assert annotation.light.invalid != annotation.dark.invalid

    def test_invalid_color_scheme(self):
        """Test unknown color schemes are rejected."""
        with pytest.raises(ValueError):
            EngineConfig(color_scheme="sepia")

    def test_invalid_badge_class(self):
        """Test badge classes must be valid CSS class names."""
        with pytest.raises(ValueError):
            AnnotationConfig(badge_class="1 bad class")

    def test_fail_on_normalized(self):
        """Test fail_on accepts any case and stores the canonical value."""
        assert ReportingConfig(fail_on="medium").fail_on == "Medium"

    def test_fail_on_unknown(self):
        """Test unknown fail_on severities are rejected."""
        with pytest.raises(ValueError):
            ReportingConfig(fail_on="Blocker")

    def test_from_dict_camel_case(self):
        """Test camelCase keys map onto fields."""
        config = EngineConfig.from_dict(
            {
                "colorScheme": "dark",
                "reporting": {"pageUrl": "https://example.com", "snippetMaxLength": 80},
                "annotation": {"insertBadges": False},
            }
        )

        assert config.color_scheme == "dark"
        assert config.reporting.page_url == "https://example.com"
        assert config.reporting.snippet_max_length == 80
        assert config.annotation.insert_badges is False


class TestLoadEngineConfig:
    """Tests for load_engine_config."""

    def test_defaults_without_file(self, tmp_path):
        """Test defaults when no config file exists."""
        config = load_engine_config(project_path=tmp_path)
        assert config == EngineConfig()

    def test_project_file_discovered(self, tmp_path):
        """Test the project config file is picked up."""
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"reporting": {"failOn": "Low"}})
        )

        config = load_engine_config(project_path=tmp_path)

        assert config.reporting.fail_on_severity is Severity.LOW

    def test_explicit_path(self, tmp_path):
        """Test an explicit config file path."""
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"settleMaxRounds": 3}))

        assert load_engine_config(path).settle_max_rounds == 3

    def test_missing_explicit_path(self, tmp_path):
        """Test a missing explicit file is an error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_engine_config(tmp_path / "missing.json")
        assert exc_info.value.config_file.endswith("missing.json")

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON is an error."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_engine_config(path)

    def test_non_object(self, tmp_path):
        """Test a JSON array is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_engine_config(path)

    def test_invalid_values(self, tmp_path):
        """Test validation failures surface as ConfigurationError."""
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"colorScheme": "sepia"}))

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_engine_config(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test environment variables win over the file."""
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"reporting": {"pageUrl": "https://file.example"}})
        )
        monkeypatch.setenv("A11Y_ENGINE_PAGE_URL", "https://env.example")
        monkeypatch.setenv("A11Y_ENGINE_INSERT_BADGES", "false")
        monkeypatch.setenv("A11Y_ENGINE_SETTLE_MAX_ROUNDS", "4")

        config = load_engine_config(project_path=tmp_path)

        assert config.reporting.page_url == "https://env.example"
        assert config.annotation.insert_badges is False
        assert config.settle_max_rounds == 4

    def test_keyword_overrides_env(self, tmp_path, monkeypatch):
        """Test explicit overrides win over the environment."""
        monkeypatch.setenv("A11Y_ENGINE_COLOR_SCHEME", "dark")

        config = load_engine_config(project_path=tmp_path, color_scheme="light")

        assert config.color_scheme == "light"

    def test_none_override_ignored(self, tmp_path, monkeypatch):
        """Test None overrides leave lower layers untouched."""
        monkeypatch.setenv("A11Y_ENGINE_COLOR_SCHEME", "dark")

        config = load_engine_config(project_path=tmp_path, color_scheme=None)

        assert config.color_scheme == "dark"
