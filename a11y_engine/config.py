"""Engine configuration models and loader."""

import json
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, validator

from .engine_logging import get_logger
from .errors import ConfigurationError
from .models import Severity

logger = get_logger()

CONFIG_FILENAME = "a11y-engine.config.json"
ENV_PREFIX = "A11Y_ENGINE_"

_COLOR_SCHEMES = ("light", "dark")


class SchemeColors(BaseModel):
    """Annotation colours for one color scheme."""

    valid: str = Field(default="#0a7d27")
    invalid: str = Field(default="#c4001a")
    valid_background: str = Field(default="rgba(10, 125, 39, 0.08)")
    invalid_background: str = Field(default="rgba(196, 0, 26, 0.08)")
    badge_text: str = Field(default="#ffffff")


class AnnotationConfig(BaseModel):
    """How checkers mark elements in the live document."""

    light: SchemeColors = Field(default_factory=SchemeColors)
    dark: SchemeColors = Field(
        default_factory=lambda: SchemeColors(
            valid="#5fd97a",
            invalid="#ff6b81",
            valid_background="rgba(95, 217, 122, 0.15)",
            invalid_background="rgba(255, 107, 129, 0.15)",
            badge_text="#111111",
        )
    )
    outline_width: str = Field(default="2px")
    badge_class: str = Field(default="a11y-engine-badge")
    insert_badges: bool = Field(default=True)

    @validator("badge_class")
    def validate_badge_class(cls, v: Any) -> str:
        if not v or not re.fullmatch(r"[A-Za-z_][\w-]*", str(v)):
            raise ValueError("badge_class must be a valid CSS class name")
        return str(v)

    def colors_for(self, scheme: str) -> SchemeColors:
        """Return the colour set for a color scheme."""
        return self.dark if scheme == "dark" else self.light


class ReportingConfig(BaseModel):
    """Diagnostic record and report output settings."""

    page_url: str = Field(default="")
    snippet_max_length: int = Field(default=200, ge=20, le=10000)
    fail_on: str = Field(default=Severity.HIGH.value)

    @validator("fail_on")
    def validate_fail_on(cls, v: Any) -> str:
        parsed = Severity.parse(v)
        if not isinstance(parsed, Severity):
            raise ValueError(
                f"fail_on must be one of {', '.join(s.value for s in Severity)}"
            )
        return parsed.value

    @property
    def fail_on_severity(self) -> Severity:
        return Severity(self.fail_on)


class EngineConfig(BaseModel):
    """Top-level engine configuration."""

    annotation: AnnotationConfig = Field(default_factory=AnnotationConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    color_scheme: str = Field(default="light")
    settle_max_rounds: int = Field(default=10, ge=1, le=1000)
    render_timeout_ms: int = Field(default=30000, ge=1000)

    @validator("color_scheme")
    def validate_color_scheme(cls, v: Any) -> str:
        if v not in _COLOR_SCHEMES:
            raise ValueError(f"color_scheme must be one of {_COLOR_SCHEMES}")
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Create from a dictionary with camelCase or snake_case keys."""
        return cls(**_snake_keys(data))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return self.dict()


def _to_snake(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def _snake_keys(data: Any) -> Any:
    if isinstance(data, dict):
        return {_to_snake(str(k)): _snake_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_snake_keys(v) for v in data]
    return data


# Environment variable -> (section, field); section None means top level
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "PAGE_URL": ("reporting", "page_url"),
    "SNIPPET_MAX_LENGTH": ("reporting", "snippet_max_length"),
    "FAIL_ON": ("reporting", "fail_on"),
    "COLOR_SCHEME": (None, "color_scheme"),
    "SETTLE_MAX_ROUNDS": (None, "settle_max_rounds"),
    "RENDER_TIMEOUT_MS": (None, "render_timeout_ms"),
    "INSERT_BADGES": ("annotation", "insert_badges"),
    "BADGE_CLASS": ("annotation", "badge_class"),
}


def _apply_env_overrides(data: dict[str, Any]) -> int:
    applied = 0
    for suffix, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(f"{ENV_PREFIX}{suffix}")
        if value is None:
            continue
        target = data if section is None else data.setdefault(section, {})
        target[key] = value
        applied += 1
    return applied


def load_engine_config(
    path: Path | None = None,
    project_path: Path | None = None,
    **overrides: Any,
) -> EngineConfig:
    """Load engine configuration.

    Precedence (highest to lowest):
    1. Explicit keyword overrides (top-level fields)
    2. Environment variables (A11Y_ENGINE_*)
    3. Explicit config file, else a11y-engine.config.json in project_path
    4. Defaults

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or invalid.
    """
    data: dict[str, Any] = {}

    config_path = path
    if config_path is None:
        candidate = (Path(project_path) if project_path else Path.cwd()) / CONFIG_FILENAME
        if candidate.exists():
            config_path = candidate

    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(
                f"Config file not found: {config_path}", config_file=str(config_path)
            )
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read config file: {e}", config_file=str(config_path)
            ) from e
        if not isinstance(raw, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object", config_file=str(config_path)
            )
        data = _snake_keys(raw)
        logger.debug(f"Loaded engine config from {config_path}")

    env_count = _apply_env_overrides(data)
    if env_count > 0:
        logger.debug(f"Applied {env_count} environment variables")

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return EngineConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_file=str(config_path) if config_path else None,
        ) from e
