"""Configuration management."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_COLOR = "rgba(169,169,169, .6)"
DEFAULT_FONT_FAMILY = "'Helvetica Neue', 'Helvetica', 'Arial', sans-serif"
CONFIG_ENV_VAR = "TREND_OVERLAY_CONFIG"


class ParsingConfig(BaseModel):
    """Which record keys hold the x and y values of structured data points."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    x_axis_key: str = Field(default="x", description="Key of the x value in structured records")
    y_axis_key: str = Field(default="y", description="Key of the y value in structured records")


class StyleConfig(BaseModel):
    """Built-in style defaults, used when neither the dataset nor its trendline set one."""

    default_color: str = Field(default=DEFAULT_COLOR)
    default_width: float = Field(default=3, gt=0, description="Stroke width in pixels")
    font_family: str = Field(default=DEFAULT_FONT_FAMILY)
    font_size: int = Field(default=12, gt=0)
    label_offset: float = Field(default=10, description="Label distance from the line in pixels")
    min_segment_px: float = Field(default=0.5, ge=0, description="Shorter clipped segments are not drawn")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False, description="Render log lines as JSON")


class Settings(BaseModel):
    """Main settings container."""

    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """
    Load settings from YAML file.

    Args:
        config_path: Path to config file. If None, uses $TREND_OVERLAY_CONFIG
            or config/settings.yaml at the project root

    Returns:
        Settings object with validated configuration
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or (
            Path(__file__).parent.parent.parent / "config" / "settings.yaml"
        )

    config_path = Path(config_path)

    if not config_path.exists():
        return Settings()

    with open(config_path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return Settings(**data)


# Global settings instance (lazy loaded)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached global settings so the next call reloads them."""
    global _settings
    _settings = None
