"""Configuration management for fretwise."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fretwise.models.tab import PRESETS, MappingConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRETWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Output
    output_dir: Path = Field(
        default=Path("./output"),
        description="Default output directory for generated tablature",
    )
    write_text_tab: bool = Field(
        default=True,
        description="Write a plain-text ASCII tab next to tab.json",
    )
    tab_line_width: int = Field(
        default=80,
        ge=20,
        description="Maximum characters per line of the ASCII tab",
    )

    # Mapping
    mapping_preset: Literal["default", "melody", "combined"] = Field(
        default="melody",
        description="Base weights for the mapping engine. Options: default, "
        "melody (single picked track), combined (all tracks merged)",
    )
    max_fret: int | None = Field(default=None, ge=0, description="Override the fret ceiling")
    continuity_weight: float | None = Field(default=None, description="Override continuity weight")
    prefer_melody_high_strings: bool | None = Field(default=None)
    open_string_bonus: float | None = Field(default=None)
    fret_cost_weight: float | None = Field(default=None)
    continuity_fret_weight: float | None = Field(default=None)
    continuity_string_weight: float | None = Field(default=None)
    tie_break_prefer_lower_string: bool | None = Field(default=None)
    evaluate_octave_shifts: bool | None = Field(default=None)

    def mapping_config(self, preset: str | None = None) -> MappingConfig:
        """Mapping weights: the preset merged with any explicit overrides."""
        base = PRESETS[preset or self.mapping_preset]
        overrides = {name: getattr(self, name) for name in MappingConfig().as_dict()}
        return base.with_overrides(overrides)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**overrides: object) -> Settings:
    """Configure settings with overrides. Useful for testing."""
    global _settings
    _settings = Settings(**overrides)  # type: ignore[arg-type]
    return _settings
