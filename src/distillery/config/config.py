"""
Configuration management for distillery using Pydantic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models import CHUNK_KINDS
from ..render.rules import FilterRuleSet
from ..scoring.noise import NoisePolicy

# --- Setup Logging ---
log = logging.getLogger(__name__)


class ExtractionMode(str, Enum):
    """Named threshold presets."""

    STRICT = "strict"
    BALANCED = "balanced"
    COMPREHENSIVE = "comprehensive"


@dataclass(frozen=True)
class ModePreset:
    min_content_score: float
    noise_threshold: float


MODE_PRESETS: Dict[ExtractionMode, ModePreset] = {
    ExtractionMode.STRICT: ModePreset(min_content_score=0.8, noise_threshold=0.3),
    ExtractionMode.BALANCED: ModePreset(min_content_score=0.6, noise_threshold=0.5),
    ExtractionMode.COMPREHENSIVE: ModePreset(min_content_score=0.4, noise_threshold=0.7),
}


# --- Extraction Configuration ---


class ExtractionConfig(BaseModel):
    """
    Options for one ``extract()`` call.

    Accepts snake_case names or their camelCase aliases
    (``enableNoiseFiltering``, ``minContentScore``, ``filterKeywords`` ...).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    mode: ExtractionMode = Field(default=ExtractionMode.BALANCED, description="Threshold preset.")
    enable_semantic_analysis: bool = Field(
        default=True, description="Score every competing candidate instead of trusting the first."
    )
    enable_noise_filtering: bool = Field(
        default=True, description="Drop candidates whose noise score exceeds the threshold."
    )
    enable_boundary_detection: bool = Field(
        default=True, description="Trim related/comments/footer sections from the chunk list."
    )
    min_content_score: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Override of the mode's minimum winning score."
    )
    noise_threshold: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Override of the mode's noise threshold."
    )
    filter_keywords: Optional[str] = Field(
        default=None,
        description="Newline-delimited boilerplate keywords; '#' lines ignored; empty means defaults.",
    )
    noise_policy: NoisePolicy = Field(
        default=NoisePolicy.ACCUMULATE, description="How noise category matches add up."
    )
    prefer_selection: bool = Field(
        default=True, description="Chunk the user's selection container when one is provided."
    )
    fallback_char_limit: int = Field(default=5000, gt=0, description="Length cap of the emergency fallback.")
    simplified_min_length: int = Field(
        default=200, ge=0, description="Text length the simplified tier needs to accept a candidate."
    )
    include: Dict[str, bool] = Field(
        default_factory=dict, description="Per chunk kind render toggles; unnamed kinds are included."
    )

    @field_validator("mode", "noise_policy", mode="before")
    @classmethod
    def normalize_enum(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("include")
    @classmethod
    def validate_include(cls, v: Dict[str, bool]) -> Dict[str, bool]:
        unknown = set(v) - set(CHUNK_KINDS)
        if unknown:
            raise ValueError(f"unknown chunk kinds: {sorted(unknown)}")
        return v

    @property
    def preset(self) -> ModePreset:
        return MODE_PRESETS[self.mode]

    @property
    def effective_min_content_score(self) -> float:
        if self.min_content_score is not None:
            return self.min_content_score
        return self.preset.min_content_score

    @property
    def effective_noise_threshold(self) -> float:
        if self.noise_threshold is not None:
            return self.noise_threshold
        return self.preset.noise_threshold

    def filter_rules(self) -> FilterRuleSet:
        return FilterRuleSet.parse(self.filter_keywords)

    @classmethod
    def coerce(cls, value: Union[ExtractionConfig, Mapping[str, Any], None]) -> ExtractionConfig:
        """Accept a config, a plain mapping (either key style) or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console only.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Settings(BaseSettings):
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="DISTILL_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Settings:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for name in ("distill.yaml", "distill.yml"):
        path = current_dir / name
        if path.exists():
            return path
    return None


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from ``path`` (or a ``distill.yaml`` in the working
    directory), falling back to defaults when the file is missing or invalid.
    """
    config_path = path or find_config_file()
    if config_path:
        try:
            log.info("Loading configuration from: %s", config_path)
            return Settings.from_yaml(Path(config_path))
        except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
            log.error(
                "Failed to load or validate configuration from '%s': %s. "
                "Falling back to default settings. Please check your config file.",
                config_path,
                e,
                exc_info=log.getEffectiveLevel() <= logging.DEBUG,
            )
    else:
        log.debug("No config file found. Using default settings.")
    return Settings()
