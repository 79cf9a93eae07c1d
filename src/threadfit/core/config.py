from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    # Unit length bounds (defaults match a 280-char platform cap)
    THREADFIT_MIN_UNIT_LENGTH: int = 100
    THREADFIT_MAX_UNIT_LENGTH: int = 280
    THREADFIT_AUTO_COLLAPSE: bool = True

    # Collapse policy
    THREADFIT_COLLAPSE_THRESHOLD: int = 240  # Any sequence at or under this collapses
    THREADFIT_PAIR_COLLAPSE_THRESHOLD: int = 260  # Two-unit sequences only
    THREADFIT_BOUNDARY_FLOOR_RATIO: float = 0.6  # Earliest split point, fraction of cap

    # Observability
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path: Optional[Path] = Path(config_file)
        else:
            # Auto-discover .threadfit.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".threadfit.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)
        elif config_file:
            raise ConfigurationError(f"Config file not found: {config_file}")

        # Keys are case-insensitive and the THREADFIT_ prefix is optional;
        # unset keys fall back to env
        return cls(**cls._normalize_keys(config_data, config_path))

    @classmethod
    def _normalize_keys(cls, config_data: Dict[str, Any], source: Optional[Path]) -> Dict[str, Any]:
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {source} must hold a mapping")
        normalized: Dict[str, Any] = {}
        for key, value in config_data.items():
            name = str(key).upper()
            if name not in cls.model_fields and f"THREADFIT_{name}" in cls.model_fields:
                name = f"THREADFIT_{name}"
            if name not in cls.model_fields:
                raise ConfigurationError(f"Unknown setting {key!r} in {source}")
            normalized[name] = value
        return normalized


class SegmenterConfig(BaseModel):
    """Length policy for one segmentation call.

    ``min_unit_length`` must be strictly below ``max_unit_length``; anything
    else is rejected with :class:`ConfigurationError` before input is touched.
    """

    model_config = ConfigDict(frozen=True)

    min_unit_length: StrictInt = Field(100, description="Units shorter than this are merge candidates")
    max_unit_length: StrictInt = Field(280, description="Hard per-unit cap")
    auto_collapse: StrictBool = Field(True, description="Join thin sequences into one unit")
    collapse_threshold: StrictInt = Field(240, description="Collapse any sequence up to this length")
    pair_collapse_threshold: StrictInt = Field(260, description="Collapse two-unit sequences up to this length")
    boundary_floor_ratio: StrictFloat = Field(0.6, description="Earliest accepted split point as a fraction of the cap")

    @model_validator(mode="after")
    def _check_bounds(self) -> "SegmenterConfig":
        self.ensure_valid()
        return self

    def ensure_valid(self) -> None:
        """Raise ConfigurationError if the bounds are inconsistent."""
        if self.max_unit_length < 1:
            raise ConfigurationError(
                f"max_unit_length must be positive, got {self.max_unit_length}"
            )
        if self.min_unit_length < 0:
            raise ConfigurationError(
                f"min_unit_length must not be negative, got {self.min_unit_length}"
            )
        if self.min_unit_length >= self.max_unit_length:
            raise ConfigurationError(
                f"min_unit_length ({self.min_unit_length}) must be less than "
                f"max_unit_length ({self.max_unit_length})"
            )
        if self.collapse_threshold < 1 or self.pair_collapse_threshold < 1:
            raise ConfigurationError("collapse thresholds must be positive")
        if not 0 < self.boundary_floor_ratio <= 1:
            raise ConfigurationError(
                f"boundary_floor_ratio must be in (0, 1], got {self.boundary_floor_ratio}"
            )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SegmenterConfig":
        settings = settings or SETTINGS
        return cls(
            min_unit_length=settings.THREADFIT_MIN_UNIT_LENGTH,
            max_unit_length=settings.THREADFIT_MAX_UNIT_LENGTH,
            auto_collapse=settings.THREADFIT_AUTO_COLLAPSE,
            collapse_threshold=settings.THREADFIT_COLLAPSE_THRESHOLD,
            pair_collapse_threshold=settings.THREADFIT_PAIR_COLLAPSE_THRESHOLD,
            boundary_floor_ratio=settings.THREADFIT_BOUNDARY_FLOOR_RATIO,
        )


# Environment-only settings; the CLI layers config files on top via load_config()
SETTINGS = Settings()
