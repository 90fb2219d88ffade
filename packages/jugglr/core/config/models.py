"""Configuration models for jugglr."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jugglr.core.utils.logging import DEFAULT_FORMAT


class MhnConfig(BaseModel):
    """Tempo, dwell and flight parameters for compiling an MHN pattern.

    Leaving ``bps`` unset asks the pipeline to pick a tempo from the throw
    values and, if some throw cannot physically fit, to slow it down.

    Example:
        >>> config = MhnConfig(dwell=1.0, squeezebeats=0.2)
        >>> config.tempo_is_fixed
        False
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    bps: float | None = Field(
        default=None,
        gt=0.0,
        description="Beats per second (None = calculate from the pattern)",
    )
    dwell: float = Field(
        default=1.3,
        gt=0.0,
        lt=2.0,
        description="Beats a hand holds an object before throwing it",
    )
    squeezebeats: float = Field(
        default=0.4,
        ge=0.0,
        description="Beats over which simultaneous catches are spread",
    )
    gravity: float = Field(default=980.0, gt=0.0, description="Gravity in cm/s^2")
    bounce_fraction: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Fraction of energy kept by a bouncing object",
    )
    hand_height: float = Field(
        default=100.0,
        gt=0.0,
        description="Height of the hands above the bounce plane, in cm",
    )
    rescale_margin: float = Field(
        default=1.01,
        ge=1.0,
        description="Extra factor applied when time is rescaled to fit throws",
    )
    max_event_gap_secs: float = Field(
        default=0.5,
        gt=0.0,
        description="Maximum time a hand may go without an event",
    )
    dwell_array: list[float] | None = Field(
        default=None,
        description="Per-beat dwell times from an external hand timing source",
    )

    @field_validator("dwell_array")
    @classmethod
    def _validate_dwell_array(cls, value: list[float] | None) -> list[float] | None:
        if value is None:
            return value
        if not value:
            raise ValueError("dwell_array must not be empty")
        if any(d <= 0.0 or d >= 2.0 for d in value):
            raise ValueError("dwell_array entries must be in (0, 2)")
        return value

    @property
    def tempo_is_fixed(self) -> bool:
        """True when the caller pinned the tempo."""
        return self.bps is not None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = DEFAULT_FORMAT
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (None = stdout)")


class ConfigBase(BaseModel):
    """File-backed configuration with a per-type default location.

    Unknown keys are ignored so older builds can read newer files.
    """

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def default_path(cls) -> Path:
        """Where this config type is read from when no path is given."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Validate the file at ``path``, or at ``default_path()`` when None.

        Unlike ``load_app_config`` this does not fall back to defaults: a
        missing file raises ``FileNotFoundError``.
        """
        from jugglr.core.config.loader import load_config

        return cls.model_validate(load_config(path if path is not None else cls.default_path()))


class AppConfig(ConfigBase):
    """Top-level jugglr settings: compile parameters plus logging."""

    mhn: MhnConfig = MhnConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def default_path(cls) -> Path:
        """``jugglr.yaml`` in the working directory."""
        return Path("jugglr.yaml")
