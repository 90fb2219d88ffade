"""Loading jugglr configuration from JSON or YAML files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from jugglr.core.config.models import AppConfig, MhnConfig
from jugglr.core.utils.logging import configure_logging as _configure_root_logging

logger = logging.getLogger(__name__)

_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def detect_format(file_path: Path | str) -> str:
    """Config format from the file extension.

    Example:
        >>> detect_format("jugglr.yml")
        'yaml'

    Raises:
        ValueError: If the extension is not .json, .yaml or .yml
    """
    suffix = Path(file_path).suffix.lower()
    fmt = _FORMATS.get(suffix)
    if fmt is None:
        raise ValueError(f"Unsupported config format: {suffix}")
    return fmt


def _parse(text: str, fmt: str, path: Path) -> Any:
    if fmt == "json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_config(path: str | Path) -> dict[str, Any]:
    """Read a config file into a plain dictionary.

    An empty file yields ``{}``.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported, the content does not parse,
            or the top level is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    content = _parse(path.read_text(encoding="utf-8"), detect_format(path), path)
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate the application config, or defaults if the file is absent.

    Args:
        path: Config file; ``AppConfig.default_path()`` when None

    Raises:
        ValidationError: If a value is out of range or an MHN option is unknown
    """
    path = Path(path) if path is not None else AppConfig.default_path()
    if not path.exists():
        logger.debug(f"No config at {path}; using defaults")
        return AppConfig()

    config = AppConfig.model_validate(load_config(path))
    tempo = "calculated" if config.mhn.bps is None else f"{config.mhn.bps} beats/sec"
    logger.debug(f"Loaded config from {path} (tempo {tempo}, dwell {config.mhn.dwell})")
    return config


def load_mhn_config(path: str | Path | None = None) -> MhnConfig:
    """Compile parameters from the ``mhn`` section of the app config."""
    return load_app_config(path).mhn


def configure_logging(config: AppConfig | None = None) -> None:
    """Apply the ``logging`` section of the app config (loaded if None)."""
    if config is None:
        config = load_app_config()

    _configure_root_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


__all__ = [
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_mhn_config",
]
