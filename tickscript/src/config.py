"""
Engine configuration and logging setup.

Settings are read from the ``engine:`` section of a YAML file, e.g.

    engine:
      log_level: DEBUG
      log_file: logs/tickscript_{time}.log
      max_statements: 500
      max_bars: 50000
      max_nesting_depth: 40

Missing keys fall back to the defaults below.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml
from loguru import logger


@dataclass(frozen=True)
class EngineSettings:
    log_level: str = "INFO"
    log_file: Optional[str] = None
    max_statements: int = 1000
    max_bars: int = 100_000
    max_nesting_depth: int = 50


def load_settings(path: Union[str, Path, None] = None) -> EngineSettings:
    """Load settings from a YAML file; return the defaults when ``path`` is None."""
    settings = EngineSettings()
    if path is None:
        return settings

    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get("engine", {}) if isinstance(raw, dict) else {}
    if not isinstance(section, dict):
        raise ValueError(f"'engine' section in {path} must be a mapping")

    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(section) - known)
    if unknown:
        logger.warning("Ignoring unknown engine settings in {}: {}", path, unknown)

    return replace(settings, **{k: v for k, v in section.items() if k in known})


def configure_logging(settings: EngineSettings) -> None:
    """Replace loguru's default sink with one at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="10 MB",
            retention="7 days",
            level=settings.log_level,
        )
