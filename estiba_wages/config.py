"""Settings via pydantic-settings (ESTIBA_ env prefix) and log sink setup."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal, Optional

from loguru import logger
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Defaults applied when the caller does not pass a value."""

    model_config = {"env_prefix": "ESTIBA_"}

    default_group: Literal["I", "II", "III", "IV"] = "II"
    irpf_percent: float = 15.0
    salary_table_path: Optional[Path] = None
    festive_rates_path: Optional[Path] = None
    log_level: str = "INFO"


def configure_logging(level: str = "INFO") -> None:
    """Single stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
