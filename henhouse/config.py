"""Runtime settings sourced from environment variables (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .timewindows import MONDAY

ENV_PREFIX = "CHICKEN_KEEPER_"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_week_start(value: str) -> int:
    """Accept a weekday name (``sunday``, ``Mon``) or its index (0=Monday)."""
    candidate = value.strip().lower()
    if candidate.isdigit() and int(candidate) < 7:
        return int(candidate)
    for index, name in enumerate(WEEKDAYS):
        if len(candidate) >= 3 and name.startswith(candidate):
            return index
    raise ValueError(f"Unknown week start day: {value!r}")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    week_start: int = MONDAY
    env: str = "prod"
    allowed_origins: Tuple[str, ...] = ()

    @property
    def is_dev(self) -> bool:
        return self.env in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ
        origins = environ.get(f"{ENV_PREFIX}ALLOWED_ORIGINS", "")
        return cls(
            data_dir=Path(environ.get(f"{ENV_PREFIX}DATA_DIR", "data")),
            week_start=parse_week_start(environ.get(f"{ENV_PREFIX}WEEK_START", "monday")),
            env=environ.get(f"{ENV_PREFIX}ENV", "prod").lower(),
            allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
