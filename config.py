from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

DEFAULT_CATALOG_PATH = str(Path(__file__).resolve().parent / "options_content" / "scenarios.json")
SELECTION_MODES = ("random", "sequential")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class GameConfig:
    catalog_path: str = DEFAULT_CATALOG_PATH
    total_days: int = 5
    clients_per_day: int = 3
    starting_reputation: int = 50
    time_bonus_seconds: float = 120.0
    selection_mode: str = "random"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.total_days < 1:
            raise ValueError("total_days must be >= 1")
        if self.clients_per_day < 1:
            raise ValueError("clients_per_day must be >= 1")
        if self.selection_mode not in SELECTION_MODES:
            raise ValueError(f"selection_mode must be one of {SELECTION_MODES}")

    @classmethod
    def from_env(cls) -> "GameConfig":
        return cls(
            catalog_path=os.getenv("OPTIONS_CATALOG_PATH", DEFAULT_CATALOG_PATH),
            total_days=_int_env("OPTIONS_TOTAL_DAYS", 5),
            clients_per_day=_int_env("OPTIONS_CLIENTS_PER_DAY", 3),
            starting_reputation=_int_env("OPTIONS_STARTING_REPUTATION", 50),
            time_bonus_seconds=_float_env("OPTIONS_TIME_BONUS_SECONDS", 120.0),
            selection_mode=os.getenv("OPTIONS_SELECTION_MODE", "random"),
            log_level=os.getenv("OPTIONS_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
