"""Runtime settings, read from ``POS_*`` environment variables.

Every setting has a default so the CLI works out of the box; the data
directory defaults to ``data/`` at the project root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    max_transaction_attempts: int = 5
    low_stock_threshold: int = 5
    medium_stock_threshold: int = 20
    log_level: str = "WARNING"
    currency: str = "THB"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        settings = Settings(
            data_dir=Path(env.get("POS_DATA_DIR", DEFAULT_DATA_DIR)),
            max_transaction_attempts=_int(env, "POS_MAX_TRANSACTION_ATTEMPTS", 5),
            low_stock_threshold=_int(env, "POS_LOW_STOCK_THRESHOLD", 5),
            medium_stock_threshold=_int(env, "POS_MEDIUM_STOCK_THRESHOLD", 20),
            log_level=env.get("POS_LOG_LEVEL", "WARNING").upper(),
            currency=env.get("POS_CURRENCY", "THB").upper(),
        )
        if settings.max_transaction_attempts < 1:
            raise ValueError("POS_MAX_TRANSACTION_ATTEMPTS must be at least 1")
        if settings.low_stock_threshold > settings.medium_stock_threshold:
            raise ValueError(
                "POS_LOW_STOCK_THRESHOLD cannot exceed POS_MEDIUM_STOCK_THRESHOLD"
            )
        return settings


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
