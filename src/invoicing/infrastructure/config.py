"""Runtime settings read from the environment.

INVOICING_DATA_DIR             directory holding invoicing.json
INVOICING_LOG_LEVEL            logging level name (default WARNING)
INVOICING_LOW_STOCK_THRESHOLD  default threshold of the low-stock report
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from invoicing.domain.model.product import LOW_STOCK_THRESHOLD

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DATA_FILE_NAME = "invoicing.json"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    low_stock_threshold: int = LOW_STOCK_THRESHOLD

    @property
    def data_file(self) -> Path:
        return self.data_dir / DATA_FILE_NAME

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        threshold = env.get("INVOICING_LOW_STOCK_THRESHOLD", str(LOW_STOCK_THRESHOLD))
        try:
            low_stock_threshold = int(threshold)
        except ValueError:
            raise ValueError(
                f"INVOICING_LOW_STOCK_THRESHOLD must be an integer, got {threshold!r}"
            )
        log_level = env.get("INVOICING_LOG_LEVEL", "WARNING").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"INVOICING_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )
        return Settings(
            data_dir=Path(env.get("INVOICING_DATA_DIR", DEFAULT_DATA_DIR)),
            log_level=log_level,
            low_stock_threshold=low_stock_threshold,
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
