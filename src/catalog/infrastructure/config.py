"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_FILE = Path(__file__).resolve().parents[3] / "data" / "products.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    data_file: Path = DEFAULT_DATA_FILE
    # Catalog-reading routes refuse to serve until this many products exist.
    min_products: int = 10
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def from_env(cls) -> Settings:
        log_file = os.getenv("CATALOG_LOG_FILE")
        return cls(
            data_file=Path(os.getenv("CATALOG_DATA_FILE", str(DEFAULT_DATA_FILE))),
            min_products=_env_int("CATALOG_MIN_PRODUCTS", 10),
            host=os.getenv("CATALOG_HOST", "0.0.0.0"),
            port=_env_int("CATALOG_PORT", 8080),
            log_level=os.getenv("CATALOG_LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file) if log_file else None,
        )
