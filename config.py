"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_INTERVAL_SECONDS = 3600


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: str = "data"
    refresh_interval_seconds: int = _DEFAULT_INTERVAL_SECONDS
    seed: int | None = None
    host: str = "0.0.0.0"
    port: int = 3001

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the process environment (call after load_dotenv)."""
        seed_raw = os.getenv("DISCOVERY_SEED")
        return cls(
            data_dir=os.getenv("DATA_DIR", "data"),
            refresh_interval_seconds=int(
                os.getenv("REFRESH_INTERVAL_SECONDS", str(_DEFAULT_INTERVAL_SECONDS))
            ),
            seed=int(seed_raw) if seed_raw else None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
        )
