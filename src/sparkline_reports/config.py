"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the MongoDB connection and logging options from the environment
(optionally populated from a project-root `.env`).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

@dataclass(frozen=True)
class Settings:
    """Container for runtime configuration read from the environment.

    Attributes:
        mongo_uri: MongoDB connection URI.
        mongo_db: MongoDB database holding the reported collections.
        log_path: Optional file that receives log output.
        mongo_tls: Connect to MongoDB over TLS.
    """
    mongo_uri: str
    mongo_db: str
    log_path: Path | None
    mongo_tls: bool = True



def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `MONGO_DB` is set to an empty value.
    """
    mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db = os.getenv("MONGO_DB", "sparkline").strip()
    log_path = os.getenv("SPARKLINE_LOG_PATH", "").strip()
    mongo_tls = os.getenv("MONGO_TLS", "true").strip().lower() not in ("0", "false", "no")

    if not mongo_db:
        raise RuntimeError(
            "MONGO_DB must not be empty. Set it in .env "
            "(example: 'MONGO_DB=analytics')."
        )

    return Settings(
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        log_path=Path(log_path) if log_path else None,
        mongo_tls=mongo_tls,
    )
