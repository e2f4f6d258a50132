# Settings: load from .env at project root when the backend or CLI starts.

from __future__ import annotations

import logging
import os
from pathlib import Path

_project_root = Path(__file__).resolve().parents[2]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _load_dotenv() -> None:
    """Load .env from project root or cwd. Existing environment wins."""
    for path in (_project_root / ".env", Path.cwd() / ".env"):
        if path.is_file():
            with open(path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        k, _, v = line.partition("=")
                        v = v.strip().strip('"').strip("'")
                        os.environ.setdefault(k.strip(), v)
            break


_load_dotenv()


def cors_origins() -> list[str]:
    raw_origins = os.getenv("CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    return origins or ["*"]


def log_level() -> int:
    name = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    resolved = log_level() if level is None else level
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)
