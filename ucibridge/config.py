# === ucibridge/config.py ===

import logging
import os
import shlex
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Tuple

from dotenv import load_dotenv

# Load environment variables from .env (local dev) or system (container)
load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",  # Local dev
    "http://localhost:3000",
]


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"⚠️ Ignoring non-integer {name}={value!r}, using {default}"
        )
        return default


def _list_env(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    engine_path: str = "stockfish"
    engine_args: Tuple[str, ...] = ()
    syzygy_path: str = "/syzygy"
    timeout_ms: int = 20000
    analyze_movetime_ms: int = 800
    probe_depth: int = 1
    kill_grace_ms: int = 1000
    max_sessions: int = 0  # 0 = unlimited
    static_dir: str = "public"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    log_level: str = "INFO"

    @property
    def engine_command(self) -> Tuple[str, ...]:
        return (self.engine_path, *self.engine_args)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            engine_path=os.getenv("STOCKFISH_PATH", "stockfish"),
            engine_args=tuple(shlex.split(os.getenv("ENGINE_ARGS", ""))),
            syzygy_path=os.getenv("SYZYGY_PATH", "/syzygy"),
            timeout_ms=_int_env("ENGINE_TIMEOUT_MS", 20000),
            analyze_movetime_ms=_int_env("ANALYZE_MOVETIME_MS", 800),
            probe_depth=_int_env("PROBE_DEPTH", 1),
            kill_grace_ms=_int_env("ENGINE_KILL_GRACE_MS", 1000),
            max_sessions=_int_env("MAX_ENGINE_SESSIONS", 0),
            static_dir=os.getenv("STATIC_DIR", "public"),
            cors_origins=_list_env("CORS_ORIGINS", DEFAULT_ORIGINS),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, read once. Used as a FastAPI dependency."""
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
