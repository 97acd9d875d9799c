from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str = "redis://localhost:6379/0"
    # Approximate per-stream cap applied on XADD.
    event_stream_maxlen: int = 1000
    debug_reveal_secret: bool = False
    log_level: str = "INFO"


_SETTINGS: Settings | None = None


def project_root() -> Path:
    # duels/config.py -> duels/ -> project root
    return Path(__file__).resolve().parents[1]


def _load_dotenv() -> None:
    if os.environ.get("DUELS_SKIP_DOTENV") == "1":
        return

    env_path = project_root() / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


def load_settings() -> Settings:
    """Build settings from the environment (and the repo `.env`, if present)."""

    _load_dotenv()
    defaults = Settings()

    raw_maxlen = os.environ.get("DUELS_EVENT_STREAM_MAXLEN")
    try:
        maxlen = int(raw_maxlen) if raw_maxlen else defaults.event_stream_maxlen
    except ValueError as e:
        raise ValueError(f"DUELS_EVENT_STREAM_MAXLEN must be an integer, got {raw_maxlen!r}") from e
    if maxlen < 1:
        raise ValueError("DUELS_EVENT_STREAM_MAXLEN must be positive")

    return Settings(
        redis_url=os.environ.get("REDIS_URL", defaults.redis_url),
        event_stream_maxlen=maxlen,
        debug_reveal_secret=os.environ.get("DUELS_DEBUG_REVEAL_SECRET", "").strip().lower() in _TRUTHY,
        log_level=os.environ.get("DUELS_LOG_LEVEL", defaults.log_level).upper(),
    )


def get_settings() -> Settings:
    """Load settings once and cache them."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings_for_tests() -> None:
    """Drop the cached settings so tests can re-read a patched environment."""

    global _SETTINGS
    _SETTINGS = None


def configure_logging(level: str | None = None) -> None:
    """Entry-point helper; library modules only ever call `getLogger`."""

    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
