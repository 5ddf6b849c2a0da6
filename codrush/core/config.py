from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {raw}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {raw}")


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Judge0 via RapidAPI: submissions endpoint, e.g. https://judge0-ce.p.rapidapi.com/submissions
        self.rapid_api_url: str = os.getenv("RAPID_API_URL", "").strip().rstrip("/")
        self.rapid_api_host: str = os.getenv("RAPID_API_HOST", "")
        self.rapid_api_key: str = os.getenv("RAPID_API_KEY", "")
        # HTTP read timeout per Judge0 call
        self.judge0_timeout_s: float = _float_env("JUDGE0_TIMEOUT_S", 10.0)
        # Polling; 0 disables the corresponding bound
        self.poll_interval_ms: int = _int_env("POLL_INTERVAL_MS", 2000)
        self.poll_max_attempts: int = _int_env("POLL_MAX_ATTEMPTS", 150)
        self.poll_timeout_s: float = _float_env("POLL_TIMEOUT_S", 300.0)
        # Static metadata cache (languages / statuses)
        self.metadata_cache_ttl_s: int = _int_env("METADATA_CACHE_TTL_S", 3600)
        # App meta
        self.app_name: str = "CodRush"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()

    @property
    def judge0_configured(self) -> bool:
        return bool(self.rapid_api_url)

    @property
    def poll_interval_s(self) -> float:
        return max(0, self.poll_interval_ms) / 1000.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
