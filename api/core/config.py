"""
Environment-backed settings helpers.

Every setting is read lazily from the process environment so tests can
override values with `monkeypatch.setenv` without reloading modules.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str]) -> list[str]:
    """
    Comma-separated list, e.g. CORS_ORIGINS=http://a,http://b
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    return env_list("CORS_ORIGINS", ["http://localhost:3000", "http://127.0.0.1:3000"])
