"""
Embeds configuration — all environment variables in one place.

Read from environment at import time. The kernel has no required settings,
so malformed values fall back to their defaults instead of failing startup.
"""

from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Settings:
    """Kernel settings from environment variables."""

    # Theme used when a caller does not say which one is active
    DEFAULT_THEME: str = os.environ.get("EMBEDS_DEFAULT_THEME", "light").lower()

    # Half-width of the cursor scan window used to find a target component
    SELECTION_WINDOW: int = _int_env("EMBEDS_SELECTION_WINDOW", 100)

    # Applied by the CLI only; the library never configures handlers
    LOG_LEVEL: str = os.environ.get("EMBEDS_LOG_LEVEL", "WARNING").upper()

    @property
    def default_is_dark(self) -> bool:
        return self.DEFAULT_THEME == "dark"


# Singleton instance
settings = Settings()
