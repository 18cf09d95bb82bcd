"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

load_dotenv()

BASE_DIR: Path = Path.cwd()


def _parse_chat_id(raw: str) -> Optional[Union[int, str]]:
    """Numeric ids become int, '@username' style ids are kept as str."""
    raw = raw.strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return raw


def _derive_channel_url(channel_id: str) -> Optional[str]:
    """Public channels (@name) have a t.me link, private ones (-100...) don't."""
    if channel_id.startswith("@") and len(channel_id) > 1:
        return f"https://t.me/{channel_id[1:]}"
    return None


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── Channel gating ────────────────────────────────────────
# e.g. @your_channel or -1001234567890
CHANNEL_ID: str = os.getenv("CHANNEL_ID", "").strip()
CHANNEL_URL: Optional[str] = (
    os.getenv("CHANNEL_URL", "").strip() or _derive_channel_url(CHANNEL_ID)
)

# ── Consultation requests ─────────────────────────────────
ADMIN_CHAT_ID: Optional[Union[int, str]] = _parse_chat_id(os.getenv("ADMIN_CHAT_ID", ""))

# ── Guides catalog & storage ──────────────────────────────
GUIDES_PATH: Path = BASE_DIR / os.getenv("GUIDES_PATH", "data/guides.json")
GUIDES_DIR: Path = BASE_DIR / os.getenv("GUIDES_DIR", "storage/guides")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def validate_config() -> list[str]:
    """
    Check the settings the bot cannot run without.

    Returns:
        A list of human-readable problems; empty when the config is usable.
    """
    problems = []
    if not TELEGRAM_BOT_TOKEN:
        problems.append("TELEGRAM_BOT_TOKEN is not set. Please configure .env")
    if not CHANNEL_ID:
        problems.append(
            "CHANNEL_ID is not set. Please configure .env (e.g. @your_channel or -100...)"
        )
    return problems
