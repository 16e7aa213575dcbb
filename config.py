"""
Centralized configuration for the bet tracker bot.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_optional_int(env_var: str) -> int | None:
    raw = os.getenv(env_var)
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _parse_datetime(env_var: str, default: str) -> datetime:
    """Parse an ISO timestamp ('Z' suffix allowed); naive values are taken as UTC."""
    raw = os.getenv(env_var) or default
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        parsed = datetime.fromisoformat(default.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")

# Channels: an ID, when set, wins over the name
BET_CHANNEL_NAME = os.getenv("BET_CHANNEL_NAME", "bet-tracking")
BET_CHANNEL_ID = _parse_optional_int("BET_CHANNEL_ID")
DISCUSSION_CHANNEL_NAME = os.getenv("DISCUSSION_CHANNEL_NAME", "bet-discussion")
DISCUSSION_CHANNEL_ID = _parse_optional_int("DISCUSSION_CHANNEL_ID")

# Leading initials on a bet line
GROUP_INITIALS = os.getenv("GROUP_INITIALS", "DG").upper()
INDIVIDUAL_INITIALS = os.getenv("INDIVIDUAL_INITIALS", "DH").upper()

# Group bet voting (the proposer's approval is implicit and not counted here)
VOTE_PASS_THRESHOLD = max(1, _parse_int("VOTE_PASS_THRESHOLD", 1))
VOTE_REJECT_THRESHOLD = max(1, _parse_int("VOTE_REJECT_THRESHOLD", 2))
PROPOSAL_TTL_SECONDS = _parse_int("PROPOSAL_TTL_SECONDS", 604800)  # 7 days

# Spreadsheet reporting
LOGGING_START = _parse_datetime("LOGGING_START_ISO", "2025-11-01T00:00:00Z")
GOOGLE_SHEETS_SPREADSHEET_ID = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "")
GOOGLE_CREDENTIALS_JSON = os.getenv("GOOGLE_CREDENTIALS_JSON", "")  # full service account JSON
GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY", "")  # literal or \n-escaped newlines

REPORT_MAX_ATTEMPTS = max(1, _parse_int("REPORT_MAX_ATTEMPTS", 5))
REPORT_INITIAL_DELAY_MS = _parse_int("REPORT_INITIAL_DELAY_MS", 400)
REPORT_BACKOFF_FACTOR = _parse_float("REPORT_BACKOFF_FACTOR", 1.6)
