"""
settings.py — Central config for Wildlife Sighting Reports & Location Resolution

Precedence for config values:
1) Streamlit secrets (if available)
2) Environment variables
3) Sensible defaults

Secrets (database URL, contact User-Agent) should live in .streamlit/secrets.toml
for Streamlit, or in a local .env file.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# --- Streamlit secrets (optional) ---
_ST_SECRETS = None
try:
    import streamlit as st  # noqa: F401
    _ST_SECRETS = getattr(st, "secrets", None)
except Exception:
    _ST_SECRETS = None


# --- Helpers ---------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # repo root

def from_secrets_or_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return value from st.secrets[key] if available, else os.getenv(key), else default."""
    if _ST_SECRETS is not None:
        try:
            val = _ST_SECRETS.get(key, None)
            if val is not None:
                return str(val)
        except Exception:
            # No secrets.toml present
            pass
    return os.getenv(key, default)

def as_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse common truthy strings to bool."""
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "t", "yes", "y", "on"}

def as_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default

def as_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


# --- Environment / Services -----------------------------------------------

ENVIRONMENT  = from_secrets_or_env("ENV", "development")
DEBUG        = as_bool(from_secrets_or_env("DEBUG", "false"), default=False)
LOG_LEVEL    = from_secrets_or_env("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

DATABASE_URL = from_secrets_or_env(
    "DATABASE_URL", f"sqlite:///{PROJECT_ROOT / 'wildlife_reports.db'}"
)

# Nominatim / HTTP
USER_AGENT            = from_secrets_or_env("USER_AGENT", "WildlifeSightingBot/1.0 (example@example.com)")
HEADERS               = {"User-Agent": USER_AGENT, "Accept": "application/json"}
NOMINATIM_REVERSE_URL = from_secrets_or_env("NOMINATIM_REVERSE_URL", "https://nominatim.openstreetmap.org/reverse")
NOMINATIM_ZOOM        = as_int(from_secrets_or_env("NOMINATIM_ZOOM"), 14)
GEOCODE_TIMEOUT_S     = as_float(from_secrets_or_env("GEOCODE_TIMEOUT_S"), 10.0)


# --- Location Resolution ---------------------------------------------------

# Pending location used when a report carries no coordinate evidence (CENRO office, Manolo Fortich)
PENDING_LATITUDE  = as_float(from_secrets_or_env("PENDING_LATITUDE"), 8.371964645263802)
PENDING_LONGITUDE = as_float(from_secrets_or_env("PENDING_LONGITUDE"), 124.85604137091526)

# Nearest-center fallback bound for the local catalog
FALLBACK_MATCH_KM = as_float(from_secrets_or_env("FALLBACK_MATCH_KM"), 5.0)

# Live device positioning
LIVE_FIX_TIMEOUT_S    = as_float(from_secrets_or_env("LIVE_FIX_TIMEOUT_S"), 10.0)
LIVE_PROMPT_TIMEOUT_S = as_float(from_secrets_or_env("LIVE_PROMPT_TIMEOUT_S"), 15.0)
LIVE_MAX_AGE_S        = as_float(from_secrets_or_env("LIVE_MAX_AGE_S"), 30.0)

# "builtin" or "database"
CATALOG_SOURCE = (from_secrets_or_env("CATALOG_SOURCE", "builtin") or "builtin").strip().lower()
