import os
import pathlib
from typing import List, Optional

from dotenv import load_dotenv

# Use absolute path based on this file's location for Streamlit Cloud compatibility
_APP_DIR = pathlib.Path(__file__).parent.resolve()

load_dotenv(_APP_DIR / '.env')

API_BASE_ENV = 'POKER_API_BASE'
DEFAULT_TIMEOUT = 20.0
DEFAULT_PHOTOS_DIR = _APP_DIR / 'assets' / 'players'

# Players with fewer participations are left out of the overall ranking and superlatives
MIN_PARTICIPATIONS = 5


class ApiError(Exception):
    """Base class for every failure surfaced by the data layer."""


class ConfigurationError(ApiError):
    pass


def _secret(name: str) -> Optional[str]:
    """Read a value from Streamlit secrets when running inside Streamlit."""
    try:
        import streamlit as st
        return st.secrets.get(name)
    except Exception:
        # No secrets.toml or not running under Streamlit
        return None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value:
        return value
    value = _secret(name)
    if value:
        return str(value)
    return default


def require_api_base() -> str:
    """
    Return the API base URL without a trailing slash.

    Raises:
        ConfigurationError: if POKER_API_BASE is not configured
    """
    base = get_setting(API_BASE_ENV)
    if not base or not base.strip():
        raise ConfigurationError(
            f"Defina {API_BASE_ENV} no arquivo .env (veja .env.example)."
        )
    return base.strip().rstrip('/')


def get_timeout() -> float:
    raw = get_setting('POKER_API_TIMEOUT')
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"POKER_API_TIMEOUT must be a number, got {raw!r}")


def get_hidden_players() -> List[str]:
    """Player ids hidden from the overall view (comma-separated in POKER_HIDDEN_PLAYERS)."""
    raw = get_setting('POKER_HIDDEN_PLAYERS', '')
    return [p.strip() for p in raw.split(',') if p.strip()]


def get_photos_dir() -> pathlib.Path:
    raw = get_setting('POKER_PLAYER_PHOTOS')
    return pathlib.Path(raw) if raw else DEFAULT_PHOTOS_DIR
