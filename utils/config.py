# utils/config.py
from __future__ import annotations

import os
from typing import Optional


def _secret(name: str) -> Optional[str]:
    try:
        import streamlit as st
        return st.secrets.get(name)
    except Exception:
        # no streamlit, or no secrets.toml
        return None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Streamlit secrets first, then the environment, then ``default``."""
    return _secret(name) or os.getenv(name) or default


def database_url() -> str:
    return get_setting("DATABASE_URL", "sqlite:///strivio.db")


def timezone_name() -> str:
    """Timezone used to decide what "today" is for time-based progress."""
    return get_setting("STRIVIO_TIMEZONE", "UTC")


def log_level() -> str:
    return (get_setting("STRIVIO_LOG_LEVEL", "INFO") or "INFO").upper()
