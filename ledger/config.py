"""Runtime configuration for the admin panel."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException


DEFAULT_API_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass
class Settings:
    """Resolved settings for one app run."""
    api_base_url: str
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _secret(name: str) -> Optional[str]:
    """Read a value from Streamlit secrets, tolerating a missing secrets file."""
    try:
        value = st.secrets.get(name)
    except (FileNotFoundError, KeyError, StreamlitAPIException):
        return None  # No secrets file, that is ok
    return str(value) if value is not None else None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Environment variables win, then secrets, then the default."""
    value = os.environ.get(name)
    if value:
        return value
    value = _secret(name)
    if value:
        return value
    return default


def load_settings() -> Settings:
    timeout_raw = get_setting("LEDGER_REQUEST_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        timeout = DEFAULT_TIMEOUT_SECONDS

    base_url = get_setting("LEDGER_API_BASE_URL", DEFAULT_API_BASE_URL) or DEFAULT_API_BASE_URL

    return Settings(
        api_base_url=base_url.rstrip("/"),
        supabase_url=get_setting("SUPABASE_URL"),
        supabase_anon_key=get_setting("SUPABASE_ANON_KEY"),
        request_timeout=timeout,
        log_level=(get_setting("LEDGER_LOG_LEVEL", "INFO") or "INFO").upper(),
    )
