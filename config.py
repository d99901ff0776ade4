# config.py
import logging
import os

try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}

DEFAULTS = {
    "DATABASE_URL": "sqlite:///collabkill.db",
    "TAVUS_REPLICA_ID": "r783537ef5",
    "MEDIA_DIR": "media",
    "LOG_LEVEL": "INFO",
    "HTTP_TIMEOUT": "30",
}


def get_setting(name: str, default=None):
    """Streamlit secrets first, then the environment, then DEFAULTS."""
    try:
        value = _secrets.get(name)
    except Exception:
        # st.secrets raises when no secrets.toml exists
        value = None
    if default is None:
        default = DEFAULTS.get(name)
    return value or os.getenv(name) or default


def http_timeout() -> float:
    return float(get_setting("HTTP_TIMEOUT"))


def configure_logging(level=None) -> None:
    level = level or get_setting("LOG_LEVEL")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
