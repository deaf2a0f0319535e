"""
Runtime settings loaded from the environment and an optional .env file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from a11yscan.errors import ConfigurationError
from a11yscan.links import DEFAULT_USER_AGENT

# Checked in order; the first non-empty one wins
API_KEY_VARS = ("GOOGLE_API_KEY", "PAGESPEED_API_KEY", "LIGHTHOUSE_API_KEY")


@dataclass(frozen=True, slots=True)
class Settings:
    """Credentials, timeouts and pacing for scans."""
    api_key: str
    request_timeout_s: float = 30.0
    scan_delay_s: float = 1.0
    scan_timeout_s: float = 600.0
    user_agent: str = DEFAULT_USER_AGENT


def get_api_key() -> str:
    for name in API_KEY_VARS:
        key = os.getenv(name)
        if key:
            return key
    return ""


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if parsed < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return parsed


def load_settings(env_file: Optional[Union[str, Path]] = ".env") -> Settings:
    """
    Load settings, reading env_file first if it exists.

    Variables already set in the environment take precedence over the file.
    Raises ConfigurationError when no audit API key is configured.
    """
    if env_file is not None and Path(env_file).is_file():
        load_dotenv(env_file, override=False)

    api_key = get_api_key()
    if not api_key:
        raise ConfigurationError(
            "Google API key not configured. Set GOOGLE_API_KEY "
            "(or PAGESPEED_API_KEY / LIGHTHOUSE_API_KEY) or add it to a .env file."
        )

    return Settings(
        api_key=api_key,
        request_timeout_s=_env_float("A11YSCAN_TIMEOUT", 30.0),
        scan_delay_s=_env_float("A11YSCAN_DELAY", 1.0),
        scan_timeout_s=_env_float("A11YSCAN_SCAN_TIMEOUT", 600.0),
        user_agent=os.getenv("A11YSCAN_USER_AGENT") or DEFAULT_USER_AGENT,
    )
