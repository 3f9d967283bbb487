"""Readers for the ``SW_*`` environment switches."""

from __future__ import annotations

import os
from typing import Mapping

ENV_PREFIX = "SW_"

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


def env_name(key: str) -> str:
    """``"log_level"`` -> ``"SW_LOG_LEVEL"``."""
    return f"{ENV_PREFIX}{key.upper()}"


def parse_bool_env(value: str | None) -> bool | None:
    """True for 1/true/yes/on in any case, False for anything else, None when unset."""
    if value is None:
        return None
    return value.strip().lower() in _TRUE_WORDS


def parse_int_env(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def env_value(key: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the ``SW_`` variable for ``key``; blank values count as unset."""
    raw = (os.environ if environ is None else environ).get(env_name(key))
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def env_flag(key: str, environ: Mapping[str, str] | None = None) -> bool | None:
    return parse_bool_env(env_value(key, environ))
