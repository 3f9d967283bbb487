"""Shared helpers for select-widget-kit."""

from sw_common.errors import (
    AddressError,
    ConfigurationError,
    CreationError,
    SelectError,
    error_to_payload,
    wrap_error,
)
from sw_common.logging import configure_logging

__all__ = [
    "AddressError",
    "ConfigurationError",
    "CreationError",
    "SelectError",
    "configure_logging",
    "error_to_payload",
    "wrap_error",
]
