"""Text helpers shared by the collection and the state machine."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s")

CREATE_PROMPT_PREFIX = "Create "


def slugify(name: str) -> str:
    """Lowercase ``name`` and turn every whitespace character into a hyphen."""
    return _WHITESPACE.sub("-", name.lower())


def create_option_prompt(text: str) -> str:
    return f"{CREATE_PROMPT_PREFIX}{text}"


def is_create_option_prompt(name: str, text: str) -> bool:
    """Return True when ``name`` is the creation prompt offered for ``text``."""
    return bool(text) and name == create_option_prompt(text)


def matches(name: str, text: str) -> bool:
    """Case-insensitive substring match used by option filtering."""
    return text.lower() in name.lower()
