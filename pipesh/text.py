"""Whitespace handling shared by the parser and the expander."""

from __future__ import annotations

import re

BLANKS = " \t"

_BLANK_RUN_RE = re.compile(r"[ \t]+")


def normalize(text: str) -> str:
    """Strip leading and trailing spaces and tabs (and nothing else)."""

    return text.strip(BLANKS)


def split_blanks(text: str) -> list[str]:
    stripped = normalize(text)
    if not stripped:
        return []
    return _BLANK_RUN_RE.split(stripped)


__all__ = ["BLANKS", "normalize", "split_blanks"]
