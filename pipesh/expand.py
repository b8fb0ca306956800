"""``$NAME`` substitution against an injected environment lookup."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from .text import BLANKS

EnvLookup = Callable[[str], str | None]

DEFAULT_EXPANSION_LIMIT = 4096

_NAME_STOP = BLANKS + "$"


def environ_lookup(mapping: Mapping[str, str]) -> EnvLookup:
    """Return a read-only lookup over ``mapping``."""

    def lookup(name: str) -> str | None:
        return mapping.get(name)

    return lookup


NO_VARIABLES: EnvLookup = environ_lookup({})


def expand(
    text: str,
    env_lookup: EnvLookup = NO_VARIABLES,
    *,
    limit: int = DEFAULT_EXPANSION_LIMIT,
) -> str:
    """Substitute ``$NAME`` references in a single left-to-right pass.

    Unbound names expand to the empty string. A ``$`` at the end of the text,
    before a blank, or before another ``$`` is copied as-is. Substituted values
    are never rescanned. Output saturates at ``limit`` characters: the prefix
    written so far is returned instead of failing.
    """

    out: list[str] = []
    size = 0
    idx = 0
    length = len(text)
    while idx < length and size < limit:
        char = text[idx]
        if char != "$":
            out.append(char)
            size += 1
            idx += 1
            continue
        end = idx + 1
        while end < length and text[end] not in _NAME_STOP:
            end += 1
        name = text[idx + 1 : end]
        if not name:
            out.append(char)
            size += 1
            idx += 1
            continue
        value = env_lookup(name) or ""
        out.append(value)
        size += len(value)
        idx = end
    return "".join(out)[:limit]


__all__ = ["DEFAULT_EXPANSION_LIMIT", "NO_VARIABLES", "EnvLookup", "environ_lookup", "expand"]
