"""Configuration for the interactive shell and CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .expand import DEFAULT_EXPANSION_LIMIT

DEFAULT_PROMPT = "MonShell% "
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class ShellConfig:
    prompt: str = DEFAULT_PROMPT
    max_expansion: int = DEFAULT_EXPANSION_LIMIT
    log_level: str = DEFAULT_LOG_LEVEL


def default_config() -> ShellConfig:
    return ShellConfig()


def parse_config(options: Mapping[str, Any]) -> ShellConfig:
    """Build a ShellConfig from loose options, e.g. ``vars(argparse_namespace)``.

    Missing or ``None`` entries fall back to defaults.

    Raises:
        ValueError: If a value is out of range or not a known log level.
    """

    prompt = options.get("prompt")
    max_expansion = options.get("max_expansion")
    log_level = options.get("log_level")

    if max_expansion is None:
        max_expansion = DEFAULT_EXPANSION_LIMIT
    if int(max_expansion) <= 0:
        raise ValueError("max_expansion must be positive")

    level_name = str(log_level or DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ValueError(f"Unknown log level '{log_level}'")

    return ShellConfig(
        prompt=DEFAULT_PROMPT if prompt is None else str(prompt),
        max_expansion=int(max_expansion),
        log_level=level_name,
    )


__all__ = ["DEFAULT_PROMPT", "ShellConfig", "default_config", "parse_config"]
