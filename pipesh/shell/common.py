"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import PipelineShell


Builtin = Callable[["PipelineShell", list[str]], "int | None"]


__all__ = ["Builtin"]
