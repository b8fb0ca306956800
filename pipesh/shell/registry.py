"""Name table for shell builtins."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .common import Builtin


@dataclass(frozen=True)
class BuiltinSpec:
    name: str
    handler: Builtin
    usage: str
    description: str = ""


class BuiltinRegistry:
    """Builtins keyed by name, filled by the command modules at import time.

    A builtin is declared by its usage line (``"cd [dir]"``); the first word
    is its name. Names are unique.
    """

    def __init__(self) -> None:
        self._builtins: dict[str, BuiltinSpec] = {}

    def add(self, spec: BuiltinSpec) -> BuiltinSpec:
        if spec.name in self._builtins:
            raise ValueError(f"Builtin '{spec.name}' is already registered")
        self._builtins[spec.name] = spec
        return spec

    def builtin(self, usage: str, *, description: str = "") -> Callable[[Builtin], Builtin]:
        name = usage.split()[0]

        def decorator(func: Builtin) -> Builtin:
            self.add(BuiltinSpec(name, func, usage, description))
            return func

        return decorator

    def get(self, name: str) -> BuiltinSpec | None:
        return self._builtins.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._builtins

    def __iter__(self) -> Iterator[BuiltinSpec]:
        return iter(tuple(self._builtins.values()))


BUILTIN_REGISTRY = BuiltinRegistry()


__all__ = ["BUILTIN_REGISTRY", "BuiltinRegistry", "BuiltinSpec"]
