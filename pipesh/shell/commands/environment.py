"""Environment variable builtins."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..registry import BUILTIN_REGISTRY

if TYPE_CHECKING:
    from ..core import PipelineShell

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@BUILTIN_REGISTRY.builtin("export [NAME[=value] ...]", description="Set environment variables (NAME=value)")
def export(shell: "PipelineShell", args: list[str]) -> int:
    if not args:
        return env(shell, args)
    status = 0
    for arg in args:
        name, sep, value = arg.partition("=")
        if not _NAME_RE.match(name):
            shell.error(f"export: '{arg}': not a valid identifier\n")
            status = 1
            continue
        if sep:
            shell.env[name] = value
        else:
            shell.env.setdefault(name, "")
    return status


@BUILTIN_REGISTRY.builtin("unset NAME ...", description="Remove environment variables")
def unset(shell: "PipelineShell", args: list[str]) -> int:
    if not args:
        return shell.usage_error("unset")
    for name in args:
        shell.env.pop(name, None)
    return 0


@BUILTIN_REGISTRY.builtin("env", description="List environment variables")
def env(shell: "PipelineShell", _: list[str]) -> int:
    lines = [f"{name}={value}\n" for name, value in sorted(shell.env.items())]
    shell.write("".join(lines))
    return 0
