"""Working directory builtins."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ..registry import BUILTIN_REGISTRY

if TYPE_CHECKING:
    from ..core import PipelineShell


@BUILTIN_REGISTRY.builtin("cd [dir]", description="Change the working directory")
def cd(shell: "PipelineShell", args: list[str]) -> int:
    if len(args) > 1:
        return shell.usage_error("cd")
    target = args[0] if args else shell.env.get("HOME", "/")
    path = os.path.normpath(os.path.join(shell.cwd, os.path.expanduser(target)))
    if not os.path.isdir(path):
        shell.error(f"cd: {target}: No such directory\n")
        return 1
    shell.cwd = path
    shell.env["PWD"] = path
    return 0


@BUILTIN_REGISTRY.builtin("pwd", description="Print the working directory")
def pwd(shell: "PipelineShell", _: list[str]) -> int:
    shell.write(f"{shell.cwd}\n")
    return 0
