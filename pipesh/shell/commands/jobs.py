"""Detached pipeline listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..registry import BUILTIN_REGISTRY

if TYPE_CHECKING:
    from ..core import PipelineShell


@BUILTIN_REGISTRY.builtin("jobs", description="List detached pipelines still running")
def jobs(shell: "PipelineShell", _: list[str]) -> int:
    for job in shell.jobs.running():
        pids = " ".join(str(pid) for pid in job.pids)
        shell.write(f"[{job.job_id}] Running {pids}  {job.line}\n")
    return 0
