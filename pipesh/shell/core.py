"""Core PipelineShell implementation."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping

from ..config import ShellConfig, default_config
from ..exceptions import EXIT_USAGE, PipelineError
from ..executor import ExitOutcome, PipelineExecutor
from ..expand import EnvLookup, environ_lookup, expand
from ..jobs import JobTable
from ..parser import parse_pipeline
from ..text import normalize, split_blanks
from .registry import BUILTIN_REGISTRY, BuiltinRegistry, BuiltinSpec

logger = logging.getLogger(__name__)


class PipelineShell:
    """Runs builtins in-process and hands every other line to the executor."""

    def __init__(
        self,
        *,
        env: MutableMapping[str, str] | None = None,
        cwd: str | None = None,
        stdin: int = 0,
        stdout: int = 1,
        stderr: int = 2,
        config: ShellConfig | None = None,
    ) -> None:
        self.env: MutableMapping[str, str] = dict(os.environ) if env is None else env
        self.cwd = cwd or os.getcwd()
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.config = config or default_config()
        self.jobs = JobTable()
        self.last_status = 0
        self.builtins = BuiltinRegistry()
        self._register_builtins()

    # ------------------------------------------------------------------
    # Builtin registration
    # ------------------------------------------------------------------
    def register_builtin(self, spec: BuiltinSpec) -> None:
        self.builtins.add(spec)

    def _register_builtins(self) -> None:
        # Import builtin modules for their side effects (registration)
        from . import commands  # noqa: F401

        for spec in BUILTIN_REGISTRY:
            self.register_builtin(spec)

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------
    def write(self, text: str) -> None:
        os.write(self.stdout, text.encode(errors="replace"))

    def error(self, text: str) -> None:
        os.write(self.stderr, text.encode(errors="replace"))

    def usage_error(self, name: str) -> int:
        spec = self.builtins.get(name)
        usage = spec.usage if spec is not None else name
        self.error(f"{name}: usage: {usage}\n")
        return EXIT_USAGE

    @property
    def lookup(self) -> EnvLookup:
        return environ_lookup(self.env)

    # ------------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------------
    def exec(self, line: str) -> ExitOutcome:
        self._report_finished_jobs()
        text = normalize(line)
        if not text:
            return ExitOutcome(status=0)
        name = split_blanks(text)[0]
        spec = self.builtins.get(name)
        if spec is not None and not any(marker in text for marker in "|<>&"):
            outcome = self._run_builtin(spec, text)
        else:
            outcome = self._run_pipeline(text)
        self.last_status = outcome.status
        return outcome

    def _run_builtin(self, spec: BuiltinSpec, text: str) -> ExitOutcome:
        args = split_blanks(expand(text, self.lookup, limit=self.config.max_expansion))[1:]
        try:
            status = spec.handler(self, args)
        except OSError as exc:
            self.error(f"{spec.name}: {exc.strerror or exc}\n")
            return ExitOutcome(status=1)
        return ExitOutcome(status=status or 0)

    def _run_pipeline(self, text: str) -> ExitOutcome:
        try:
            pipeline = parse_pipeline(text, self.lookup, limit=self.config.max_expansion)
            if pipeline is None:
                return ExitOutcome(status=0)
            executor = PipelineExecutor(
                stdin=self.stdin,
                stdout=self.stdout,
                stderr=self.stderr,
                cwd=self.cwd,
                env=self.env,
            )
            outcome = executor.run(pipeline)
        except PipelineError as exc:
            logger.debug("pipeline rejected: %s", exc.message)
            self.error(f"pipesh: {exc.message}\n")
            return ExitOutcome(status=exc.status)
        if outcome.detached:
            job = self.jobs.add(text, outcome)
            pids = " ".join(str(pid) for pid in job.pids)
            self.error(f"[{job.job_id}] {pids}\n")
        return outcome

    def _report_finished_jobs(self) -> None:
        for job in self.jobs.reap():
            self.error(f"[{job.job_id}] Done {job.status}  {job.line}\n")


__all__ = ["PipelineShell"]
