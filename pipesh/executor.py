"""Materialize a parsed pipeline as concurrently running OS processes."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .exceptions import (
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    PipelineError,
    RedirectionError,
    ResourceError,
    SpawnError,
)
from .parser import PipelineSpec, StageSpec

logger = logging.getLogger(__name__)

EXIT_STARTED = 0

_READ_FLAGS = os.O_RDONLY
_WRITE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_WRITE_MODE = 0o644


class ProcessState(Enum):
    CREATED = "created"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class StageProcess:
    """One stage's lifecycle: ``CREATED -> RUNNING -> TERMINATED``.

    Descriptors opened for the stage are attached while ``CREATED`` and are
    released on every transition out of it.
    """

    index: int
    spec: StageSpec
    state: ProcessState = ProcessState.CREATED
    fds: list[int] = field(default_factory=list)
    popen: subprocess.Popen | None = None
    status: int | None = None
    error: PipelineError | None = None

    @property
    def pid(self) -> int | None:
        return self.popen.pid if self.popen is not None else None

    def attach(self, fd: int) -> int:
        self.fds.append(fd)
        return fd

    def start(self, popen: subprocess.Popen) -> None:
        self._release()
        self.popen = popen
        self.state = ProcessState.RUNNING

    def fail(self, error: PipelineError) -> None:
        self._release()
        self.error = error
        self.status = error.status
        self.state = ProcessState.TERMINATED

    def wait(self) -> int:
        if self.state is ProcessState.RUNNING:
            assert self.popen is not None
            self.finish(self.popen.wait())
        assert self.status is not None
        return self.status

    def poll(self) -> bool:
        """Return ``True`` once the stage has terminated, without blocking."""

        if self.state is ProcessState.RUNNING:
            assert self.popen is not None
            returncode = self.popen.poll()
            if returncode is not None:
                self.finish(returncode)
        return self.state is ProcessState.TERMINATED

    def finish(self, returncode: int) -> None:
        self.status = exit_status(returncode)
        self.state = ProcessState.TERMINATED
        logger.debug("stage %d (pid %s) exited with %d", self.index, self.pid, self.status)

    def _release(self) -> None:
        while self.fds:
            os.close(self.fds.pop())


@dataclass
class ExitOutcome:
    status: int = 0
    pids: tuple[int, ...] = ()
    detached: bool = False
    stage_statuses: tuple[int | None, ...] = ()
    stages: list[StageProcess] = field(default_factory=list, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == 0


def exit_status(returncode: int) -> int:
    """Map a ``Popen.returncode`` to a shell status (signals become 128+N)."""

    if returncode < 0:
        return 128 - returncode
    return returncode


class PipelineExecutor:
    """Runs pipelines against the caller's standard streams.

    ``stdin``, ``stdout`` and ``stderr`` are the descriptors stages inherit when
    no pipe or redirection replaces them. ``cwd`` anchors both the children and
    relative redirection targets; ``env`` is handed to every child unchanged.
    """

    def __init__(
        self,
        *,
        stdin: int = 0,
        stdout: int = 1,
        stderr: int = 2,
        cwd: str | os.PathLike[str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.cwd = cwd
        self.env = env

    def run(self, pipeline: PipelineSpec) -> ExitOutcome:
        pipes = self._allocate_pipes(len(pipeline.stages) - 1)
        stages = [StageProcess(index, spec) for index, spec in enumerate(pipeline.stages)]
        try:
            for stage in stages:
                self._launch(stage, pipes)
        finally:
            for read_fd, write_fd in pipes:
                os.close(read_fd)
                os.close(write_fd)

        pids = tuple(stage.pid for stage in stages if stage.pid is not None)
        if pipeline.detached:
            logger.debug("detached pipeline started: pids=%s", pids)
            return ExitOutcome(status=EXIT_STARTED, pids=pids, detached=True, stages=stages)

        statuses = self._wait_all(stages)
        failed = [stage for stage in stages if stage.error is not None]
        status = failed[0].status if failed else statuses[-1]
        for stage in stages[:-1]:
            if stage.error is None and stage.status:
                logger.info("stage %d (%s) exited with %d", stage.index, stage.spec.program, stage.status)
        assert status is not None
        return ExitOutcome(status=status, pids=pids, stage_statuses=statuses, stages=stages)

    def _wait_all(self, stages: list[StageProcess]) -> tuple[int, ...]:
        """Wait on every stage in creation order, even across Ctrl-C.

        The interrupt reaches the stages through the terminal as well, so the
        wait resumes on the stage that was being waited on.
        """

        statuses: list[int] = []
        for stage in stages:
            while True:
                try:
                    statuses.append(stage.wait())
                    break
                except KeyboardInterrupt:
                    logger.info("interrupted while waiting on stage %d (pid %s)", stage.index, stage.pid)
        return tuple(statuses)

    def _allocate_pipes(self, count: int) -> list[tuple[int, int]]:
        pipes: list[tuple[int, int]] = []
        try:
            for _ in range(count):
                pipes.append(os.pipe())
        except OSError as exc:
            for read_fd, write_fd in pipes:
                os.close(read_fd)
                os.close(write_fd)
            raise ResourceError(f"cannot create pipe: {exc.strerror}") from exc
        logger.debug("allocated %d pipe(s)", count)
        return pipes

    def _launch(self, stage: StageProcess, pipes: list[tuple[int, int]]) -> None:
        spec = stage.spec
        stdin = pipes[stage.index - 1][0] if stage.index > 0 else self.stdin
        stdout = pipes[stage.index][1] if stage.index < len(pipes) else self.stdout
        stderr = self.stderr
        try:
            if spec.input_target is not None:
                stdin = stage.attach(self._open_target(spec.input_target, _READ_FLAGS))
            if spec.output_target is not None:
                stdout = stage.attach(self._open_target(spec.output_target, _WRITE_FLAGS))
            if spec.error_target is not None:
                stderr = stage.attach(self._open_target(spec.error_target, _WRITE_FLAGS))
            popen = self._spawn(spec.argv, stdin, stdout, stderr)
        except (RedirectionError, ResourceError, SpawnError) as exc:
            stage.fail(exc)
            self._report(exc)
            return
        stage.start(popen)
        logger.debug("stage %d started: pid=%d argv=%s", stage.index, popen.pid, spec.argv)

    def _open_target(self, target: str, flags: int) -> int:
        path = Path(target)
        if self.cwd is not None and not path.is_absolute():
            path = Path(self.cwd) / path
        try:
            return os.open(path, flags, _WRITE_MODE)
        except OSError as exc:
            raise RedirectionError(target, exc.strerror or str(exc)) from exc
        except ValueError as exc:
            raise RedirectionError(target, str(exc)) from exc

    def _spawn(self, argv: list[str], stdin: int, stdout: int, stderr: int) -> subprocess.Popen:
        program = argv[0]
        try:
            return subprocess.Popen(
                argv,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
                cwd=self.cwd,
                env=self.env,
                close_fds=True,
            )
        except FileNotFoundError as exc:
            raise SpawnError(program, "command not found", status=EXIT_NOT_FOUND) from exc
        except PermissionError as exc:
            raise SpawnError(program, "permission denied", status=EXIT_NOT_EXECUTABLE) from exc
        except BlockingIOError as exc:
            raise ResourceError(f"{program}: cannot create process: {exc.strerror}") from exc
        except OSError as exc:
            raise SpawnError(program, exc.strerror or str(exc), status=EXIT_NOT_EXECUTABLE) from exc
        except ValueError as exc:
            raise SpawnError(program, str(exc), status=EXIT_NOT_EXECUTABLE) from exc

    def _report(self, error: PipelineError) -> None:
        logger.info("stage failed: %s", error.message)
        os.write(self.stderr, f"{error.message}\n".encode(errors="replace"))


__all__ = ["ExitOutcome", "PipelineExecutor", "ProcessState", "StageProcess", "exit_status"]
