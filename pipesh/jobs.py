"""Bookkeeping for detached pipelines."""

from __future__ import annotations

from dataclasses import dataclass

from .executor import ExitOutcome, StageProcess


@dataclass
class Job:
    job_id: int
    line: str
    stages: list[StageProcess]

    @property
    def pids(self) -> tuple[int, ...]:
        return tuple(stage.pid for stage in self.stages if stage.pid is not None)

    @property
    def status(self) -> int | None:
        """Status of the last stage once every stage has terminated."""

        if not self.poll():
            return None
        return self.stages[-1].status

    def poll(self) -> bool:
        # every stage is polled so each one records its status
        return all([stage.poll() for stage in self.stages])


class JobTable:
    """Tracks detached pipelines until the shell observes their termination."""

    def __init__(self) -> None:
        self._jobs: dict[int, Job] = {}
        self._next_id = 1

    def add(self, line: str, outcome: ExitOutcome) -> Job:
        job = Job(self._next_id, line, outcome.stages)
        self._jobs[job.job_id] = job
        self._next_id += 1
        return job

    def running(self) -> list[Job]:
        return [job for job in self._jobs.values() if not job.poll()]

    def reap(self) -> list[Job]:
        finished = [job for job in self._jobs.values() if job.poll()]
        for job in finished:
            del self._jobs[job.job_id]
        if not self._jobs:
            self._next_id = 1
        return finished

    def __len__(self) -> int:
        return len(self._jobs)


__all__ = ["Job", "JobTable"]
