"""Job-shop instances, scheduled operations and their text formats."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Iterable, Iterator, Sequence, Union

MAX_JOBS = 100
MAX_MACHINES = 100

PathType = Union[str, "PathLike[str]"]


class InstanceError(ValueError):
    """Raised when instance data is malformed or exceeds the supported limits."""


@dataclass(frozen=True)
class Operation:
    """One step of a job: the machine it needs and for how long."""

    machine: int
    time: int


@dataclass(frozen=True)
class ScheduledOperation:
    """An operation placed on a machine over the interval [start, end)."""

    job: int
    machine: int
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Instance:
    """A job-shop problem: every job is an ordered sequence of operations."""

    jobs: tuple[tuple[Operation, ...], ...]

    def __post_init__(self) -> None:
        jobs = tuple(tuple(ops) for ops in self.jobs)
        object.__setattr__(self, "jobs", jobs)
        if len({len(ops) for ops in jobs}) > 1:
            raise InstanceError("every job must have the same number of operations")

    @property
    def num_jobs(self) -> int:
        return len(self.jobs)

    @property
    def num_machines(self) -> int:
        return len(self.jobs[0]) if self.jobs else 0


def _integers(tokens: Iterator[str]):
    def take(what: str) -> int:
        try:
            token = next(tokens)
        except StopIteration:
            raise InstanceError(f"unexpected end of data while reading {what}") from None
        try:
            return int(token)
        except ValueError:
            raise InstanceError(f"expected an integer for {what}, got {token!r}") from None

    return take


def parse_instance(text: str) -> Instance:
    """Parse the whitespace-separated format: header 'jobs machines', then
    'machine time' pairs for every operation of every job, job by job."""
    take = _integers(iter(text.split()))
    num_jobs = take("the number of jobs")
    num_machines = take("the number of machines")
    if not 0 <= num_jobs <= MAX_JOBS:
        raise InstanceError(f"number of jobs must be between 0 and {MAX_JOBS}, got {num_jobs}")
    if not 0 <= num_machines <= MAX_MACHINES:
        raise InstanceError(
            f"number of machines must be between 0 and {MAX_MACHINES}, got {num_machines}"
        )

    jobs = []
    for job in range(num_jobs):
        operations = []
        for index in range(num_machines):
            where = f"job {job}, operation {index}"
            machine = take(f"the machine of {where}")
            duration = take(f"the time of {where}")
            if not 0 <= machine < MAX_MACHINES:
                raise InstanceError(f"machine {machine} of {where} is out of range")
            if duration < 0:
                raise InstanceError(f"time of {where} is negative: {duration}")
            operations.append(Operation(machine, duration))
        jobs.append(tuple(operations))
    if num_jobs == 0:
        return Instance(())
    return Instance(tuple(jobs))


def read_instance(path: PathType) -> Instance:
    """Read and parse an instance file."""
    return parse_instance(Path(path).read_text())


def makespan(schedule: Iterable[ScheduledOperation]) -> int:
    """Latest end time in the schedule, or 0 when it is empty."""
    return max((op.end for op in schedule), default=0)


def format_schedule(schedule: Iterable[ScheduledOperation]) -> str:
    """One line per scheduled operation."""
    return "".join(
        f"Job {op.job} - Machine {op.machine} - Start {op.start} - End {op.end}\n"
        for op in schedule
    )


def write_schedule(
    path: PathType,
    schedule: Sequence[ScheduledOperation],
    elapsed: float | None = None,
) -> None:
    """Write the schedule and its makespan, plus the elapsed time when given."""
    schedule = list(schedule)
    text = format_schedule(schedule) + f"The makespan is {makespan(schedule)}\n"
    if elapsed is not None:
        text += f"Time taken: {elapsed:f} seconds\n"
    Path(path).write_text(text)