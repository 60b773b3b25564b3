"""Sequential scheduling on an explicit machine-by-time occupation grid.

Every operation is recorded cell by cell in a grid of machines against time
units. A solution can then be checked against that grid. A second reader
handles instance files that hold one number per line.
"""

from __future__ import annotations

import argparse
import re
import time
from collections import defaultdict
from enum import IntEnum
from pathlib import Path
from typing import Optional, Sequence

from .model import (
    MAX_JOBS,
    MAX_MACHINES,
    Instance,
    InstanceError,
    Operation,
    read_instance,
)

MAX_TIME = 100_000
DEFAULT_INSTANCE = "../ft/ft03.jss"

_HEADER = re.compile(r"\s*([+-]?\d+)\s+([+-]?\d+)")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LINE_BREAKS = re.compile(r"[\r\n]+")


class GridError(ValueError):
    """Raised when an operation cannot be recorded in the occupation grid."""


class SlotTakenError(GridError):
    """Raised when a machine is already busy during a requested interval."""


class VerifyResult(IntEnum):
    """Outcome of checking a solution against its occupation grid."""

    OK = 0
    OUT_OF_ORDER = 1
    MISSING = 2
    INCOMPLETE = 3


class MachineGrid:
    """Which job occupies each machine at each time unit in [0, horizon)."""

    def __init__(self, horizon: int = MAX_TIME) -> None:
        self.horizon = horizon
        self._intervals: defaultdict[int, list[tuple[int, int, int]]] = defaultdict(list)

    def insert(self, machine: int, start: int, duration: int, job: int) -> None:
        """Give the machine to the job for [start, start + duration).

        Raises SlotTakenError naming the first busy time unit when any part
        of the interval is already taken.
        """
        end = start + duration
        if start >= end:
            return
        if start < 0 or end > self.horizon:
            raise GridError(
                f"interval [{start}, {end}) lies outside the horizon [0, {self.horizon})"
            )
        clashes = [
            max(start, s) for s, e, _ in self._intervals[machine] if s < end and start < e
        ]
        if clashes:
            raise SlotTakenError(
                f"Machine {machine} is not available at time {min(clashes)}"
            )
        self._intervals[machine].append((start, end, job))

    def occupant(self, time: int, machine: int) -> Optional[int]:
        """The job holding the machine at that time unit, or None when it is free."""
        for s, e, job in self._intervals.get(machine, ()):
            if s <= time < e:
                return job
        return None

    def count_slots(self, start: int, end: int, job: int, machine: int) -> int:
        """Number of time units in [start, end) during which the job holds the machine."""
        return sum(
            max(0, min(e, end) - max(s, start))
            for s, e, owner in self._intervals.get(machine, ())
            if owner == job
        )


def schedule_with_grid(
    instance: Instance,
) -> tuple[list[list[int]], MachineGrid, int]:
    """Place jobs in input order, each operation as early as its machine and the
    job's previous operation allow; returns the start times, the filled grid
    and the latest completion time."""
    grid = MachineGrid(MAX_TIME)
    machine_time: defaultdict[int, int] = defaultdict(int)
    starts: list[list[int]] = []
    for job, operations in enumerate(instance.jobs):
        row: list[int] = []
        for index, op in enumerate(operations):
            earliest = machine_time[op.machine]
            if index > 0:
                earliest = max(earliest, row[index - 1] + operations[index - 1].time)
            grid.insert(op.machine, earliest, op.time, job)
            row.append(earliest)
            machine_time[op.machine] = earliest + op.time
        starts.append(row)

    span = max(
        (row[-1] + ops[-1].time for ops, row in zip(instance.jobs, starts) if ops),
        default=0,
    )
    return starts, grid, span


def verify_solution(
    instance: Instance,
    starts: Sequence[Sequence[Optional[int]]],
    grid: MachineGrid,
) -> VerifyResult:
    """Check each operation in turn against the grid and report the first fault.

    Order is checked from the third operation of a job onwards; an operation
    whose interval holds none of its job's slots is missing, and one holding
    fewer slots than its duration is incomplete.
    """
    for job, (operations, row) in enumerate(zip(instance.jobs, starts)):
        for index, op in enumerate(operations):
            start = row[index]
            if index > 1:
                previous = row[index - 1]
                if previous is not None and start is not None and previous > start:
                    return VerifyResult.OUT_OF_ORDER
            if start is None:
                return VerifyResult.MISSING
            held = grid.count_slots(start, start + op.time, job, op.machine)
            if held == 0:
                return VerifyResult.MISSING
            if held != op.time:
                return VerifyResult.INCOMPLETE
    return VerifyResult.OK


def _leading_int(line: str) -> int:
    match = _LEADING_INT.match(line)
    return int(match.group(1)) if match else 0


def parse_line_tokens(text: str) -> Instance:
    """Parse a header 'jobs machines' followed by one number per line.

    Each line contributes only its leading integer (0 when it has none);
    numbers alternate machine, time, and every job takes twice as many of
    them as there are machines.
    """
    header = _HEADER.match(text)
    if header is None:
        raise InstanceError("missing header with the number of jobs and machines")
    num_jobs, num_machines = int(header.group(1)), int(header.group(2))
    if not 0 <= num_jobs <= MAX_JOBS:
        raise InstanceError(f"number of jobs must be between 0 and {MAX_JOBS}, got {num_jobs}")
    if not 0 <= num_machines <= MAX_MACHINES:
        raise InstanceError(
            f"number of machines must be between 0 and {MAX_MACHINES}, got {num_machines}"
        )

    numbers = [
        _leading_int(line) for line in _LINE_BREAKS.split(text[header.end():]) if line
    ]
    expected = num_jobs * num_machines * 2
    if len(numbers) != expected:
        raise InstanceError(f"expected {expected} numbers after the header, got {len(numbers)}")

    pairs = iter(zip(numbers[::2], numbers[1::2]))
    jobs = []
    for job in range(num_jobs):
        operations = []
        for index in range(num_machines):
            machine, duration = next(pairs)
            where = f"job {job}, operation {index}"
            if not 0 <= machine < MAX_MACHINES:
                raise InstanceError(f"machine {machine} of {where} is out of range")
            if duration < 0:
                raise InstanceError(f"time of {where} is negative: {duration}")
            operations.append(Operation(machine, duration))
        jobs.append(tuple(operations))
    return Instance(tuple(jobs))


def format_start_table(
    instance: Instance, starts: Sequence[Sequence[Optional[int]]]
) -> str:
    """A header line, then one line per job of 'M<machine>-<start>' cells;
    an unscheduled operation leaves an empty cell."""
    lines = ["Job schedule:\n"]
    for job, (operations, row) in enumerate(zip(instance.jobs, starts)):
        cells = "".join(
            "\t" if start is None else f" M{op.machine}-{start}\t"
            for op, start in zip(operations, row)
        )
        lines.append(f"Job {job}: {cells}\n")
    return "".join(lines)


def _format_solution(instance: Instance, starts: Sequence[Sequence[Optional[int]]]) -> str:
    lines = [f"{instance.num_jobs}  {instance.num_machines}\n"]
    for row in starts:
        lines.append("".join(f"{-1 if start is None else start}  " for start in row) + "\n")
    return "".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobshop-grid",
        description="Schedule a job-shop instance on a machine occupation grid.",
    )
    parser.add_argument("--input", default=DEFAULT_INSTANCE, help="instance file")
    parser.add_argument(
        "--line-tokens",
        action="store_true",
        help="read an instance that holds one number per line",
    )
    parser.add_argument("--output", help="write the start times to this file")
    parser.add_argument("--verify", action="store_true", help="check the solution afterwards")
    args = parser.parse_args(argv)

    try:
        if args.line_tokens:
            instance = parse_line_tokens(Path(args.input).read_text())
        else:
            instance = read_instance(args.input)
    except OSError as exc:
        print(f"fopen: {exc.strerror or exc}")
        return 1
    except InstanceError as exc:
        print(f"Invalid instance: {exc}")
        return 1

    started = time.process_time()
    try:
        starts, grid, span = schedule_with_grid(instance)
    except GridError as exc:
        print(f"Could not schedule: {exc}")
        return 1
    elapsed = time.process_time() - started

    print(format_start_table(instance, starts), end="")
    print(f"\nTotal time for job completion: {span} units of time")
    print(f"Total execution time: {elapsed:.6f} seconds")

    if args.verify:
        result = verify_solution(instance, starts, grid)
        print(f"Verification: {result.name}")

    if args.output is not None:
        try:
            Path(args.output).write_text(_format_solution(instance, starts))
        except OSError as exc:
            print(f"fopen: {exc.strerror or exc}")
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())