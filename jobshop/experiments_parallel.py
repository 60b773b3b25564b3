"""Two list-scheduling experiments: greedy finish times and total-time ordering.

The greedy pass walks jobs in input order and records when each operation
finishes. The total-time pass first runs the jobs in ascending order of total
processing time. It then places every job again, in input order, on top of
the machine and job availability the first pass left behind.
"""

from __future__ import annotations

import argparse
from collections import defaultdict
from pathlib import Path
from typing import Sequence

from .model import (
    Instance,
    InstanceError,
    ScheduledOperation,
    makespan,
    read_instance,
)

DEFAULT_INSTANCE = "../ft/ft03.jss"


def greedy_finish_times(instance: Instance) -> list[list[int]]:
    """Finish time of every operation, job by job, when each operation starts
    as soon as both its machine and the job's previous operation are done."""
    machine_finish: defaultdict[int, int] = defaultdict(int)
    finish_times: list[list[int]] = []
    for operations in instance.jobs:
        job_finish = 0
        row = []
        for op in operations:
            job_finish = max(machine_finish[op.machine], job_finish) + op.time
            machine_finish[op.machine] = job_finish
            row.append(job_finish)
        finish_times.append(row)
    return finish_times


def _finish_makespan(instance: Instance, finish_times: Sequence[Sequence[int]]) -> int:
    """Latest finish time over machines numbered below the machine count."""
    return max(
        (
            finish
            for operations, row in zip(instance.jobs, finish_times)
            for op, finish in zip(operations, row)
            if op.machine < instance.num_machines
        ),
        default=0,
    )


def format_finish_times(instance: Instance, finish_times: Sequence[Sequence[int]]) -> str:
    """A header line, then one line per job listing 'M<machine>-<finish>'."""
    lines = ["Job schedule:\n"]
    for job, (operations, row) in enumerate(zip(instance.jobs, finish_times)):
        entries = "".join(f" M{op.machine}-{finish}" for op, finish in zip(operations, row))
        lines.append(f"Job {job}:{entries}\n")
    return "".join(lines)


def schedule_by_total_time(instance: Instance) -> list[ScheduledOperation]:
    """Run the jobs once in ascending order of total processing time, then
    place them again in input order after that first pass; the result holds
    the placements of the second pass, in job order, then operation order."""
    machine_ready: defaultdict[int, int] = defaultdict(int)
    job_ready = [0] * instance.num_jobs

    def place(job: int) -> list[ScheduledOperation]:
        placed = []
        for op in instance.jobs[job]:
            start = max(machine_ready[op.machine], job_ready[job])
            end = start + op.time
            placed.append(ScheduledOperation(job, op.machine, start, end))
            machine_ready[op.machine] = job_ready[job] = end
        return placed

    order = sorted(
        range(instance.num_jobs),
        key=lambda job: sum(op.time for op in instance.jobs[job]),
    )
    for job in order:
        place(job)

    schedule: list[ScheduledOperation] = []
    for job in range(instance.num_jobs):
        schedule.extend(place(job))
    return schedule


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobshop-experiments-parallel",
        description="Run a list-scheduling experiment on a job-shop instance.",
    )
    parser.add_argument(
        "experiment",
        nargs="?",
        choices=("finish-times", "total-time"),
        default="finish-times",
        help="which experiment to run",
    )
    parser.add_argument("--input", default=DEFAULT_INSTANCE, help="instance file")
    args = parser.parse_args(argv)

    try:
        instance = read_instance(args.input)
    except OSError:
        if args.experiment == "finish-times":
            print(f"Error opening file {Path(args.input).name}")
        else:
            print("Could not open file")
        return 1
    except InstanceError as exc:
        print(f"Invalid instance: {exc}")
        return 1

    if args.experiment == "finish-times":
        finish_times = greedy_finish_times(instance)
        print(format_finish_times(instance, finish_times), end="")
        span = _finish_makespan(instance, finish_times)
        print(f"\nTotal time for job completion: {span} units of time")
    else:
        schedule = schedule_by_total_time(instance)
        for op in schedule:
            print(f"Job {op.job} starts at time {op.start} on machine {op.machine}")
        print(f"The makespan is {makespan(schedule)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())