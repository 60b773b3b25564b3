"""Sequential list scheduling: jobs are placed one after another in input order."""

from __future__ import annotations

import argparse
import time
from collections import defaultdict
from pathlib import Path
from typing import Sequence

from .model import (
    Instance,
    InstanceError,
    ScheduledOperation,
    format_schedule,
    makespan,
    read_instance,
    write_schedule,
)


def schedule_sequential(instance: Instance) -> list[ScheduledOperation]:
    """Place each operation as early as both its machine and its job allow,
    visiting jobs in order and each job's operations in order."""
    machine_ready: defaultdict[int, int] = defaultdict(int)
    schedule: list[ScheduledOperation] = []
    for job, operations in enumerate(instance.jobs):
        job_ready = 0
        for op in operations:
            start = max(machine_ready[op.machine], job_ready)
            end = start + op.time
            schedule.append(ScheduledOperation(job, op.machine, start, end))
            machine_ready[op.machine] = job_ready = end
    return schedule


def _read_word(prompt: str = "") -> str:
    """Read the next whitespace-delimited word from standard input."""
    while True:
        words = input(prompt).split()
        if words:
            return words[0]
        prompt = ""


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobshop-sequential",
        description="Schedule a job-shop instance sequentially and write the result.",
    )
    parser.add_argument("input", nargs="?", help="instance file name (asked for if omitted)")
    parser.add_argument("output", nargs="?", help="result file name (asked for if omitted)")
    parser.add_argument("--input-dir", default="../ft", help="directory holding instances")
    parser.add_argument("--output-dir", default="../Resultados", help="directory for results")
    args = parser.parse_args(argv)

    input_name = args.input
    if input_name is None:
        print("Type the file name to read")
        try:
            input_name = _read_word()
        except EOFError:
            print("Could not open file")
            return 1

    try:
        instance = read_instance(Path(args.input_dir) / input_name)
    except OSError:
        print("Could not open file")
        return 1
    except InstanceError as exc:
        print(f"Invalid instance: {exc}")
        return 1

    started = time.process_time()
    schedule = schedule_sequential(instance)
    span = makespan(schedule)
    elapsed = time.process_time() - started

    output_name = args.output
    if output_name is None:
        try:
            output_name = _read_word("Enter the name of the file to write the results to: ")
        except EOFError:
            print()
            print("Could not open or create file")
            return 1

    try:
        write_schedule(Path(args.output_dir) / output_name, schedule, elapsed)
    except OSError:
        print(f"Could not open or create file {output_name}")
        return 1

    print(format_schedule(schedule), end="")
    print(f"The makespan is {span}")
    print(f"Time taken: {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())