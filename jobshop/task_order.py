"""Task-ordered scheduling that records a completion time per operation.

For each task number in turn, every job schedules at most one of its
operations whose machine equals that task number, choosing the one that
would complete first. Machine availability is tracked per operation
position, and a completion time of 0 marks an operation as unscheduled.
"""

from __future__ import annotations

import argparse
import time
from typing import Sequence

from .model import Instance, InstanceError, read_instance

DEFAULT_INSTANCE = "../ft/ft03.jss"


def schedule_by_task_order(instance: Instance) -> list[list[int]]:
    """Completion time of every operation (0 when it was never scheduled)."""
    width = instance.num_machines
    completion = [[0] * width for _ in instance.jobs]
    available = [0] * width
    for task in range(width):
        for job, operations in enumerate(instance.jobs):
            row = completion[job]
            best: tuple[int, int] | None = None
            for k, op in enumerate(operations):
                if op.machine != task or row[k] != 0:
                    continue
                start = max(available[k], row[k - 1] if k > 0 else 0)
                finish = start + op.time
                if best is None or finish < best[0]:
                    best = (finish, k)
            if best is not None:
                finish, k = best
                row[k] = finish
                available[k] = finish
    return completion


def format_machine_report(instance: Instance, completion: Sequence[Sequence[int]]) -> str:
    """For each machine, the first scheduled operation of every job on it."""
    lines = []
    for machine in range(instance.num_machines):
        lines.append(f"Machine {machine}:\n")
        for job, (operations, row) in enumerate(zip(instance.jobs, completion)):
            for k, op in enumerate(operations):
                if op.machine == machine and row[k] > 0:
                    start = row[k - 1] if k > 0 else 0
                    lines.append(
                        f"Job {job}, Task {k}: Start Time = {start}, End Time = {row[k]}\n"
                    )
                    break
        lines.append("\n")
    return "".join(lines)


def format_performance(instance: Instance, completion: Sequence[Sequence[int]]) -> str:
    """Completion time of the last operation of the last job, then a column
    report per operation position listing consecutive completion intervals."""
    if instance.num_jobs and instance.num_machines:
        length = completion[-1][-1]
    else:
        length = 0
    parts = [f"Optimal Schedule Length: {length}\n"]
    for column in range(instance.num_machines):
        parts.append(f"Machine {column}: ")
        last_end = 0
        for job, row in enumerate(completion):
            if row[column] > 0:
                parts.append(
                    f"Job {job}, Task {column}: Start Time = {last_end}, "
                    f"End Time = {row[column]}\n"
                )
                last_end = row[column]
        parts.append("\n")
    return "".join(parts)


def _read_word(prompt: str = "") -> str:
    while True:
        words = input(prompt).split()
        if words:
            return words[0]
        prompt = ""


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobshop-task-order",
        description="Schedule a job-shop instance task by task.",
    )
    parser.add_argument("output", nargs="?", help="output file (asked for if omitted)")
    parser.add_argument("--input", default=DEFAULT_INSTANCE, help="instance file")
    args = parser.parse_args(argv)

    try:
        instance = read_instance(args.input)
    except OSError:
        print("Error: File not found")
        return 1
    except InstanceError as exc:
        print(f"Invalid instance: {exc}")
        return 1

    started = time.process_time()
    completion = schedule_by_task_order(instance)

    print("First print")
    print(format_machine_report(instance, completion), end="")

    output_name = args.output
    if output_name is None:
        try:
            output_name = _read_word("Enter the name of the output file: ")
        except EOFError:
            print()
            print("Error: Failed to open output file")
            return 1

    try:
        output = open(output_name, "w")
    except OSError:
        print("Error: Failed to open output file")
        return 1

    with output:
        for job, row in enumerate(completion):
            for machine, finish in enumerate(row):
                print(f"Job {job}, Machine {machine}: Completion Time = {finish}")
        print("Third print")
        elapsed = time.process_time() - started
        output.write(f"Execution time: {elapsed:f} seconds\n")
        print(format_performance(instance, completion), end="")

    print(f"Execution time: {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())