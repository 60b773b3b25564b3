"""Multi-threaded list scheduling with per-machine time-slot reservations.

Jobs are split into contiguous blocks, one block per worker thread. Each
worker places the operations of its jobs in order. An operation starts at
the first free slot on its machine that is no earlier than both the end of
the job's previous operation and the last end time recorded for the machine.
"""

from __future__ import annotations

import argparse
import threading
import time
from pathlib import Path
from typing import Sequence

from .model import (
    Instance,
    InstanceError,
    ScheduledOperation,
    read_instance,
    write_schedule,
)

DEFAULT_HORIZON = 1_000_000


class ScheduleError(ValueError):
    """Raised when an operation cannot be placed within the time horizon."""


class MachineTimeline:
    """Busy intervals of one machine on the time axis [0, horizon)."""

    def __init__(self, horizon: int = DEFAULT_HORIZON) -> None:
        self.horizon = horizon
        self._busy: list[tuple[int, int]] = []

    def is_free(self, start: int, end: int) -> bool:
        """True when no slot in [start, end) is taken; an empty span is always free."""
        if start >= end:
            return True
        return not any(s < end and start < e for s, e in self._busy)

    def earliest_start(self, earliest: int, duration: int) -> int:
        """Smallest start >= earliest at which [start, start + duration) is free."""
        start = earliest
        if duration <= 0:
            return start
        moved = True
        while moved:
            moved = False
            for s, e in self._busy:
                if s < start + duration and start < e:
                    start = e
                    moved = True
        return start

    def reserve(self, start: int, end: int) -> None:
        """Mark [start, end) as busy."""
        if start >= end:
            return
        if start < 0 or end > self.horizon:
            raise ScheduleError(
                f"interval [{start}, {end}) lies outside the horizon [0, {self.horizon})"
            )
        self._busy.append((start, end))
        self._busy.sort()


def partition_jobs(num_jobs: int, num_threads: int) -> list[range]:
    """Split job indices into one contiguous block per thread; the last
    block takes whatever the even split leaves over."""
    if num_threads < 1:
        raise ValueError(f"number of threads must be at least 1, got {num_threads}")
    per_thread = num_jobs // num_threads
    return [
        range(
            i * per_thread,
            num_jobs if i == num_threads - 1 else (i + 1) * per_thread,
        )
        for i in range(num_threads)
    ]


class ParallelScheduler:
    """Schedules an instance with a pool of worker threads."""

    def __init__(
        self,
        instance: Instance,
        num_threads: int = 1,
        shared_job_availability: bool = False,
        horizon: int = DEFAULT_HORIZON,
        verbose: bool = False,
    ) -> None:
        if num_threads < 1:
            raise ValueError(f"number of threads must be at least 1, got {num_threads}")
        self.instance = instance
        self.num_threads = num_threads
        self.shared_job_availability = shared_job_availability
        self.horizon = horizon
        self.verbose = verbose

    def run(self) -> list[ScheduledOperation]:
        """Schedule every operation; the result is in job order, then operation order."""
        instance = self.instance
        machines = {op.machine for ops in instance.jobs for op in ops}
        self._timelines = {m: MachineTimeline(self.horizon) for m in machines}
        self._machine_end = dict.fromkeys(machines, 0)
        self._machine_locks = {m: threading.Lock() for m in machines}
        self._job_locks = [threading.Lock() for _ in range(instance.num_jobs)]
        self._schedule_lock = threading.Lock()
        self._slots: list[ScheduledOperation | None] = [None] * (
            instance.num_jobs * instance.num_machines
        )
        self._errors: list[BaseException] = []

        workers = [
            threading.Thread(target=self._work, args=(block,))
            for block in partition_jobs(instance.num_jobs, self.num_threads)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if self._errors:
            raise self._errors[0]
        return [op for op in self._slots if op is not None]

    def _log(self, message: str) -> None:
        if self.verbose:
            print(f"Thread {threading.get_ident()}: {message}")

    def _work(self, jobs: range) -> None:
        try:
            shared: dict[int, int] = {}
            for job in jobs:
                self._log(f"Working on Job {job}")
                with self._job_locks[job]:
                    ready = shared if self.shared_job_availability else {}
                    self._place_job(job, ready)
        except BaseException as exc:  # surfaced to the caller of run()
            self._errors.append(exc)

    def _place_job(self, job: int, ready: dict[int, int]) -> None:
        width = self.instance.num_machines
        for index, op in enumerate(self.instance.jobs[job]):
            with self._machine_locks[op.machine]:
                timeline = self._timelines[op.machine]
                earliest = max(ready.get(job, 0), self._machine_end[op.machine])
                start = timeline.earliest_start(earliest, op.time)
                end = start + op.time
                ready[job] = end
                self._machine_end[op.machine] = end
                timeline.reserve(start, end)
                with self._schedule_lock:
                    self._slots[job * width + index] = ScheduledOperation(
                        job, op.machine, start, end
                    )
                self._log(f"Job {job} - Machine {op.machine} - Start {start} - End {end}")
                self._log(f"Job Availability: {ready[job]}")
                self._log(f"Machine End Time: {self._machine_end[op.machine]}")


def schedule_parallel(
    instance: Instance,
    num_threads: int = 1,
    shared_job_availability: bool = False,
    horizon: int = DEFAULT_HORIZON,
) -> list[ScheduledOperation]:
    """Schedule an instance with the given number of worker threads."""
    return ParallelScheduler(
        instance, num_threads, shared_job_availability, horizon
    ).run()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobshop-parallel",
        description="Schedule a job-shop instance with several threads.",
    )
    parser.add_argument("input", nargs="?", help="instance file name")
    parser.add_argument("output", nargs="?", help="result file name")
    parser.add_argument("num_threads", nargs="?", type=int, help="number of worker threads")
    parser.add_argument("--input-dir", default="../ft", help="directory holding instances")
    parser.add_argument("--output-dir", default="../Resultados", help="directory for results")
    parser.add_argument("--quiet", action="store_true", help="suppress per-thread progress")
    args = parser.parse_args(argv)

    if args.input is None or args.output is None or args.num_threads is None:
        print(f"Usage: {parser.prog} <input_file> <output_file> <num_threads>")
        return 1

    started = time.perf_counter()
    input_path = Path(args.input_dir) / args.input
    print(f"Opening file {input_path}")
    try:
        instance = read_instance(input_path)
    except OSError:
        print("Could not open file")
        return 1
    except InstanceError as exc:
        print(f"Invalid instance: {exc}")
        return 1

    try:
        scheduler = ParallelScheduler(instance, args.num_threads, verbose=not args.quiet)
        schedule = scheduler.run()
    except ValueError as exc:
        print(f"Could not schedule: {exc}")
        return 1
    elapsed = time.perf_counter() - started

    try:
        write_schedule(Path(args.output_dir) / args.output, schedule)
    except OSError:
        print("Could not open or create output file")
        return 1

    print(f"Time taken: {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())