# jobshop

Simple greedy heuristics for the job-shop scheduling problem. The package
reads a problem instance and places every operation of every job on its
machine as early as the heuristic allows. It then reports the resulting
schedule and its makespan, which is the time at which the last operation ends.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Instance format

An instance is a plain-text file of whitespace-separated integers:

- The first two numbers give the number of jobs and the number of machines. Each may be from 0 to 100.
- After them come one `machine time` pair per operation for each job in turn. A job's pairs are in processing order.
- Every job has as many operations as there are machines.
- Machines are numbered from 0 to 99.
- Times must not be negative.

Malformed data raises `jobshop.model.InstanceError`, which is a `ValueError`.

```
3 3
0 3  1 2  2 2
0 2  2 1  1 4
1 4  2 3  0 1
```

## Modules

- `jobshop.model` holds the `Operation`, `ScheduledOperation` and `Instance`
  data classes. It also has these functions:
  - `parse_instance(text)` and `read_instance(path)` load an instance.
  - `makespan(schedule)` gives the makespan of a schedule.
  - `format_schedule(schedule)` formats a schedule as text.
  - `write_schedule(path, schedule, elapsed=None)` writes the schedule, then `The makespan is N`. When `elapsed` is given it adds a `Time taken: ... seconds` line.
- `jobshop.sequential` has `schedule_sequential(instance)`. Jobs are handled in input order. Each operation starts once both its machine and the job's previous operation are free.
- `jobshop.parallel` has `schedule_parallel(instance, num_threads=1, shared_job_availability=False, horizon=1_000_000)` and the `ParallelScheduler` class.
  - Jobs are split into contiguous blocks by `partition_jobs(num_jobs, num_threads)`. Each block is handled by one worker thread.
  - The threads share a `MachineTimeline` per machine.
  - Each operation takes the first free slot on its machine. That slot is no earlier than the end of the job's previous operation, and no earlier than the last end time recorded for the machine.
  - An interval that would reach past the horizon raises `jobshop.parallel.ScheduleError`.
  - With more than one thread the result can depend on how the threads interleave. With one thread it is deterministic.
- `jobshop.experiments_parallel` has two functions:
  - `greedy_finish_times(instance)` records the finish time of every operation. `format_finish_times(instance, finish_times)` formats those times.
  - `schedule_by_total_time(instance)` first runs the jobs in ascending order of total processing time. It then places them again in input order on top of that first pass.
- `jobshop.task_order` has `schedule_by_task_order(instance)`, which returns a completion-time table. An entry of 0 marks an operation that was never scheduled. The table can be shown with `format_machine_report(instance, completion)` and `format_performance(instance, completion)`.
- `jobshop.experiments_sequential` has the following:
  - `schedule_with_grid(instance)` schedules jobs in input order. It records every operation in a `MachineGrid` of machines against time units, with a horizon of 100 000.
  - `verify_solution(instance, starts, grid)` checks a solution against that grid. It returns a `VerifyResult`: `OK`, `OUT_OF_ORDER`, `MISSING` or `INCOMPLETE`.
  - `parse_line_tokens(text)` reads instances that hold one number per line after the header.
  - `format_start_table(instance, starts)` prints the start times.

## Library use

```python
from jobshop.model import parse_instance, makespan, format_schedule
from jobshop.sequential import schedule_sequential
from jobshop.parallel import schedule_parallel

instance = parse_instance("3 3\n0 3 1 2 2 2\n0 2 2 1 1 4\n1 4 2 3 0 1\n")

schedule = schedule_sequential(instance)
print(format_schedule(schedule), end="")
print(makespan(schedule))  # 20

threaded = schedule_parallel(instance, 2, False, 1000)
print(makespan(threaded))
```

The sequential schedule of this instance is:

```
Job 0 - Machine 0 - Start 0 - End 3
Job 0 - Machine 1 - Start 3 - End 5
Job 0 - Machine 2 - Start 5 - End 7
Job 1 - Machine 0 - Start 3 - End 5
Job 1 - Machine 2 - Start 7 - End 8
Job 1 - Machine 1 - Start 8 - End 12
Job 2 - Machine 1 - Start 12 - End 16
Job 2 - Machine 2 - Start 16 - End 19
Job 2 - Machine 0 - Start 19 - End 20
```

## Commands

| Command | Runs |
| --- | --- |
| `jobshop-seq` | the sequential scheduler |
| `jobshop-par` | the multi-threaded scheduler |
| `jobshop-par-experiments` | the greedy finish-time and total-time variants |
| `jobshop-task-order` | the task-order variant |
| `jobshop-seq-experiments` | the occupation-grid variant with optional checking |

### `jobshop-seq`

```
jobshop-seq [input] [output] [--input-dir DIR] [--output-dir DIR]
```

- The input file is looked up in `--input-dir`, which defaults to `../ft`.
- The result is written into `--output-dir`, which defaults to `../Resultados`.
- File names that are left out are asked for on standard input.
- The schedule, the makespan and the processing time taken are written to the file and also printed.

### `jobshop-par`

```
jobshop-par instance.jss schedule.txt 4 [--input-dir DIR] [--output-dir DIR] [--quiet]
```

- The arguments are an input file, an output file and the number of worker threads.
- Directories default as for `jobshop-seq`.
- Per-thread progress is printed unless `--quiet` is given.
- The schedule and its makespan are written to the output file. The wall-clock time taken is printed.

### `jobshop-par-experiments`

```
jobshop-par-experiments [finish-times|total-time] [--input FILE]
```

- `finish-times` is the default. It prints each job's machines with their finish times, then the total completion time.
- `total-time` prints the start of every operation and the makespan.
- `--input` defaults to `../ft/ft03.jss`.

### `jobshop-task-order`

```
jobshop-task-order [output] [--input FILE]
```

- It prints a per-machine report, every completion time and a per-position performance report.
- The execution time is written to the output file. The file name is asked for when it is not given.
- `--input` defaults to `../ft/ft03.jss`.

### `jobshop-seq-experiments`

```
jobshop-seq-experiments [--input FILE] [--line-tokens] [--output FILE] [--verify]
```

- It prints the start-time table, the total completion time and the processing time.
- `--line-tokens` reads the one-number-per-line format.
- `--verify` prints the result of `verify_solution`.
- `--output` writes the start times, with `-1` for an unscheduled operation.
- `--input` defaults to `../ft/ft03.jss`.

## What it does not do

- Every scheduler is a single-pass greedy heuristic. None searches for an optimal or improved schedule, and there is no lower-bound or optimality check.
- The multi-threaded scheduler runs on Python threads. Its purpose is to model shared machine timelines, not to run faster than the sequential one.