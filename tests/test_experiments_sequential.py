import pytest

from jobshop.experiments_sequential import (
    GridError,
    MachineGrid,
    SlotTakenError,
    VerifyResult,
    format_start_table,
    main,
    parse_line_tokens,
    schedule_with_grid,
    verify_solution,
)
from jobshop.model import Instance, InstanceError, Operation, parse_instance
from jobshop.sequential import schedule_sequential

SAMPLE = "3 3\n0 3 1 2 2 2\n0 2 2 1 1 4\n1 4 2 3 0 1\n"


@pytest.fixture
def instance():
    return parse_instance(SAMPLE)


def test_grid_insert_and_occupant():
    grid = MachineGrid()
    grid.insert(2, 5, 3, 7)
    assert grid.occupant(5, 2) == 7
    assert grid.occupant(7, 2) == 7
    assert grid.occupant(8, 2) is None
    assert grid.occupant(4, 2) is None
    assert grid.occupant(5, 1) is None


def test_grid_count_slots():
    grid = MachineGrid()
    grid.insert(0, 0, 4, 1)
    grid.insert(0, 4, 2, 2)
    assert grid.count_slots(0, 4, 1, 0) == 4
    assert grid.count_slots(2, 6, 1, 0) == 2
    assert grid.count_slots(2, 6, 2, 0) == 2
    assert grid.count_slots(0, 10, 3, 0) == 0


def test_grid_insert_conflict_names_first_busy_time():
    grid = MachineGrid()
    grid.insert(1, 3, 4, 0)
    with pytest.raises(SlotTakenError, match="Machine 1 is not available at time 3"):
        grid.insert(1, 1, 5, 2)
    assert grid.occupant(1, 1) is None


def test_grid_rejects_interval_past_horizon():
    grid = MachineGrid(horizon=10)
    with pytest.raises(GridError):
        grid.insert(0, 8, 3, 0)
    grid.insert(0, 7, 3, 0)
    assert grid.occupant(9, 0) == 0


def test_schedule_matches_sequential_list_schedule(instance):
    starts, _, span = schedule_with_grid(instance)
    expected = schedule_sequential(instance)
    flat = [s for row in starts for s in row]
    assert flat == [op.start for op in expected]
    assert span == max(op.end for op in expected)


def test_schedule_grid_records_every_operation(instance):
    starts, grid, _ = schedule_with_grid(instance)
    for job, (ops, row) in enumerate(zip(instance.jobs, starts)):
        for op, start in zip(ops, row):
            assert grid.count_slots(start, start + op.time, job, op.machine) == op.time


def test_schedule_respects_job_order(instance):
    starts, _, _ = schedule_with_grid(instance)
    for ops, row in zip(instance.jobs, starts):
        for k in range(1, len(ops)):
            assert row[k] >= row[k - 1] + ops[k - 1].time


def test_schedule_empty_instance():
    starts, _, span = schedule_with_grid(Instance(()))
    assert starts == []
    assert span == 0


def test_verify_fresh_schedule_is_ok(instance):
    starts, grid, _ = schedule_with_grid(instance)
    assert verify_solution(instance, starts, grid) is VerifyResult.OK


def test_verify_detects_missing(instance):
    starts, grid, _ = schedule_with_grid(instance)
    starts[0][0] += 100
    assert verify_solution(instance, starts, grid) is VerifyResult.MISSING


def test_verify_detects_out_of_order():
    inst = Instance(((Operation(0, 2), Operation(1, 2), Operation(2, 2)),))
    grid = MachineGrid()
    starts = [[0, 5, 2]]
    for op, start in zip(inst.jobs[0], starts[0]):
        grid.insert(op.machine, start, op.time, 0)
    assert verify_solution(inst, starts, grid) is VerifyResult.OUT_OF_ORDER


def test_verify_detects_incomplete():
    inst = Instance(((Operation(0, 2), Operation(1, 2), Operation(2, 2)),))
    grid = MachineGrid()
    grid.insert(0, 0, 2, 0)
    grid.insert(1, 2, 2, 0)
    grid.insert(2, 4, 1, 0)
    assert verify_solution(inst, [[0, 2, 4]], grid) is VerifyResult.INCOMPLETE


def test_parse_line_tokens_round_trip(instance):
    lines = ["3 3"]
    for ops in instance.jobs:
        for op in ops:
            lines += [str(op.machine), str(op.time)]
    assert parse_line_tokens("\n".join(lines) + "\n") == instance


def test_parse_line_tokens_uses_leading_integer_only():
    parsed = parse_line_tokens("1 2\r\n1 9\r\nabc\r\n0\r\n5 extra\r\n")
    assert parsed.jobs == ((Operation(1, 0), Operation(0, 5)),)


def test_parse_line_tokens_too_few_numbers():
    with pytest.raises(InstanceError):
        parse_line_tokens("1 2\n0\n3\n1\n")


def test_parse_line_tokens_missing_header():
    with pytest.raises(InstanceError):
        parse_line_tokens("nothing here")


def test_format_start_table_layout():
    inst = Instance(((Operation(0, 3), Operation(1, 2)),))
    assert format_start_table(inst, [[0, 3]]) == "Job schedule:\nJob 0:  M0-0\t M1-3\t\n"


def test_format_start_table_unassigned_cell():
    inst = Instance(((Operation(0, 3), Operation(1, 2)),))
    assert format_start_table(inst, [[0, None]]) == "Job schedule:\nJob 0:  M0-0\t\t\n"


def test_main_prints_table_and_total(tmp_path, capsys, instance):
    path = tmp_path / "sample.jss"
    path.write_text(SAMPLE)
    out_file = tmp_path / "solution.txt"
    assert main(["--input", str(path), "--output", str(out_file), "--verify"]) == 0
    starts, _, span = schedule_with_grid(instance)
    out = capsys.readouterr().out
    assert out.startswith(format_start_table(instance, starts))
    assert f"Total time for job completion: {span} units of time" in out
    assert "Verification: OK" in out
    lines = out_file.read_text().splitlines()
    assert lines[0] == "3  3"
    assert [[int(v) for v in line.split()] for line in lines[1:]] == starts


def test_main_missing_file(tmp_path, capsys):
    assert main(["--input", str(tmp_path / "absent.jss")]) == 1
    assert capsys.readouterr().out.startswith("fopen:")