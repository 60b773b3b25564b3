import pytest

from jobshop.model import parse_instance
from jobshop.sequential import schedule_sequential
from jobshop.task_order import (
    format_machine_report,
    format_performance,
    main,
    schedule_by_task_order,
)

FLOW_SHOP = "3 3\n0 3 1 2 2 2\n0 2 1 5 2 1\n0 4 1 1 2 3\n"


@pytest.fixture
def flow():
    return parse_instance(FLOW_SHOP)


def test_flow_shop_matches_sequential(flow):
    completion = schedule_by_task_order(flow)
    seq = schedule_sequential(flow)
    expected = [[op.end for op in seq if op.job == j] for j in range(flow.num_jobs)]
    assert completion == expected


def test_only_one_operation_per_task_per_job():
    inst = parse_instance("1 2\n1 4 1 2\n")
    assert schedule_by_task_order(inst) == [[0, 2]]


def test_machines_beyond_task_range_stay_unscheduled():
    inst = parse_instance("1 2\n5 3 6 4\n")
    assert schedule_by_task_order(inst) == [[0, 0]]


def test_empty_instance():
    assert schedule_by_task_order(parse_instance("0 0")) == []


def test_machine_report_lists_flow_shop(flow):
    completion = schedule_by_task_order(flow)
    report = format_machine_report(flow, completion)
    assert report.startswith(
        f"Machine 0:\nJob 0, Task 0: Start Time = 0, End Time = {completion[0][0]}\n"
    )
    assert report.count("Machine ") == flow.num_machines
    assert report.count("Job ") == flow.num_jobs * flow.num_machines
    assert (
        f"Job 2, Task 2: Start Time = {completion[2][1]}, End Time = {completion[2][2]}\n"
        in report
    )


def test_performance_header_and_intervals(flow):
    completion = schedule_by_task_order(flow)
    text = format_performance(flow, completion)
    assert text.startswith(f"Optimal Schedule Length: {completion[-1][-1]}\n")
    assert (
        f"Job 1, Task 0: Start Time = {completion[0][0]}, End Time = {completion[1][0]}\n"
        in text
    )


def test_performance_empty_instance():
    inst = parse_instance("0 0")
    assert format_performance(inst, schedule_by_task_order(inst)) == (
        "Optimal Schedule Length: 0\n"
    )


def test_main_writes_execution_time(tmp_path, capsys, flow):
    source = tmp_path / "inst.jss"
    source.write_text(FLOW_SHOP)
    target = tmp_path / "out.txt"
    assert main([str(target), "--input", str(source)]) == 0
    assert target.read_text().startswith("Execution time: ")
    out = capsys.readouterr().out
    completion = schedule_by_task_order(flow)
    assert out.startswith("First print\n")
    assert f"Job 2, Machine 2: Completion Time = {completion[2][2]}" in out
    assert f"Optimal Schedule Length: {completion[-1][-1]}" in out


def test_main_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "out.txt"), "--input", str(tmp_path / "nope.jss")]) == 1
    assert "Error: File not found" in capsys.readouterr().out


def test_main_unwritable_output(tmp_path, capsys):
    source = tmp_path / "inst.jss"
    source.write_text(FLOW_SHOP)
    target = tmp_path / "missing" / "out.txt"
    assert main([str(target), "--input", str(source)]) == 1
    assert "Error: Failed to open output file" in capsys.readouterr().out