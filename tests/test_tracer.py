"""Tests for the search tracer."""

from src.utils.trace import enable_tracing, get_tracer, reset_tracer


def test_tracer_captures_steps(tmp_path):
    tracer = get_tracer()

    tracer.log_assign("(0, 0)", True, depth=0, decided=1)
    tracer.log_propagation(forced=6, constraints_processed=20, decided=7)
    tracer.log_contradiction("ExactlyOne: row 2")
    tracer.log_backtrack("(0, 0)", depth=0)
    tracer.log_node_limit(100)
    tracer.log_solution_found(decided=16)

    summary = tracer.summary()
    assert summary["total_steps"] == 6
    assert summary["num_assignments"] == 1
    assert summary["num_backtracks"] == 1
    assert summary["num_contradictions"] == 1
    assert [s.step_number for s in tracer.steps] == list(range(1, 7))

    output_path = tmp_path / "trace" / "steps.csv"
    tracer.to_csv(output_path)
    lines = output_path.read_text().splitlines()
    assert lines[0].startswith("timestamp,step_number,action_type")
    assert len(lines) == 7


def test_disabled_tracer_records_nothing(tmp_path, capsys):
    enable_tracing(False)
    tracer = get_tracer()
    tracer.log_assign("(0, 0)", True, depth=0, decided=1)
    assert tracer.steps == []

    tracer.to_csv(tmp_path / "empty.csv")
    assert "No trace steps" in capsys.readouterr().out
    assert not (tmp_path / "empty.csv").exists()


def test_reset_gives_fresh_tracer():
    first = get_tracer()
    first.log_backtrack("(1, 1)", depth=2)
    reset_tracer()
    assert get_tracer() is not first
    assert get_tracer().steps == []
