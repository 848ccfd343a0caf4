import json

import pytest

import run

SOLVED = {"id": "solved", "board": [".Q..", "...Q", "Q...", "..Q."]}
TOUCHING = {"id": "touching", "board": [".Q..", ".Q..", "....", "...."]}


def test_main_single_file_prints_results(tmp_path, capsys):
    path = tmp_path / "puzzles.json"
    path.write_text(json.dumps([SOLVED, TOUCHING]))

    results = run.main([str(path)])

    assert [r["status"] for r in results] == ["sat", "unsat"]
    assert results[0]["solved"] is True
    assert "touching" in capsys.readouterr().out


def test_main_directory_input(tmp_path):
    for i in range(3):
        (tmp_path / f"puzzle{i}.json").write_text(json.dumps({"id": f"p{i}", "size": 4}))
    (tmp_path / "notes.txt").write_text("ignored")

    results = run.main([str(tmp_path)])
    assert [r["id"] for r in results] == ["p0", "p1", "p2"]
    assert all(r["solved"] for r in results)


def test_main_bad_puzzle_does_not_stop_run(tmp_path):
    records = [
        {"id": "bad", "board": ["?"]},
        SOLVED,
        {"id": "bad-row", "board": [5]},
        SOLVED,
        {"id": "bad-regions", "size": 4, "regions": 5},
        SOLVED,
        {"id": "bad-cell", "size": 1, "coloredRegions": {"#FFB3BA": [[0]]}},
        SOLVED,
    ]
    path = tmp_path / "puzzles.jsonl"
    path.write_text("".join(json.dumps(record) + "\n" for record in records))

    results = run.main([str(path)])
    assert len(results) == len(records)
    for bad_id, row in zip(["bad", "bad-row", "bad-regions", "bad-cell"], results[0::2]):
        assert row == {"id": bad_id, "solved": False, "status": "error", "nodes": -1}
    assert all(row["status"] == "sat" for row in results[1::2])


def test_csv_output(tmp_path):
    path = tmp_path / "puzzles.json"
    path.write_text(json.dumps([SOLVED]))
    output_path = tmp_path / "results.csv"

    run.main([str(path), "--output", str(output_path)])

    content = output_path.read_text()
    assert "id,solved,status,nodes" in content
    assert "solved,True,sat," in content


def test_trace_dir_gets_one_file_per_puzzle(tmp_path):
    path = tmp_path / "puzzles.json"
    path.write_text(json.dumps([SOLVED, TOUCHING]))
    trace_dir = tmp_path / "traces"

    run.main([str(path), "--trace-dir", str(trace_dir)])

    assert (trace_dir / "solved.csv").exists()
    assert (trace_dir / "touching.csv").exists()


def test_node_limit_flag(tmp_path):
    path = tmp_path / "big.json"
    path.write_text(json.dumps({"id": "big", "size": 8}))
    results = run.main([str(path), "--node-limit", "1"])
    assert results[0]["status"] == "unknown"


def test_new_prints_fresh_puzzle(capsys):
    run.main(["--new", "5"])
    puzzle = json.loads(capsys.readouterr().out)
    assert puzzle["size"] == 5
    assert puzzle["regions"][4] == [4, 4, 4, 4, 4]
    assert puzzle["board"][0] == ["empty"] * 5
    assert len(puzzle["coloredRegions"]) == 5


def test_new_rejects_sizes_outside_front_end_range():
    with pytest.raises(SystemExit):
        run.main(["--new", "2"])


def test_input_required_without_new():
    with pytest.raises(SystemExit):
        run.main([])
