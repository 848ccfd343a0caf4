import json

import pytest

from src.queens.loader import load_puzzles
from src.queens.parser import parse_puzzle


def test_load_json_array(tmp_path):
    path = tmp_path / "puzzles.json"
    path.write_text(json.dumps([{"id": "a", "size": 4}, {"size": 5}, "skip me"]))
    records = load_puzzles(str(path))
    assert [r["id"] for r in records] == ["a", "puzzles.json#1"]


def test_load_json_object(tmp_path):
    path = tmp_path / "one.json"
    path.write_text(json.dumps({"id": "solo", "board": ["Q"]}))
    assert load_puzzles(str(path)) == [{"id": "solo", "board": ["Q"]}]


def test_load_jsonl_skips_blank_and_bad_lines(tmp_path):
    path = tmp_path / "puzzles.jsonl"
    path.write_text('{"id": "x", "size": 4}\n\n{broken\n{"id": "y", "size": 6}\n')
    records = load_puzzles(str(path))
    assert [r["id"] for r in records] == ["x", "y"]


def test_load_json_falls_back_to_lines(tmp_path):
    path = tmp_path / "mislabelled.json"
    path.write_text('{"id": "x", "size": 4}\n{"id": "y", "size": 6}\n')
    assert len(load_puzzles(str(path))) == 2


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_puzzles(str(tmp_path / "nope.json"))


def test_load_parquet_coerces_arrays(tmp_path):
    pytest.importorskip("pyarrow")
    import pandas as pd

    path = tmp_path / "puzzles.parquet"
    pd.DataFrame(
        {
            "id": ["p1"],
            "size": [4],
            "board": [[".Q..", "...Q", "Q...", "..Q."]],
        }
    ).to_parquet(path)

    records = load_puzzles(str(path))
    assert len(records) == 1
    assert records[0]["board"] == [".Q..", "...Q", "Q...", "..Q."]
    board, _ = parse_puzzle(records[0])
    assert len(board) == 4
