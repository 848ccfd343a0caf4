from src.queens.model import DimensionMismatch, InvalidSize, Mark, QueensError
from src.queens.parser import parse_puzzle
from src.queens.regions import colored_regions, partition

import pytest


def test_parse_compact_board_infers_size():
    board, regions = parse_puzzle({"board": [".Q..", "xxxQ", "Q...", "..Q."]})
    assert len(board) == 4
    assert board[0][1] is Mark.OCCUPIED
    assert board[1][0] is Mark.EXCLUDED
    assert board[0][0] is Mark.UNKNOWN
    assert regions == partition(4)


def test_parse_size_string_gives_empty_board():
    board, regions = parse_puzzle({"size": "5*5"})
    assert len(board) == 5
    assert all(mark is Mark.UNKNOWN for row in board for mark in row)
    assert regions == partition(5)


def test_parse_region_grid_and_mark_names():
    record = {
        "board": [["queen", "x"], ["empty", "empty"]],
        "regions": [[0, 0], [1, 1]],
    }
    board, regions = parse_puzzle(record)
    assert board[0] == (Mark.OCCUPIED, Mark.EXCLUDED)
    assert regions == {(0, 0): 0, (0, 1): 0, (1, 0): 1, (1, 1): 1}


def test_parse_colored_regions():
    colored = {
        color: [[r, c] for r, c in cells]
        for color, cells in colored_regions(partition(6)).items()
    }
    _, regions = parse_puzzle({"size": 6, "coloredRegions": colored})
    assert regions == partition(6)


def test_parse_rejects_bad_input():
    with pytest.raises(QueensError):
        parse_puzzle({})
    with pytest.raises(QueensError):
        parse_puzzle({"board": ["Z."]})
    with pytest.raises(InvalidSize):
        parse_puzzle({"size": 0})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 3, "board": ["..", ".."]})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 2, "regions": [["a", 0], [1, 1]]})


def test_parse_rejects_malformed_shapes():
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"board": [5]})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"board": "...."})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 4, "regions": 5})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 2, "regions": [0, 1]})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 1, "coloredRegions": {"#FFB3BA": [[0]]}})
    with pytest.raises(DimensionMismatch):
        parse_puzzle({"size": 1, "coloredRegions": [[0, 0]]})


def test_parse_rejects_non_string_marks():
    with pytest.raises(QueensError):
        parse_puzzle({"board": [[None]]})
    with pytest.raises(QueensError):
        parse_puzzle({"board": [[["queen"]]]})
