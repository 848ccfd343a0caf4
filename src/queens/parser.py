"""Puzzle parser: convert raw puzzle records into a board and region map.

Supports:
- `board` as rows of mark strings ("empty", "x", "queen") or compact strings
  ("." / "x" / "Q" per cell)
- `regions` as a grid of region ids, or `coloredRegions` as
  {colour: [[row, col], ...]}
- neither, in which case the board is empty and regions come from `partition`
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from .model import (
    Board,
    DimensionMismatch,
    InvalidSize,
    Mark,
    QueensError,
    RegionMap,
    empty_board,
    freeze_board,
)
from .regions import partition, regions_from_colored

_COMPACT_MARKS = {
    ".": Mark.UNKNOWN,
    "-": Mark.UNKNOWN,
    "_": Mark.UNKNOWN,
    "x": Mark.EXCLUDED,
    "X": Mark.EXCLUDED,
    "q": Mark.OCCUPIED,
    "Q": Mark.OCCUPIED,
}


def parse_puzzle(puzzle_json: Dict[str, Any]) -> Tuple[Board, RegionMap]:
    raw_board = puzzle_json.get("board")
    raw_regions = puzzle_json.get("regions")
    raw_colored = puzzle_json.get("coloredRegions")
    if raw_board:
        raw_board = _require_grid(raw_board, "board")
    if raw_regions:
        raw_regions = _require_grid(raw_regions, "regions")

    # 1) Size: explicit, else from the board, else from the region grid
    size = _parse_size(puzzle_json.get("size"))
    if size is None and raw_board:
        size = len(raw_board)
    if size is None and raw_regions:
        size = len(raw_regions)
    if size is None:
        raise QueensError("Puzzle needs a size, a board, or a region grid")
    if size < 1:
        raise InvalidSize(f"Board size must be at least 1, got {size}")

    # 2) Board
    board = _parse_board(raw_board) if raw_board else empty_board(size)
    if len(board) != size:
        raise DimensionMismatch(f"Board has {len(board)} rows but size is {size}")

    # 3) Regions
    if raw_regions:
        regions = _parse_region_grid(raw_regions)
    elif raw_colored:
        regions = regions_from_colored(raw_colored, size)
    else:
        regions = partition(size)

    return board, regions


def _require_grid(value: Any, name: str) -> List[Any]:
    """A grid is a list of rows; each row is a string or a list of cells."""
    if not isinstance(value, (list, tuple)):
        raise DimensionMismatch(f"{name} must be a list of rows, got {type(value).__name__}")
    for index, row in enumerate(value):
        if not isinstance(row, (str, list, tuple)):
            raise DimensionMismatch(f"{name} row {index} is not a row: {row!r}")
    return list(value)


def _parse_size(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    match = re.match(r"\s*(\d+)\s*(?:[*x]\s*\d+)?\s*$", str(value))
    if not match:
        raise QueensError(f"Unrecognised size: {value!r}")
    return int(match.group(1))


def _parse_board(rows: List[Any]) -> Board:
    parsed: List[List[Any]] = []
    for row in rows:
        if isinstance(row, str):
            parsed.append([_parse_compact_mark(ch) for ch in row.strip()])
        else:
            parsed.append(list(row))
    return freeze_board(parsed)


def _parse_compact_mark(ch: str) -> Mark:
    if ch not in _COMPACT_MARKS:
        raise QueensError(f"Unknown board character: {ch!r}")
    return _COMPACT_MARKS[ch]


def _parse_region_grid(rows: List[Any]) -> RegionMap:
    regions: RegionMap = {}
    for r, row in enumerate(rows):
        values = list(row) if not isinstance(row, str) else list(row.strip())
        for c, value in enumerate(values):
            try:
                regions[(r, c)] = int(value)
            except (TypeError, ValueError):
                raise DimensionMismatch(f"Invalid region id {value!r} at {(r, c)}") from None
    return regions
