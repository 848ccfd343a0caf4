"""Top-level interface for the region queens core.

Exposes the three operations a front-end needs (`new_puzzle`, `apply_mark`,
`is_solved`) and `check_puzzle(puzzle)`, which accepts either a pre-built
ConstraintSet or a raw puzzle dictionary compatible with
`src.queens.parser.parse_puzzle`.
"""

from typing import Any, Dict, Optional

from src.queens import session, solver_core
from src.queens.model import ConstraintSet, build, empty_board
from src.queens.parser import parse_puzzle
from src.queens.regions import partition

apply_mark = session.apply_mark
is_solved = session.is_solved


def new_puzzle(n: int) -> Dict[str, Any]:
    """Return {"board": n x n empty board, "regions": region map}."""
    regions = partition(n)
    return {"board": empty_board(n), "regions": regions}


def check_puzzle(puzzle: Any, node_limit: Optional[int] = None) -> solver_core.CheckResult:
    """
    Check a puzzle and return the full result (status, witness, nodes).
    Accepts:
      - ConstraintSet instances (used directly)
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    """
    if isinstance(puzzle, ConstraintSet):
        model = puzzle
    elif isinstance(puzzle, dict):
        board, regions = parse_puzzle(puzzle)
        model = build(board, regions)
    else:
        raise TypeError("check_puzzle expects a ConstraintSet or puzzle dictionary")

    return solver_core.check(model, node_limit=node_limit)


__all__ = ["new_puzzle", "apply_mark", "is_solved", "check_puzzle"]
