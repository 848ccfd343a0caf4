"""Region-constrained queens: constraint model, satisfiability engine and session."""

from .model import (
    Mark,
    Constraint,
    ConstraintSet,
    QueensError,
    InvalidSize,
    OutOfBounds,
    DimensionMismatch,
    build,
)
from .regions import partition
from .solver_core import CheckResult, SearchCancelled, Status, check
from .session import PuzzleSession, apply_mark, is_solved
from .parser import parse_puzzle

__all__ = [
    "Mark",
    "Constraint",
    "ConstraintSet",
    "QueensError",
    "InvalidSize",
    "OutOfBounds",
    "DimensionMismatch",
    "build",
    "partition",
    "CheckResult",
    "SearchCancelled",
    "Status",
    "check",
    "PuzzleSession",
    "apply_mark",
    "is_solved",
    "parse_puzzle",
]
