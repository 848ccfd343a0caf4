"""Board marks, region maps and the constraint vocabulary for region queens."""

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

Cell = Tuple[int, int]
RegionMap = Dict[Cell, int]
Assignment = Dict[Cell, bool]

EXACTLY_ONE = "exactly_one"
AT_MOST_ONE = "at_most_one"
FIXED = "fixed"


class QueensError(ValueError):
    """Base class for caller errors raised by the queens core."""


class InvalidSize(QueensError):
    pass


class OutOfBounds(QueensError, IndexError):
    pass


class DimensionMismatch(QueensError):
    pass


class Mark(str, Enum):
    """What the player has marked on a cell. Values match the front-end strings."""

    UNKNOWN = "empty"
    EXCLUDED = "x"
    OCCUPIED = "queen"

    def cycle(self) -> "Mark":
        return _NEXT_MARK[self]


_NEXT_MARK = {
    Mark.UNKNOWN: Mark.EXCLUDED,
    Mark.EXCLUDED: Mark.OCCUPIED,
    Mark.OCCUPIED: Mark.UNKNOWN,
}

Board = Tuple[Tuple[Mark, ...], ...]


def empty_board(n: int) -> Board:
    if n < 1:
        raise InvalidSize(f"Board size must be at least 1, got {n}")
    return tuple(tuple(Mark.UNKNOWN for _ in range(n)) for _ in range(n))


def coerce_mark(value: Any) -> Mark:
    try:
        return Mark(value)
    except (TypeError, ValueError):
        raise QueensError(f"Unknown cell mark: {value!r}") from None


def board_size(board: Sequence[Sequence[Any]]) -> int:
    """Return n for a square n x n board, raising DimensionMismatch otherwise."""
    n = len(board)
    if n == 0:
        raise InvalidSize("Board must have at least one row")
    for index, row in enumerate(board):
        if len(row) != n:
            raise DimensionMismatch(
                f"Row {index} has {len(row)} cells, expected {n}"
            )
    return n


def freeze_board(board: Sequence[Sequence[Any]]) -> Board:
    board_size(board)
    return tuple(tuple(coerce_mark(value) for value in row) for row in board)


def group_regions(regions: Mapping[Cell, int]) -> Dict[int, List[Cell]]:
    """Group cells by region id; cells are listed in row-major order."""
    groups: Dict[int, List[Cell]] = {}
    for cell in sorted(regions):
        groups.setdefault(regions[cell], []).append(cell)
    return dict(sorted(groups.items()))


def validate_regions(regions: Mapping[Cell, int], n: int) -> None:
    expected = {(r, c) for r in range(n) for c in range(n)}
    actual = set(regions)
    if actual != expected:
        missing = sorted(expected - actual)
        extra = sorted(actual - expected)
        raise DimensionMismatch(
            f"Region map does not match a {n}x{n} board "
            f"(missing={missing[:5]}, unexpected={extra[:5]})"
        )
    for cell, region in regions.items():
        if isinstance(region, bool) or not isinstance(region, int) or region < 0:
            raise DimensionMismatch(f"Invalid region id {region!r} at {cell}")


@lru_cache(maxsize=None)
def adjacent_pairs(n: int) -> Tuple[Tuple[Cell, Cell], ...]:
    """Every unordered pair of king-move neighbours on an n x n board."""
    pairs = []
    for r in range(n):
        for c in range(n):
            for dr, dc in ((0, 1), (1, -1), (1, 0), (1, 1)):
                nr, nc = r + dr, c + dc
                if 0 <= nr < n and 0 <= nc < n:
                    pairs.append(((r, c), (nr, nc)))
    return tuple(pairs)


@dataclass
class Variable:
    name: Cell
    domain: Set[bool] = field(default_factory=lambda: {True, False})


@dataclass
class Constraint:
    """
    One constraint over cell variables.

    `exactly_one` and `at_most_one` cover the structural rules (rows, columns,
    regions, adjacency); `fixed` pins one cell to the value the player marked.
    """

    kind: str
    scope: List[Cell]
    description: str = ""
    value: Optional[bool] = None

    @classmethod
    def exactly_one(cls, cells: Iterable[Cell], label: str = "") -> "Constraint":
        scope = list(cells)
        return cls(kind=EXACTLY_ONE, scope=scope, description=f"ExactlyOne: {label}")

    @classmethod
    def at_most_one(cls, a: Cell, b: Cell) -> "Constraint":
        return cls(kind=AT_MOST_ONE, scope=[a, b], description=f"AtMostOne: {a}, {b}")

    @classmethod
    def fixed(cls, cell: Cell, value: bool) -> "Constraint":
        return cls(kind=FIXED, scope=[cell], description=f"{cell} == {value}", value=value)

    def is_satisfied(self, assignment: Assignment) -> bool:
        """Check against a partial assignment; unassigned cells never fail a check."""
        if self.kind == FIXED:
            cell = self.scope[0]
            return cell not in assignment or assignment[cell] == self.value

        placed = sum(1 for cell in self.scope if assignment.get(cell) is True)
        if placed > 1:
            return False
        if self.kind == EXACTLY_ONE and placed == 0:
            return not all(cell in assignment for cell in self.scope)
        return True


@dataclass
class ConstraintSet:
    size: int
    variables: List[Variable]
    constraints: List[Constraint]
    # Number of exactly-one groups per partitioning family (row/column/region).
    families: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.variable_names: List[Cell] = [v.name for v in self.variables]
        if len(set(self.variable_names)) != len(self.variable_names):
            raise ValueError("Variable names must be unique")

        self.domains: Dict[Cell, Set[bool]] = {
            var.name: set(var.domain) for var in self.variables
        }

        # Constraint indices per variable; the engine queues indices, not objects.
        self.constraints_by_var: Dict[Cell, List[int]] = {
            name: [] for name in self.variable_names
        }
        for index, constraint in enumerate(self.constraints):
            for var in constraint.scope:
                if var not in self.constraints_by_var:
                    raise ValueError(f"Constraint {constraint.description} names unknown cell {var}")
                self.constraints_by_var[var].append(index)

    def constraints_for(self, variable: Cell) -> List[Constraint]:
        return [self.constraints[i] for i in self.constraints_by_var.get(variable, [])]

    def is_consistent(self, assignment: Assignment) -> bool:
        """Check whether every constraint is satisfied under the current partial assignment."""
        for constraint in self.constraints:
            if not constraint.is_satisfied(assignment):
                return False
        return True

    def copy_domains(self, domains: Optional[Dict[Cell, Set[bool]]] = None) -> Dict[Cell, Set[bool]]:
        source = domains if domains is not None else self.domains
        return {var: set(values) for var, values in source.items()}


def build(board: Sequence[Sequence[Any]], regions: Mapping[Cell, int]) -> ConstraintSet:
    """
    Translate a (possibly partial) board and its region map into constraints.

    Raises DimensionMismatch when the board is not square or the region map
    does not cover exactly the board's cells.
    """
    n = board_size(board)
    validate_regions(regions, n)
    marks = freeze_board(board)

    variables = [Variable((r, c)) for r in range(n) for c in range(n)]
    constraints: List[Constraint] = []

    for r in range(n):
        constraints.append(Constraint.exactly_one([(r, c) for c in range(n)], f"row {r}"))
    for c in range(n):
        constraints.append(Constraint.exactly_one([(r, c) for r in range(n)], f"column {c}"))
    groups = group_regions(regions)
    for region, cells in groups.items():
        constraints.append(Constraint.exactly_one(cells, f"region {region}"))

    for a, b in adjacent_pairs(n):
        constraints.append(Constraint.at_most_one(a, b))

    for r in range(n):
        for c in range(n):
            mark = marks[r][c]
            if mark is Mark.OCCUPIED:
                constraints.append(Constraint.fixed((r, c), True))
            elif mark is Mark.EXCLUDED:
                constraints.append(Constraint.fixed((r, c), False))

    return ConstraintSet(
        size=n,
        variables=variables,
        constraints=constraints,
        families={"row": n, "column": n, "region": len(groups)},
    )
