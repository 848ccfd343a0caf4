"""Backtracking satisfiability check with exactly-one / at-most-one propagation."""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from threading import Event
from typing import Deque, Dict, Iterable, List, Optional, Set

from . import config
from .model import AT_MOST_ONE, EXACTLY_ONE, FIXED, Assignment, Cell, Constraint, ConstraintSet
from src.utils.trace import Tracer, get_tracer

Domains = Dict[Cell, Set[bool]]


class Status(str, Enum):
    SATISFIABLE = "sat"
    UNSATISFIABLE = "unsat"
    UNKNOWN = "unknown"


class SearchCancelled(Exception):
    """Raised inside a check whose cancel event was set."""


class _NodeLimitReached(Exception):
    pass


@dataclass
class CheckResult:
    status: Status
    witness: List[Cell] = field(default_factory=list)
    nodes: int = 0

    def __bool__(self) -> bool:
        return self.status is Status.SATISFIABLE


class _SearchState:
    def __init__(self, node_limit: int, cancel_event: Optional[Event]):
        self.node_limit = node_limit
        self.cancel_event = cancel_event
        self.nodes = 0

    def visit(self) -> None:
        self.nodes += 1
        if self.node_limit and self.nodes > self.node_limit:
            raise _NodeLimitReached()
        self.check_cancelled()

    def check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise SearchCancelled()


def check(
    model: ConstraintSet,
    node_limit: Optional[int] = None,
    cancel_event: Optional[Event] = None,
    tracer: Optional[Tracer] = None,
) -> CheckResult:
    """
    Decide whether the constraint set has at least one satisfying assignment.

    Returns SATISFIABLE with a witness (the queen cells), UNSATISFIABLE, or
    UNKNOWN when more than `node_limit` search nodes were needed (0 means no
    limit; None uses the configured default). Raises SearchCancelled if
    `cancel_event` gets set while the search runs.
    """
    tracer = tracer or get_tracer()
    limit = config.NODE_LIMIT if node_limit is None else node_limit
    state = _SearchState(limit, cancel_event)
    state.check_cancelled()

    if not _family_counts_agree(model):
        tracer.log_contradiction(f"Group counts differ: {model.families}")
        return CheckResult(Status.UNSATISFIABLE)

    domains = model.copy_domains()
    try:
        if not _enforce_unary_constraints(model, domains, tracer):
            return CheckResult(Status.UNSATISFIABLE, nodes=state.nodes)
        assignment = _backtrack(model, domains, state, tracer)
    except _NodeLimitReached:
        tracer.log_node_limit(limit)
        return CheckResult(Status.UNKNOWN, nodes=limit)

    if assignment is None:
        return CheckResult(Status.UNSATISFIABLE, nodes=state.nodes)
    witness = sorted(cell for cell, value in assignment.items() if value)
    return CheckResult(Status.SATISFIABLE, witness=witness, nodes=state.nodes)


def _family_counts_agree(model: ConstraintSet) -> bool:
    # Each family partitions the board and holds exactly one queen per group,
    # so every family must have the same number of groups.
    counts = {count for count in model.families.values() if count}
    return len(counts) <= 1


def _backtrack(
    model: ConstraintSet,
    domains: Domains,
    state: _SearchState,
    tracer: Tracer,
    depth: int = 0,
    changed: Optional[Iterable[Cell]] = None,
) -> Optional[Assignment]:
    state.visit()
    if not _propagate(model, domains, state, tracer, changed):
        return None

    var = _select_unassigned_variable(model, domains)
    if var is None:
        assignment = {cell: next(iter(values)) for cell, values in domains.items()}
        if model.is_consistent(assignment):
            tracer.log_solution_found(decided=len(assignment))
            return assignment
        return None

    for value in (True, False):
        local_domains = model.copy_domains(domains)
        local_domains[var] = {value}
        tracer.log_assign(
            variable=str(var),
            value=value,
            depth=depth,
            decided=_count_decided(local_domains),
        )
        result = _backtrack(model, local_domains, state, tracer, depth + 1, [var])
        if result is not None:
            return result

    tracer.log_backtrack(str(var), depth)
    return None


def _select_unassigned_variable(model: ConstraintSet, domains: Domains) -> Optional[Cell]:
    undecided = [cell for cell in model.variable_names if len(domains[cell]) > 1]
    if not undecided:
        return None
    open_per_row: Dict[int, int] = {}
    for row, _ in undecided:
        open_per_row[row] = open_per_row.get(row, 0) + 1
    # Fewest open cells in the row, then smallest row, then smallest column.
    return min(undecided, key=lambda cell: (open_per_row[cell[0]], cell[0], cell[1]))


def _count_decided(domains: Domains) -> int:
    return sum(1 for values in domains.values() if len(values) == 1)


def _propagate(
    model: ConstraintSet,
    domains: Domains,
    state: _SearchState,
    tracer: Tracer,
    changed: Optional[Iterable[Cell]] = None,
) -> bool:
    """Apply the propagation rules until nothing changes; False on contradiction."""
    queue: Deque[int] = deque()
    queued: Set[int] = set()
    if changed is None:
        queue.extend(range(len(model.constraints)))
        queued.update(queue)
    else:
        for cell in changed:
            _enqueue(model, cell, queue, queued)

    forced = 0
    processed = 0
    while queue:
        state.check_cancelled()
        index = queue.popleft()
        queued.discard(index)
        processed += 1

        constraint = model.constraints[index]
        revised = _revise(constraint, domains)
        if revised is None:
            tracer.log_contradiction(constraint.description)
            return False
        for cell in revised:
            forced += 1
            _enqueue(model, cell, queue, queued)

    if processed:
        tracer.log_propagation(
            forced=forced,
            constraints_processed=processed,
            decided=_count_decided(domains),
        )
    return True


def _enqueue(model: ConstraintSet, cell: Cell, queue: Deque[int], queued: Set[int]) -> None:
    for index in model.constraints_by_var[cell]:
        if index not in queued:
            queued.add(index)
            queue.append(index)


def _revise(constraint: Constraint, domains: Domains) -> Optional[List[Cell]]:
    """
    Narrow the domains touched by one constraint.

    Returns the cells whose domain shrank, or None when the constraint can no
    longer be satisfied.
    """
    if constraint.kind == FIXED:
        cell = constraint.scope[0]
        if constraint.value not in domains[cell]:
            return None
        if len(domains[cell]) > 1:
            domains[cell] = {constraint.value}
            return [cell]
        return []

    if constraint.kind == AT_MOST_ONE:
        a, b = constraint.scope
        a_placed = domains[a] == {True}
        b_placed = domains[b] == {True}
        if a_placed and b_placed:
            return None
        if a_placed:
            return _exclude(b, domains)
        if b_placed:
            return _exclude(a, domains)
        return []

    if constraint.kind == EXACTLY_ONE:
        placed = [cell for cell in constraint.scope if domains[cell] == {True}]
        open_cells = [cell for cell in constraint.scope if len(domains[cell]) > 1]
        if len(placed) > 1:
            return None
        if placed:
            for cell in open_cells:
                domains[cell] = {False}
            return open_cells
        if not open_cells:
            return None
        if len(open_cells) == 1:
            domains[open_cells[0]] = {True}
            return open_cells
        return []

    raise ValueError(f"Unsupported constraint kind: {constraint.kind}")


def _exclude(cell: Cell, domains: Domains) -> Optional[List[Cell]]:
    if True not in domains[cell]:
        return []
    domains[cell].discard(True)
    if not domains[cell]:
        return None
    return [cell]


def _enforce_unary_constraints(model: ConstraintSet, domains: Domains, tracer: Tracer) -> bool:
    """Pin every marked cell before any search or propagation."""
    for constraint in model.constraints:
        if constraint.kind != FIXED:
            continue
        if _revise(constraint, domains) is None:
            tracer.log_contradiction(constraint.description, variable=str(constraint.scope[0]))
            return False
    return True
