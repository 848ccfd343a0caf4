"""Puzzle session: owns one board and region map and answers 'still solvable?'."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Mapping, Optional, Sequence, Tuple

from . import config
from .model import Board, Cell, OutOfBounds, RegionMap, build, empty_board, freeze_board
from .regions import partition
from .solver_core import check
from src.utils.trace import Tracer

SOLVED_MESSAGE = "Congratulations! You solved the puzzle!"


def apply_mark(board: Sequence[Sequence[Any]], row: int, col: int) -> Board:
    """Return a copy of `board` with (row, col) cycled empty -> x -> queen -> empty."""
    marks = freeze_board(board)
    n = len(marks)
    if not (0 <= row < n and 0 <= col < n):
        raise OutOfBounds(f"Cell ({row}, {col}) is outside a {n}x{n} board")
    updated = list(marks)
    cells = list(updated[row])
    cells[col] = cells[col].cycle()
    updated[row] = tuple(cells)
    return tuple(updated)


def is_solved(
    board: Sequence[Sequence[Any]],
    regions: Mapping[Cell, int],
    node_limit: Optional[int] = None,
    tracer: Optional[Tracer] = None,
) -> bool:
    """True when the current marks still extend to a full valid placement."""
    return bool(check(build(board, regions), node_limit=node_limit, tracer=tracer))


class PuzzleSession:
    """
    Holds the board and regions of the game in progress.

    Marks are applied one at a time under a lock. Checks submitted with
    `submit_check` run on a background worker against a snapshot; applying a
    new mark or starting a new puzzle cancels the outstanding check, whose
    future then raises SearchCancelled.

    Each check records into its own Tracer (disabled unless `trace` is set);
    only the most recent one is kept, as `last_trace`.
    """

    def __init__(
        self,
        size: int = config.DEFAULT_SIZE,
        node_limit: Optional[int] = None,
        trace: bool = False,
    ):
        self.node_limit = node_limit
        self.trace = trace
        self.last_trace: Optional[Tracer] = None
        self._lock = threading.Lock()
        self._pending: Optional[threading.Event] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="queens-check")
        self.board: Board = ()
        self.regions: RegionMap = {}
        self.new_puzzle(size)

    @property
    def size(self) -> int:
        return len(self.board)

    def new_puzzle(self, n: int) -> Tuple[Board, RegionMap]:
        regions = partition(n)
        board = empty_board(n)
        with self._lock:
            self._cancel_pending()
            self.board = board
            self.regions = regions
        return board, dict(regions)

    def apply_mark(self, row: int, col: int) -> Board:
        with self._lock:
            board = apply_mark(self.board, row, col)
            self._cancel_pending()
            self.board = board
        return board

    def is_solved(
        self,
        board: Optional[Sequence[Sequence[Any]]] = None,
        regions: Optional[Mapping[Cell, int]] = None,
    ) -> bool:
        with self._lock:
            if board is None:
                board = self.board
            if regions is None:
                regions = dict(self.regions)
        return is_solved(board, regions, node_limit=self.node_limit, tracer=self._new_tracer())

    def submit_check(self) -> "Future[bool]":
        with self._lock:
            self._cancel_pending()
            event = threading.Event()
            self._pending = event
            board, regions = self.board, dict(self.regions)
        return self._executor.submit(self._run_check, board, regions, event)

    def _run_check(self, board: Board, regions: RegionMap, event: threading.Event) -> bool:
        result = check(
            build(board, regions),
            node_limit=self.node_limit,
            cancel_event=event,
            tracer=self._new_tracer(),
        )
        return bool(result)

    def _new_tracer(self) -> Tracer:
        tracer = Tracer(enabled=self.trace)
        self.last_trace = tracer
        return tracer

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.set()
            self._pending = None

    def message(self) -> str:
        return SOLVED_MESSAGE if self.is_solved() else ""

    def close(self) -> None:
        with self._lock:
            self._cancel_pending()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "PuzzleSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
