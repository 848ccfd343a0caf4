"""Shared builders for the test-suite."""

from src.queens.model import Mark

SCENARIO_QUEENS = [(0, 1), (1, 3), (2, 0), (3, 2)]


def board_with(n, queens=(), excluded=(), fill=Mark.UNKNOWN):
    rows = [[fill for _ in range(n)] for _ in range(n)]
    for r, c in excluded:
        rows[r][c] = Mark.EXCLUDED
    for r, c in queens:
        rows[r][c] = Mark.OCCUPIED
    return rows


def assert_valid_witness(witness, n, regions):
    assert len(witness) == n
    assert sorted(r for r, _ in witness) == list(range(n))
    assert sorted(c for _, c in witness) == list(range(n))
    assert len({regions[cell] for cell in witness}) == len(set(regions.values()))
    for i, (r1, c1) in enumerate(witness):
        for r2, c2 in witness[i + 1:]:
            assert max(abs(r1 - r2), abs(c1 - c2)) > 1
