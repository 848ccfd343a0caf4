"""Region partitioning and display colours."""

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .model import (
    Cell,
    DimensionMismatch,
    InvalidSize,
    RegionMap,
    group_regions,
    validate_regions,
)

MAX_REGIONS = 8

# Pastel palette, one colour per region id.
REGION_COLORS = [
    "#FFB3BA",
    "#BAFFC9",
    "#BAE1FF",
    "#FFFFBA",
    "#FFB3F7",
    "#B3FFF7",
    "#E8BAF7",
    "#F7E8BA",
]


def region_count(n: int) -> int:
    return min(n, MAX_REGIONS)


def partition(n: int) -> RegionMap:
    """
    Split an n x n board into min(n, 8) regions by walking cells in raster order.

    Each region takes n*n // k consecutive cells; the last one also takes the
    remainder. Regions are not guaranteed to be contiguous.
    """
    if n < 1:
        raise InvalidSize(f"Board size must be at least 1, got {n}")

    k = region_count(n)
    target = (n * n) // k
    regions: RegionMap = {}
    current = 0
    filled = 0
    for r in range(n):
        for c in range(n):
            regions[(r, c)] = current
            filled += 1
            if filled >= target and current < k - 1:
                current += 1
                filled = 0
    return regions


def region_cells(regions: Mapping[Cell, int]) -> Dict[int, List[Cell]]:
    return group_regions(regions)


def color_for(region: int) -> str:
    if region < len(REGION_COLORS):
        return REGION_COLORS[region]
    # Loaded puzzles may carry more regions than the palette has colours.
    return f"region-{region}"


def colored_regions(regions: Mapping[Cell, int]) -> Dict[str, List[Cell]]:
    """Return the {colour: [cells]} view used by display front-ends."""
    colored: Dict[str, List[Cell]] = {}
    for region, cells in group_regions(regions).items():
        colored.setdefault(color_for(region), []).extend(cells)
    return colored


def regions_from_colored(colored: Mapping[str, Iterable[Sequence[int]]], n: int) -> RegionMap:
    """
    Inverse of `colored_regions`.

    Palette colours keep their palette index as region id; any other colour is
    numbered after the palette in the order it appears.
    """
    if not isinstance(colored, Mapping):
        raise DimensionMismatch(f"Coloured regions must map colours to cells, got {type(colored).__name__}")

    ids: Dict[str, int] = {}
    next_id = len(REGION_COLORS)
    for color in colored:
        key = str(color).upper()
        if key in REGION_COLORS:
            ids[color] = REGION_COLORS.index(key)
        else:
            ids[color] = next_id
            next_id += 1

    regions: RegionMap = {}
    for color, cells in colored.items():
        if not isinstance(cells, (list, tuple)):
            raise DimensionMismatch(f"Cells of {color!r} must be a list, got {cells!r}")
        for raw in cells:
            cell = _parse_cell(raw)
            if cell in regions:
                raise DimensionMismatch(f"Cell {cell} belongs to more than one region")
            regions[cell] = ids[color]

    validate_regions(regions, n)
    return regions


def _parse_cell(raw: Any) -> Cell:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise DimensionMismatch(f"A cell is a [row, col] pair, got {raw!r}")
    try:
        return int(raw[0]), int(raw[1])
    except (TypeError, ValueError):
        raise DimensionMismatch(f"Invalid cell coordinates {raw!r}") from None
