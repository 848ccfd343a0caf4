"""CLI entrypoint: load puzzle(s), check whether each is still solvable, and report results."""

import argparse
import csv
import json
from pathlib import Path
from typing import Any, Dict, List

from solver import check_puzzle, new_puzzle
from src.queens import config
from src.queens.loader import load_puzzles
from src.queens.model import QueensError
from src.queens.regions import colored_regions
from src.utils.trace import get_tracer, reset_tracer

PUZZLE_SUFFIXES = [".json", ".jsonl", ".parquet"]


def _board_size(value: str) -> int:
    size = int(value)
    if not config.MIN_SIZE <= size <= config.MAX_SIZE:
        raise argparse.ArgumentTypeError(
            f"board size must be between {config.MIN_SIZE} and {config.MAX_SIZE}"
        )
    return size


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Check region queens boards for solvability")
    parser.add_argument("input", type=Path, nargs="?", help="Path to puzzle file or directory of puzzles")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write results CSV")
    parser.add_argument(
        "--node-limit",
        type=int,
        default=None,
        help=f"Give up (status 'unknown') after this many search nodes; 0 = no limit (default {config.NODE_LIMIT})",
    )
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=None,
        help="Write one search trace CSV per puzzle into this directory.",
    )
    parser.add_argument(
        "--new",
        type=_board_size,
        default=None,
        metavar="N",
        help="Print a fresh N x N puzzle as JSON instead of checking input.",
    )
    args = parser.parse_args(argv)
    if args.input is None and args.new is None:
        parser.error("an input path is required unless --new is given")
    return args


def format_new_puzzle(n: int) -> Dict[str, Any]:
    puzzle = new_puzzle(n)
    regions = puzzle["regions"]
    return {
        "size": n,
        "board": [[mark.value for mark in row] for row in puzzle["board"]],
        "regions": [[regions[(r, c)] for c in range(n)] for r in range(n)],
        "coloredRegions": {
            color: [list(cell) for cell in cells]
            for color, cells in colored_regions(regions).items()
        },
    }


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solved", "status", "nodes"])

        for r in results:
            writer.writerow([r["id"], r["solved"], r["status"], r["nodes"]])


def _collect_puzzles(input_path: Path) -> List[Dict[str, Any]]:
    if input_path.is_file():
        return load_puzzles(str(input_path))
    if input_path.is_dir():
        puzzles = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {input_path} is neither file nor directory")


def main(argv=None):
    args = parse_args(argv)

    if args.new is not None:
        print(json.dumps(format_new_puzzle(args.new)))
        return

    results = []
    for puzzle in _collect_puzzles(args.input):
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = puzzle.get("id", "unknown")

        try:
            result = check_puzzle(puzzle, node_limit=args.node_limit)
        except QueensError as e:
            print(f"ERROR: Failed to check puzzle {puzzle_id}: {e}")
            results.append({"id": puzzle_id, "solved": False, "status": "error", "nodes": -1})
            continue

        results.append({
            "id": puzzle_id,
            "solved": bool(result),
            "status": result.status.value,
            "nodes": result.nodes,
        })
        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{puzzle_id}.csv")

    if args.output:
        write_results_csv(results, args.output)
    else:
        print(results)
    return results


if __name__ == "__main__":
    main()
