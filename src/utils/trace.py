"""Tracing module: logs satisfiability search steps and writes them to CSV."""

import csv
import os
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


# QUEENS_TRACE=0 turns tracing off for new tracers.
TRACE_ENABLED = os.getenv("QUEENS_TRACE", "1") != "0"


@dataclass
class TraceStep:
    """A single step in the search."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'backtrack', 'propagate', 'contradiction', 'solution_found', 'node_limit'
    variable: Optional[str] = None
    value: Optional[Any] = None
    depth: Optional[int] = None
    decided: Optional[int] = None  # Number of cells with a single remaining value
    constraint_checked: Optional[str] = None
    reason: Optional[str] = None


class Tracer:
    """Records search steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, variable: str, value: Any, depth: int, decided: int):
        """Log a branching decision."""
        self._record('assign', variable=variable, value=str(value), depth=depth, decided=decided)

    def log_backtrack(self, variable: str, depth: int, reason: str = "Both values fail"):
        """Log a backtrack event."""
        self._record('backtrack', variable=variable, depth=depth, reason=reason)

    def log_propagation(self, forced: int, constraints_processed: int, decided: int):
        """Log one propagation run to a fixed point."""
        self._record(
            'propagate',
            decided=decided,
            reason=f"Forced {forced} cells, processed {constraints_processed} constraints",
        )

    def log_contradiction(self, constraint_desc: str, variable: Optional[str] = None):
        """Log the constraint that emptied a domain or was violated."""
        self._record('contradiction', constraint_checked=constraint_desc, variable=variable)

    def log_solution_found(self, decided: int):
        """Log when a witness is found."""
        self._record('solution_found', decided=decided)

    def log_node_limit(self, nodes: int):
        """Log that the search gave up after `nodes` nodes."""
        self._record('node_limit', reason=f"Stopped after {nodes} nodes")

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'variable', 'value',
            'depth', 'decided', 'constraint_checked', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_contradictions': action_counts.get('contradiction', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=TRACE_ENABLED)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
