import json
import os
from typing import Any, Dict, List

import pandas as pd


def _coerce_jsonable(value):
    if isinstance(value, dict):
        return {k: _coerce_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_coerce_jsonable(v) for v in value]
    if hasattr(value, "tolist"):
        return _coerce_jsonable(value.tolist())
    return value


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzle records from a file. Handles .parquet, .json and .jsonl formats.
    Returns a list of raw puzzle dictionaries.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    def _normalize_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
        record = _coerce_jsonable(record)
        # Parquet rows carry every column; drop the ones this row leaves empty.
        record = {k: v for k, v in record.items() if v is not None and not _is_nan(v)}
        record.setdefault("id", f"{os.path.basename(file_path)}#{index}")
        return record

    # Case 1: Parquet File (Binary)
    if file_path.endswith('.parquet'):
        try:
            df = pd.read_parquet(file_path)
        except (ImportError, ValueError, OSError) as e:
            print(f"Error reading parquet: {e}")
            return []
        records = df.to_dict(orient="records")
        return [_normalize_record(r, i) for i, r in enumerate(records)]

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _parse_lines(text.splitlines(), _normalize_record)
        if isinstance(payload, list):
            return [_normalize_record(p, i) for i, p in enumerate(payload) if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [_normalize_record(payload, 0)]
        return []

    # Case 3: JSONL File (Text)
    with open(file_path, 'r', encoding='utf-8') as f:
        return _parse_lines(f, _normalize_record)


def _parse_lines(lines, normalize) -> List[Dict[str, Any]]:
    data = []
    for line in lines:
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            data.append(normalize(obj, len(data)))
    return data


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and value != value
