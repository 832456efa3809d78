from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import WorkloadFormatError
from .models import ProcessResult

logger = logging.getLogger(__name__)

ProcessTuple = Tuple[int, int, int]


def load_workload(path: str | Path, limit: Optional[int] = None) -> List[ProcessTuple]:
    """
    Load a workload into ``(id, arrival_time, burst_time)`` tuples sorted by
    arrival time.

    ``.json`` and ``.csv`` files use the structured loaders; anything else is
    read as whitespace-separated triplets. ``limit`` caps how many processes
    are read, counting in file order.
    """
    path = Path(path)
    if limit is not None and limit < 0:
        raise WorkloadFormatError(f"Process limit must be non-negative, got {limit}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            processes = _load_json(path)
        elif suffix == ".csv":
            processes = _load_csv(path)
        else:
            processes = _load_triplets(path, limit)
    except UnicodeDecodeError as exc:
        raise WorkloadFormatError(f"{path}: {exc}") from exc

    if limit is not None:
        processes = processes[:limit]

    # sorted() is stable, so equal arrivals keep file order.
    processes = sorted(processes, key=lambda p: p[1])
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_triplets(path: Path, limit: Optional[int]) -> List[ProcessTuple]:
    with path.open("r", encoding="utf-8") as f:
        tokens = f.read().split()

    if len(tokens) % 3 != 0:
        raise WorkloadFormatError(
            f"{path}: expected 'id arrival burst' triplets, found {len(tokens)} values"
        )

    processes: List[ProcessTuple] = []
    for start in range(0, len(tokens), 3):
        if limit is not None and len(processes) >= limit:
            break
        triplet = tokens[start:start + 3]
        try:
            pid, arrival_time, burst_time = (int(token) for token in triplet)
        except ValueError as exc:
            raise WorkloadFormatError(f"{path}: invalid process entry {' '.join(triplet)!r}") from exc
        processes.append((pid, arrival_time, burst_time))

    return processes


def _load_json(path: Path) -> List[ProcessTuple]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadFormatError(f"{path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessTuple]:
    processes: List[ProcessTuple] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> ProcessTuple:
    try:
        raw_id = mapping["id"] if "id" in mapping else mapping["pid"]
        pid = int(raw_id)
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}") from exc

    return (pid, arrival_time, burst_time)


def format_results(results: Iterable[ProcessResult]) -> str:
    """One ``id arrival finish waiting`` line per process, in result order."""
    return "".join("{} {} {} {}\n".format(*r.as_tuple()) for r in results)


def write_results(path: str | Path, results: Iterable[ProcessResult]) -> int:
    results = list(results)
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        f.write(format_results(results))
    logger.info("Wrote %d results to %s", len(results), path)
    return len(results)
