from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .errors import WorkloadFormatError
from .models import Process

logger = logging.getLogger(__name__)

# Accepted spellings for each field; the first is canonical.
_FIELD_NAMES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadFormatError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadFormatError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping, field_name: str):
    for key in _FIELD_NAMES[field_name]:
        if key in mapping:
            return mapping[key]
    return None


def _as_int(value) -> int:
    # JSON hands over real numbers and booleans; only whole numbers are times.
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _process_from_mapping(mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}")

    pid_val = _lookup(mapping, "pid")
    arrival_val = _lookup(mapping, "arrival_time")
    burst_val = _lookup(mapping, "burst_time")
    try:
        if pid_val in (None, ""):
            raise ValueError("missing pid")
        pid = str(pid_val)
        arrival_time = _as_int(arrival_val)
        burst_time = _as_int(burst_val)
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = _lookup(mapping, "priority")
    try:
        priority = _as_int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid priority in entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
