from __future__ import annotations

import math
import sqlite3
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .constants import NAME_COLUMN


@dataclass(frozen=True)
class Record:
    name: str
    measures: dict[str, float] = field(default_factory=dict)

    def measure(self, column: str) -> float:
        return self.measures.get(column, math.nan)


def parse_number(raw: str) -> float:
    """Coerce a CSV cell to a float; blank cells are 0 and junk is NaN."""
    text = raw.strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def canonical_sort_key(record: Record) -> tuple[str, str]:
    return (record.name.casefold(), record.name)


def load_records(path: Path, name_column: str = NAME_COLUMN) -> list[Record]:
    """Read a comma-separated file into records sorted by name.

    The first non-empty line is the header. Rows with fewer fields than the
    header are skipped. A missing file yields an empty list so the site can
    still serve its static pages.
    """
    if not path.exists():
        print(f"[drinksite] {path.name} not found; dynamic routes will be limited", file=sys.stderr)
        return []
    try:
        raw = path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        print(f"[drinksite] Could not read {path.name}: {exc}; serving no data", file=sys.stderr)
        return []
    lines = [line for line in raw.splitlines() if line.strip()]
    if not lines:
        return []
    headers = [chunk.strip() for chunk in lines[0].split(",")]
    records: list[Record] = []
    skipped = 0
    for line in lines[1:]:
        cols = line.split(",")
        if len(cols) < len(headers):
            skipped += 1
            continue
        name = ""
        measures: dict[str, float] = {}
        for key, value in zip(headers, cols):
            if key == name_column:
                name = value
            else:
                measures[key] = parse_number(value)
        records.append(Record(name=name, measures=measures))
    records.sort(key=canonical_sort_key)
    note = f" ({skipped} malformed skipped)" if skipped else ""
    print(f"[drinksite] Loaded {len(records)} rows from {path.name}{note}", file=sys.stderr)
    return records


def open_store(path: Path) -> Optional[sqlite3.Connection]:
    """Open the optional SQLite store read-only; None when unavailable."""
    if not path.exists():
        print(f"[drinksite] Database not found, using CSV data only: {path.name}", file=sys.stderr)
        return None
    conn = None
    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error as exc:
        print(f"[drinksite] Error connecting to database: {exc}", file=sys.stderr)
        if conn is not None:
            conn.close()
        return None
    print(f"[drinksite] Connected to database (read-only): {path.name}", file=sys.stderr)
    return conn
