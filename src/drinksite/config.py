from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .dataset import Record
from .index import DatasetIndex


@dataclass
class SiteConfig:
    root: Path
    public_dir: Path
    template_dir: Path
    data_path: Path
    db_path: Path


@dataclass(frozen=True)
class SiteContext:
    """Read-only state built once at startup and shared by every request."""

    cfg: SiteConfig
    records: tuple[Record, ...]
    index: DatasetIndex
    store: Optional[sqlite3.Connection] = None
