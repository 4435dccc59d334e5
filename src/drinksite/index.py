from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .dataset import Record

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class UnknownEntityError(KeyError):
    def __init__(self, slug: str) -> None:
        super().__init__(slug)
        self.slug = slug

    def __str__(self) -> str:
        return f"no data for country {self.slug}"


def slugify(name: str) -> str:
    text = str(name).lower().replace("&", "and")
    return _NON_ALNUM.sub("-", text).strip("-")


@dataclass(frozen=True)
class DatasetIndex:
    slug_to_name: dict[str, str]
    order: tuple[str, ...]
    by_name: dict[str, Record]
    positions: dict[str, int]

    def __len__(self) -> int:
        return len(self.order)

    def resolve(self, slug: str) -> str:
        name = self.slug_to_name.get(slug)
        if name is None:
            raise UnknownEntityError(slug)
        return name

    def record_for(self, name: str) -> Record:
        try:
            return self.by_name[name]
        except KeyError as exc:
            raise UnknownEntityError(slugify(name)) from exc

    def neighbours(self, name: str) -> tuple[str, str]:
        """Return (previous, next) names, wrapping at both ends."""
        if name not in self.positions:
            raise UnknownEntityError(slugify(name))
        idx = self.positions[name]
        count = len(self.order)
        return self.order[(idx - 1) % count], self.order[(idx + 1) % count]


def build_index(records: Iterable[Record]) -> DatasetIndex:
    """Index records that are already in canonical (name-sorted) order.

    Two names that share a slug resolve to whichever was seen last.
    """
    slug_to_name: dict[str, str] = {}
    order: list[str] = []
    by_name: dict[str, Record] = {}
    positions: dict[str, int] = {}
    for record in records:
        slug_to_name[slugify(record.name)] = record.name
        by_name.setdefault(record.name, record)
        positions.setdefault(record.name, len(order))
        order.append(record.name)
    return DatasetIndex(
        slug_to_name=slug_to_name,
        order=tuple(order),
        by_name=by_name,
        positions=positions,
    )
