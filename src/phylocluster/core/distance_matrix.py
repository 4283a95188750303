"""
Symmetric sparse distance matrix keyed by unordered label pairs.

Entries exist only for pairs of clusters that are both still live during
clustering. Keys are normalized 2-tuples, so labels may contain any
character.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import NamedTuple

import polars as pl

from phylocluster.core.exceptions import EmptyDistanceMatrixError, InvalidDistanceError


class PairKey(NamedTuple):
    """Unordered pair of cluster labels stored with ``first <= second``."""

    first: str
    second: str

    @classmethod
    def of(cls, label1: str, label2: str) -> PairKey:
        if label2 < label1:
            return cls(label2, label1)
        return cls(label1, label2)

    def other(self, label: str) -> str:
        """Return the label paired with ``label``."""
        if label == self.first:
            return self.second
        if label == self.second:
            return self.first
        msg = f"{label!r} is not part of {self}"
        raise KeyError(msg)


class DistanceMatrix:
    """
    Symmetric key-value store over unordered label pairs.

    ``put("a", "b", x)`` and ``put("b", "a", x)`` address the same entry.
    The minimum query breaks ties on the lexicographically smallest pair so
    clustering is reproducible regardless of insertion order.

    Example:
        >>> m = DistanceMatrix()
        >>> m.put("B", "A", 0.25)
        >>> m.get("A", "B")
        0.25
        >>> m.min_entry()
        (PairKey(first='A', second='B'), 0.25)
    """

    def __init__(self) -> None:
        self._entries: dict[PairKey, float] = {}

    def put(self, label1: str, label2: str, value: float) -> None:
        """Store ``value`` for the pair, replacing any existing entry."""
        value = float(value)
        if math.isnan(value) or value < 0:
            raise InvalidDistanceError(label1, label2, value)
        self._entries[PairKey.of(label1, label2)] = value

    def get(self, label1: str, label2: str, default: float | None = None) -> float | None:
        """Return the stored distance for the pair, or ``default`` if absent."""
        return self._entries.get(PairKey.of(label1, label2), default)

    def remove(self, label1: str, label2: str) -> None:
        """Delete the pair's entry if present."""
        self._entries.pop(PairKey.of(label1, label2), None)

    def min_entry(self) -> tuple[PairKey, float]:
        """
        Return the pair with the smallest distance and that distance.

        Scans all entries (O(m) for m stored pairs).

        Raises:
            EmptyDistanceMatrixError: If the matrix holds no entries.
        """
        if not self._entries:
            raise EmptyDistanceMatrixError
        key = min(self._entries, key=lambda k: (self._entries[k], k))
        return key, self._entries[key]

    def labels(self) -> set[str]:
        """All labels that appear in at least one entry."""
        found: set[str] = set()
        for key in self._entries:
            found.update(key)
        return found

    def items(self) -> Iterator[tuple[PairKey, float]]:
        """Iterate over entries in sorted key order."""
        for key in sorted(self._entries):
            yield key, self._entries[key]

    def to_dataframe(self) -> pl.DataFrame:
        """Entries as a DataFrame with columns label1, label2, distance."""
        rows = list(self.items())
        return pl.DataFrame(
            {
                "label1": [key.first for key, _ in rows],
                "label2": [key.second for key, _ in rows],
                "distance": [value for _, value in rows],
            },
            schema={"label1": pl.Utf8, "label2": pl.Utf8, "distance": pl.Float64},
        )

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return PairKey.of(*pair) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DistanceMatrix({len(self)} entries)"
