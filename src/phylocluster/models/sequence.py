"""
Data model for aligned sequences.

A Species is a named, immutable sequence of discrete symbols. All species
of one alignment share the same length.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class Species(BaseModel):
    """Named aligned sequence.

    Attributes:
        name: Unique identifier, used as the leaf label in a tree
        symbols: Ordered alignment columns, one token per position
    """

    name: str = Field(min_length=1, description="Unique sequence name")
    symbols: tuple[str, ...] = Field(description="Aligned sequence tokens")

    model_config = {"frozen": True}

    @classmethod
    def from_string(cls, name: str, sequence: str) -> Self:
        """Create a species whose symbols are the characters of a string.

        Example:
            >>> Species.from_string("A", "ACGT").symbols
            ('A', 'C', 'G', 'T')
        """
        return cls(name=name, symbols=tuple(sequence))

    @property
    def sequence(self) -> str:
        """Symbols joined back into a single string."""
        return "".join(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        return self.name
