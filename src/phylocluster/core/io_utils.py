"""
I/O utilities for tree and distance output.

Provides consistent handling of text reports and tabular output formats
(CSV/Parquet) across the codebase.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import polars as pl

from phylocluster.core.tree import PhyloTree

OutputFormat = Literal["csv", "parquet"]


def write_text(path: Path, text: str) -> None:
    """Write text to a file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def write_dataframe(
    df: pl.DataFrame,
    path: Path,
    output_format: OutputFormat = "csv",
) -> None:
    """
    Write DataFrame to file in specified format.

    For Parquet output, uses zstd compression.

    Args:
        df: Polars DataFrame to write.
        path: Output file path.
        output_format: Output format - 'csv' or 'parquet'.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if output_format == "parquet":
        df.write_parquet(path, compression="zstd")
    else:
        df.write_csv(path)


def read_dataframe(path: Path) -> pl.DataFrame:
    """
    Read DataFrame from file, auto-detecting format from extension.

    Supports: .csv, .tsv, .parquet

    Raises:
        ValueError: If file extension is not recognized.
    """
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pl.read_parquet(path)
    if suffix == ".csv":
        return pl.read_csv(path)
    if suffix == ".tsv":
        return pl.read_csv(path, separator="\t")
    msg = f"Unrecognized file format: {path}"
    raise ValueError(msg)


def format_distance_report(tree: PhyloTree, precision: int = 2) -> str:
    """
    Evolutionary distance of every ordered species pair, one per line.

    Lines read ``EvDistance(a,b) = 0.25`` and follow the tree's species
    order, including each species paired with itself.
    """
    names = [species.name for species in tree.all_species()]
    lines = [
        f"EvDistance({a},{b}) = {tree.evolutionary_distance(a, b):.{precision}f}"
        for a in names
        for b in names
    ]
    return "\n".join(lines) + "\n" if lines else ""


def format_summary(tree: PhyloTree, precision: int = 2) -> str:
    """Species count, height and weighted height as printed after each tree."""
    return (
        f"# species is {tree.count_species()}\n"
        f"Tree height is {tree.height()}\n"
        f"Weighted height is {tree.weighted_height():.{precision}f}\n"
    )
