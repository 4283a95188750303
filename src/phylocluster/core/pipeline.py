"""
Per-alignment processing and batch driving.

For each alignment the pipeline loads the sequences, builds the tree and
writes ``<name>.tree`` (nested form) and ``<name>.distances`` (pairwise
evolutionary distance report) into the output directory. In a batch, a
failing alignment is recorded and skipped; the remaining alignments are
still processed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from phylocluster.core.clustering import build_tree
from phylocluster.core.exceptions import PhyloclusterError
from phylocluster.core.io_utils import (
    format_distance_report,
    write_dataframe,
    write_text,
)
from phylocluster.core.parsers import load_alignment
from phylocluster.core.tree import PhyloTree
from phylocluster.models.config import TreeConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlignmentResult:
    """Outcome of processing one alignment."""

    source: Path
    tree: PhyloTree
    outputs: tuple[Path, ...]

    @property
    def name(self) -> str:
        return self.source.name


@dataclass(frozen=True)
class AlignmentFailure:
    """An alignment that could not be processed, with the reason."""

    source: Path
    error: Exception

    @property
    def message(self) -> str:
        if isinstance(self.error, PhyloclusterError):
            return self.error.message
        return str(self.error)


@dataclass
class BatchResult:
    """Results of a batch run, in input order."""

    results: list[AlignmentResult] = field(default_factory=list)
    failures: list[AlignmentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def process_alignment(
    alignment_path: Path,
    output_dir: Path,
    config: TreeConfig | None = None,
) -> AlignmentResult:
    """
    Build the tree for one alignment and write its output files.

    Args:
        alignment_path: FASTA alignment.
        output_dir: Directory receiving the output files.
        config: Tree configuration; defaults apply when None.

    Returns:
        AlignmentResult with the tree and written paths.

    Raises:
        PhyloclusterError: If the alignment is empty, malformed or unaligned.
        OSError: If the input cannot be read or output cannot be written.
    """
    config = config or TreeConfig()
    alignment_path = Path(alignment_path)
    species = load_alignment(alignment_path)
    tree = build_tree(species, config, source=str(alignment_path))

    tree_path = output_dir / f"{alignment_path.name}.tree"
    distances_path = output_dir / f"{alignment_path.name}.distances"
    write_text(tree_path, tree.to_newick(config.branch_length_precision))
    write_text(distances_path, format_distance_report(tree, config.distance_precision))
    outputs = [tree_path, distances_path]

    if config.write_distance_table:
        table_path = output_dir / f"{alignment_path.name}.distances.{config.distance_table_format}"
        write_dataframe(tree.distance_table(), table_path, config.distance_table_format)
        outputs.append(table_path)

    logger.info("Wrote %d output files for %s", len(outputs), alignment_path)
    return AlignmentResult(source=alignment_path, tree=tree, outputs=tuple(outputs))


def process_batch(
    alignment_paths: Iterable[Path],
    output_dir: Path,
    config: TreeConfig | None = None,
    on_result: Callable[[AlignmentResult], None] | None = None,
    on_failure: Callable[[AlignmentFailure], None] | None = None,
) -> BatchResult:
    """
    Process several alignments, isolating failures to their own input.

    Args:
        alignment_paths: FASTA alignments in processing order.
        output_dir: Directory receiving all output files.
        config: Tree configuration shared by all alignments.
        on_result: Called after each successful alignment.
        on_failure: Called after each failed alignment.

    Returns:
        BatchResult with successes and failures.
    """
    batch = BatchResult()
    for path in alignment_paths:
        path = Path(path)
        try:
            result = process_alignment(path, output_dir, config)
        except (PhyloclusterError, OSError) as e:
            logger.info("Skipping %s: %s", path, e)
            failure = AlignmentFailure(source=path, error=e)
            batch.failures.append(failure)
            if on_failure is not None:
                on_failure(failure)
            continue

        batch.results.append(result)
        if on_result is not None:
            on_result(result)

    logger.info(
        "Batch finished: %d succeeded, %d failed",
        len(batch.results),
        len(batch.failures),
    )
    return batch
