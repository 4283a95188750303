"""
Tree commands for building and querying phylogenetic trees.

Provides subcommands:
- build: Build trees from one or more FASTA alignments
- batch: Build trees for every alignment named in a list file
- distance: Evolutionary distance between two labels of one alignment
- config: Print the default configuration as YAML
"""
from __future__ import annotations

import math
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from phylocluster.cli.utils import (
    QuietConsole,
    configure_logging,
    load_config,
    spinner_progress,
)
from phylocluster.core.exceptions import PhyloclusterError
from phylocluster.core.io_utils import format_summary
from phylocluster.core.parsers import read_alignment_list
from phylocluster.core.pipeline import (
    AlignmentFailure,
    AlignmentResult,
    BatchResult,
    process_batch,
)
from phylocluster.models.config import TreeConfig

app = typer.Typer(
    name="tree",
    help="Build phylogenetic trees from aligned sequences",
    no_args_is_help=True,
)

console = Console()


def _run_batch(
    alignments: list[Path],
    output_dir: Path,
    config_path: Path | None,
    printing_depth: int | None,
    show_tree: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    configure_logging(verbose, console)
    out = QuietConsole(console, quiet=quiet)

    try:
        config = load_config(config_path, printing_depth=printing_depth)
    except PhyloclusterError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}", soft_wrap=True)
        raise typer.Exit(code=1) from None

    out.print("\n[bold blue]Phylocluster Tree Builder[/bold blue]\n")
    out.print(f"[bold]Alignments:[/bold] {len(alignments)}")
    out.print(f"[bold]Output:[/bold] {output_dir}")

    position = 0

    def report(result: AlignmentResult) -> None:
        nonlocal position
        position += 1
        out.print(f"\n[bold]Tree {position}:[/bold] {escape(result.name)}", soft_wrap=True)
        if show_tree:
            out.print(
                result.tree.to_visual(config.printing_depth),
                markup=False,
                highlight=False,
                soft_wrap=True,
                end="",
            )
        out.print(
            format_summary(result.tree, config.distance_precision),
            markup=False,
            highlight=False,
            end="",
        )

    def report_failure(failure: AlignmentFailure) -> None:
        nonlocal position
        position += 1
        console.print(
            f"\n[red]Error in {escape(str(failure.source))}:[/red] {escape(failure.message)}",
            highlight=False,
            soft_wrap=True,
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    with spinner_progress(f"Building {len(alignments)} tree(s)...", console, quiet):
        batch = process_batch(
            alignments,
            output_dir,
            config,
            on_result=report,
            on_failure=report_failure,
        )

    _print_batch_summary(out, batch)
    if not batch.ok:
        raise typer.Exit(code=1)


def _print_batch_summary(out: QuietConsole, batch: BatchResult) -> None:
    table = Table(title="Batch summary")
    table.add_column("Alignment")
    table.add_column("Species", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Weighted height", justify="right")
    table.add_column("Status")
    for result in batch.results:
        tree = result.tree
        table.add_row(
            result.name,
            str(tree.count_species()),
            str(tree.height()),
            f"{tree.weighted_height():.5f}",
            "[green]ok[/green]",
        )
    for failure in batch.failures:
        table.add_row(failure.source.name, "-", "-", "-", "[red]failed[/red]")
    out.print()
    out.print(table)


@app.command(name="build")
def build(
    alignments: list[Path] = typer.Argument(
        ...,
        help="FASTA alignment file(s)",
        dir_okay=False,
    ),
    output_dir: Path = typer.Option(
        ...,
        "--output-dir",
        "-o",
        help="Directory for .tree and .distances files",
        file_okay=False,
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
    printing_depth: int | None = typer.Option(
        None,
        "--printing-depth",
        "-d",
        help="Indentation width of the deepest node in the printed tree",
        min=0,
    ),
    show_tree: bool = typer.Option(
        True,
        "--show-tree/--no-show-tree",
        help="Print the indented tree for each alignment",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output",
    ),
) -> None:
    """
    Build a tree for each FASTA alignment.

    Writes <alignment>.tree (nested Newick-style form) and
    <alignment>.distances (pairwise evolutionary distances). An alignment
    that fails is reported and skipped; the others are still processed.

    Examples:

        phylocluster tree build primates.fasta -o results/

        phylocluster tree build a.fasta b.fasta -o results/ --printing-depth 60
    """
    _run_batch(alignments, output_dir, config_path, printing_depth, show_tree, quiet, verbose)


@app.command(name="batch")
def batch(
    alignment_list: Path = typer.Argument(
        ...,
        help="Plain-text file naming one FASTA alignment per line",
        exists=True,
        dir_okay=False,
    ),
    output_dir: Path = typer.Argument(
        ...,
        help="Directory for .tree and .distances files",
        file_okay=False,
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
    printing_depth: int | None = typer.Option(
        None,
        "--printing-depth",
        "-d",
        help="Indentation width of the deepest node in the printed tree",
        min=0,
    ),
    show_tree: bool = typer.Option(
        True,
        "--show-tree/--no-show-tree",
        help="Print the indented tree for each alignment",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output",
    ),
) -> None:
    """
    Build trees for every alignment listed in a file.

    Example:

        phylocluster tree batch alignments.txt results/
    """
    alignments = read_alignment_list(alignment_list)
    if not alignments:
        console.print(f"[red]Error:[/red] No alignments listed in {escape(str(alignment_list))}")
        raise typer.Exit(code=1)
    _run_batch(alignments, output_dir, config_path, printing_depth, show_tree, quiet, verbose)


@app.command(name="distance")
def distance(
    alignment: Path = typer.Argument(
        ...,
        help="FASTA alignment file",
        exists=True,
        dir_okay=False,
    ),
    label1: str = typer.Argument(..., help="First node label"),
    label2: str = typer.Argument(..., help="Second node label"),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Print the evolutionary distance and common ancestor of two labels.

    Unknown labels give a distance of inf.
    """
    from phylocluster.core.clustering import build_tree
    from phylocluster.core.parsers import load_alignment

    try:
        config = load_config(config_path)
        tree = build_tree(load_alignment(alignment), config, source=str(alignment))
    except PhyloclusterError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}", soft_wrap=True)
        raise typer.Exit(code=1) from None

    value = tree.evolutionary_distance(label1, label2)
    ancestor = tree.least_common_ancestor(label1, label2)
    shown = "inf" if math.isinf(value) else f"{value:.{config.distance_precision}f}"
    console.print(f"EvDistance({label1},{label2}) = {shown}", markup=False, highlight=False)
    if ancestor is not None:
        console.print(f"Common ancestor: {ancestor.label}", markup=False, highlight=False)


@app.command(name="config")
def show_config() -> None:
    """Print the default configuration as YAML."""
    console.print(TreeConfig().to_yaml_str(), markup=False, highlight=False, end="")
