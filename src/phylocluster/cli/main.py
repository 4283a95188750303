"""
Main CLI entry point for phylocluster.

Provides subcommands for building and querying trees:
- tree build: Build trees from FASTA alignments
- tree batch: Build trees for every alignment in a list file
- tree distance: Query the evolutionary distance of two labels
- tree config: Print the default configuration
"""

from __future__ import annotations

import typer
from rich import print as rprint

from phylocluster import __version__

app = typer.Typer(
    name="phylocluster",
    help="Weighted-average-linkage trees from aligned biological sequences",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"phylocluster version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Phylocluster: weighted-average-linkage trees from aligned sequences.

    Infers a strictly binary relationship tree from pairwise sequence
    dissimilarity and reports heights and pairwise evolutionary distances.
    """


# Import subcommands
from phylocluster.cli import tree

# Register subcommands
app.add_typer(tree.app, name="tree")


if __name__ == "__main__":
    app()
