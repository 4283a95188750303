"""End-to-end tests: FASTA files through the CLI to written outputs."""

from __future__ import annotations

import re
from io import StringIO
from pathlib import Path

import pytest
from Bio import Phylo
from typer.testing import CliRunner

from phylocluster.cli.main import app
from phylocluster.core.clustering import build_tree
from phylocluster.core.parsers import load_alignment
from tests.factories import AlignmentFactory, species_to_records, write_fasta

runner = CliRunner()

DISTANCE_LINE = re.compile(r"^EvDistance\(([^,]+),([^)]+)\) = (\d+\.\d{2})$")


@pytest.fixture()
def alignment_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "alignments"
    directory.mkdir()
    for seed, n in [(11, 6), (12, 15)]:
        species = AlignmentFactory(seed=seed).create_alignment(n, length=60)
        write_fasta(directory / f"family_{seed}.fasta", species_to_records(species))
    return directory


class TestBatchEndToEnd:
    def test_outputs_are_consistent(self, alignment_dir: Path, tmp_path: Path) -> None:
        list_file = tmp_path / "list.txt"
        list_file.write_text(
            "\n".join(str(p) for p in sorted(alignment_dir.glob("*.fasta"))) + "\n"
        )
        out_dir = tmp_path / "out"

        result = runner.invoke(app, [
            "tree", "batch", str(list_file), str(out_dir), "--no-show-tree",
        ])
        assert result.exit_code == 0, result.output

        for fasta in alignment_dir.glob("*.fasta"):
            species = load_alignment(fasta)
            names = {s.name for s in species}

            newick = (out_dir / f"{fasta.name}.tree").read_text()
            parsed = Phylo.read(StringIO(newick), "newick")
            assert {t.name for t in parsed.get_terminals()} == names

            lines = (out_dir / f"{fasta.name}.distances").read_text().splitlines()
            assert len(lines) == len(names) ** 2

            tree = build_tree(species)
            for line in lines:
                match = DISTANCE_LINE.match(line)
                assert match is not None, line
                a, b, value = match.groups()
                assert float(value) == pytest.approx(tree.evolutionary_distance(a, b), abs=0.005)
                if a == b:
                    assert value == "0.00"
