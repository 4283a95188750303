"""
Parsers for alignment inputs.

Reads FASTA multiple sequence alignments into Species records, and the
plain-text list files that name a batch of alignments.
"""

from __future__ import annotations

import logging
from pathlib import Path

from phylocluster.core.exceptions import EmptyAlignmentError, MalformedAlignmentError
from phylocluster.models.sequence import Species

logger = logging.getLogger(__name__)


class AlignmentParser:
    """
    Parser for FASTA multiple sequence alignments.

    Each record's name is the last '|'-separated field of its header line,
    so NCBI-style headers such as ``>gi|12345|ref|NC_001|Homo_sapiens``
    yield ``Homo_sapiens``. Every character of the sequence is one symbol.

    Length consistency is not checked here; it is enforced when distances
    are computed.
    """

    def __init__(self, alignment_path: Path) -> None:
        """
        Initialize alignment parser.

        Args:
            alignment_path: Path to a FASTA alignment file
        """
        self.alignment_path = Path(alignment_path)
        self._validate_path()

    def _validate_path(self) -> None:
        """Ensure alignment file exists."""
        if not self.alignment_path.exists():
            msg = f"Alignment file not found: {self.alignment_path}"
            raise FileNotFoundError(msg)

    @staticmethod
    def species_name(description: str) -> str:
        """Extract the species name from a FASTA header (without '>')."""
        return description.split("|")[-1].strip()

    def parse(self) -> list[Species]:
        """
        Parse all records of the alignment.

        Returns:
            Species in file order.

        Raises:
            EmptyAlignmentError: If the file holds no records.
            MalformedAlignmentError: If a record cannot be read or has no name.
        """
        from Bio import SeqIO

        source = str(self.alignment_path)
        species: list[Species] = []
        try:
            with self.alignment_path.open() as handle:
                for record in SeqIO.parse(handle, "fasta"):
                    name = self.species_name(record.description)
                    if not name:
                        raise MalformedAlignmentError(
                            source, f"record {len(species) + 1} has an empty name"
                        )
                    species.append(Species.from_string(name, str(record.seq)))
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedAlignmentError(source, str(e)) from e

        if not species:
            raise EmptyAlignmentError(source)

        logger.debug("Parsed %d sequences from %s", len(species), source)
        return species


def load_alignment(path: Path) -> list[Species]:
    """Load the sequences of one FASTA alignment."""
    return AlignmentParser(path).parse()


def read_alignment_list(list_path: Path) -> list[Path]:
    """
    Read a batch list file naming one alignment per whitespace-separated token.

    Relative paths that do not exist from the working directory are resolved
    against the list file's directory.

    Args:
        list_path: Plain-text file of alignment paths.

    Returns:
        Alignment paths in file order.
    """
    list_path = Path(list_path)
    if not list_path.exists():
        msg = f"Alignment list file not found: {list_path}"
        raise FileNotFoundError(msg)

    paths: list[Path] = []
    for token in list_path.read_text().split():
        path = Path(token)
        if not path.is_absolute() and not path.exists():
            candidate = list_path.parent / path
            if candidate.exists():
                path = candidate
        paths.append(path)
    return paths
