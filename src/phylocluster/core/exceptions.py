"""
Custom exceptions with actionable guidance.

Provides specific error types for the failure scenarios of tree building,
each with helpful suggestions for resolution. Queries against a built tree
never raise for unknown labels; they return sentinels instead.
"""

from __future__ import annotations


class PhyloclusterError(Exception):
    """Base exception for phylocluster errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class AlignmentError(PhyloclusterError):
    """Base class for alignment input errors."""



class AlignmentMismatchError(AlignmentError):
    """Raised when two sequences compared for distance have unequal length."""

    def __init__(self, name_a: str, length_a: int, name_b: str, length_b: int):
        super().__init__(
            message=(
                f"Sequences are not aligned: '{name_a}' has {length_a} positions, "
                f"'{name_b}' has {length_b}"
            ),
            suggestion=(
                "All sequences in one alignment must have the same length. "
                "Run a multiple sequence aligner (MAFFT, MUSCLE, Clustal Omega) "
                "and pad with gap characters ('-') where needed."
            ),
        )
        self.name_a = name_a
        self.name_b = name_b
        self.length_a = length_a
        self.length_b = length_b


class EmptyAlignmentError(AlignmentError):
    """Raised when an alignment contains no sequences."""

    def __init__(self, source: str):
        super().__init__(
            message=f"Alignment contains no sequences: {source}",
            suggestion=(
                "Check that the file is in FASTA format: each record starts with "
                "a '>' header line followed by one or more sequence lines."
            ),
        )
        self.source = source


class MalformedAlignmentError(AlignmentError):
    """Raised when an alignment file cannot be parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            message=f"Malformed alignment '{source}': {reason}",
            suggestion="Verify the file is plain-text FASTA and was not truncated.",
        )
        self.source = source
        self.reason = reason


class DuplicateSpeciesError(AlignmentError):
    """Raised when two sequences share the same name."""

    def __init__(self, duplicates: list[str]):
        dup_str = ", ".join(duplicates[:5])
        if len(duplicates) > 5:
            dup_str += f"... and {len(duplicates) - 5} more"
        super().__init__(
            message=f"Sequence names must be unique, found duplicates: {dup_str}",
            suggestion=(
                "Rename the duplicated records. Only the last '|'-separated "
                "token of a FASTA header is used as the name."
            ),
        )
        self.duplicates = duplicates


class DistanceMatrixError(PhyloclusterError):
    """Base class for distance matrix errors."""



class InvalidDistanceError(DistanceMatrixError):
    """Raised when a negative or NaN distance is stored."""

    def __init__(self, label1: str, label2: str, value: float):
        super().__init__(
            message=f"Invalid distance {value!r} for pair ({label1}, {label2})",
            suggestion="Distances must be non-negative numbers; NaN is not allowed.",
        )
        self.value = value


class EmptyDistanceMatrixError(DistanceMatrixError):
    """Raised when the minimum entry of an empty matrix is requested."""

    def __init__(self):
        super().__init__(message="Distance matrix has no entries")


class TreeConstructionError(PhyloclusterError):
    """Base class for tree construction errors."""



class LabelCollisionError(TreeConstructionError):
    """Raised when a merged cluster label collides with an existing label."""

    def __init__(self, label: str, separator: str):
        super().__init__(
            message=f"Cluster label '{label}' is already in use",
            suggestion=(
                f"A sequence name contains the label separator '{separator}'. "
                "Rename the sequences or choose a different separator in the "
                "configuration."
            ),
        )
        self.label = label


class TreeAlreadyBuiltError(TreeConstructionError):
    """Raised when a ClusterBuilder is asked to build a second time."""

    def __init__(self):
        super().__init__(
            message="This ClusterBuilder has already produced a tree",
            suggestion="Create a new ClusterBuilder for every tree.",
        )


class ConfigurationError(PhyloclusterError):
    """Raised when configuration is invalid."""
