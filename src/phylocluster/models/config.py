"""
Pydantic configuration model for phylocluster.

Defines the settings that control label construction, rendering precision
and output files. Configuration can be loaded from YAML files or built from
CLI arguments.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Self

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_PRINTING_DEPTH = 100


class TreeConfig(BaseModel):
    """
    Configuration for tree construction and output.

    Attributes:
        separator: Joins the two child labels into a merged cluster label
        printing_depth: Number of indentation characters for the deepest
            node in the visual rendering
        branch_length_precision: Decimals for branch lengths in Newick output
        distance_precision: Decimals for the pairwise distance report
        write_distance_table: Also write a tabular distance file per alignment
        distance_table_format: Format of that table ('csv' or 'parquet')
    """

    separator: str = Field(
        default="+",
        min_length=1,
        description="Separator placed between child labels of a merged cluster",
    )
    printing_depth: int = Field(
        default=DEFAULT_PRINTING_DEPTH,
        ge=0,
        description="Indentation width for the deepest node in the visual tree",
    )
    branch_length_precision: int = Field(
        default=5,
        ge=0,
        le=12,
        description="Decimal places for branch lengths in nested output",
    )
    distance_precision: int = Field(
        default=2,
        ge=0,
        le=12,
        description="Decimal places in the evolutionary distance report",
    )
    write_distance_table: bool = Field(
        default=False,
        description="Write an additional tabular distance file per alignment",
    )
    distance_table_format: Literal["csv", "parquet"] = Field(
        default="csv",
        description="Output format for the tabular distance file",
    )

    @field_validator("separator")
    @classmethod
    def separator_is_printable(cls, value: str) -> str:
        """Separators with whitespace or Newick syntax characters break output."""
        forbidden = set(" \t\n(),:;")
        if forbidden & set(value):
            msg = f"Separator {value!r} contains whitespace or Newick syntax characters"
            raise ValueError(msg)
        return value

    @classmethod
    def from_yaml(cls, path: Path) -> Self:
        """
        Load configuration from a YAML file.

        Unknown keys are ignored with a warning (forward compatibility).

        Args:
            path: Path to YAML configuration file.

        Returns:
            TreeConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ValueError: If YAML is not a mapping or contains invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)

        known = {key: value for key, value in raw.items() if key in cls.model_fields}
        unknown = sorted(set(raw) - set(known))
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
        return cls(**known)

    def to_yaml(self, path: Path) -> None:
        """Write configuration to a YAML file."""
        path.write_text(self.to_yaml_str())

    def to_yaml_str(self) -> str:
        """Serialize configuration to a YAML string."""
        import yaml

        data: dict[str, Any] = self.model_dump()
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    model_config = {"frozen": True}
