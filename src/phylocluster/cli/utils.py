"""
Shared CLI utilities for phylocluster commands.

Provides common functionality used across CLI modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from phylocluster.core.exceptions import ConfigurationError
from phylocluster.models.config import TreeConfig


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    The spinner is suppressed when quiet mode is enabled.

    Args:
        description: Task description to display.
        console: Rich Console instance. If None and not quiet, creates one.
        quiet: If True, suppress the progress display entirely.

    Yields:
        Progress instance (even when quiet, for API consistency).
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console if not quiet else None,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route library logging through Rich; INFO when verbose, else WARNING."""
    handler = RichHandler(console=console, show_path=False, markup=False)
    root = logging.getLogger("phylocluster")
    root.handlers = [handler]
    root.setLevel(logging.INFO if verbose else logging.WARNING)
    root.propagate = False


def load_config(path: Path | None, **overrides: Any) -> TreeConfig:
    """
    Build a TreeConfig from an optional YAML file plus CLI overrides.

    Overrides whose value is None are ignored.

    Raises:
        ConfigurationError: If the file or an override is invalid.
    """
    try:
        config = TreeConfig.from_yaml(path) if path is not None else TreeConfig()
        updates = {key: value for key, value in overrides.items() if value is not None}
        if updates:
            config = TreeConfig(**{**config.model_dump(), **updates})
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            suggestion="Check the YAML keys and value ranges with 'phylocluster tree config'.",
        ) from e
    return config


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    Wraps a Rich Console instance and conditionally suppresses print
    output when quiet mode is enabled. All other console methods are
    delegated to the wrapped instance.
    """

    def __init__(self, console: Console, quiet: bool = False):
        self._console = console
        self._quiet = quiet

    @property
    def console(self) -> Console:
        """The wrapped Console, for output that ignores quiet mode."""
        return self._console

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console unless quiet mode is enabled."""
        if not self._quiet:
            self._console.print(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._console, name)
