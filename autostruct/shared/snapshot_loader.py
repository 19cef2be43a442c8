"""Catalog snapshot file loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import SchemaError

logger = logging.getLogger(__name__)


def parse_snapshot(content: bytes | str, source: str | None = None) -> dict[str, Any]:
    """Parse snapshot text. JSON snapshots parse as YAML too."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}", source) from e

    if not isinstance(data, dict):
        raise SchemaError("Snapshot root must be a mapping", source)

    return data


def load_snapshot(path: Path) -> dict[str, Any]:
    """Load a catalog snapshot from a YAML or JSON file.

    Raises:
        SchemaError: If the file cannot be read or is not a mapping.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise SchemaError(f"Failed to read snapshot file: {e}", str(path)) from e

    data = parse_snapshot(content, str(path))
    logger.debug("Loaded catalog snapshot %s", path)
    return data
