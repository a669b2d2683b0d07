"""
Field export/import capability shared by curves and linear variables.

The encoding (YAML, JSON, binary, ...) is left to the caller; an entity only
knows how to flatten itself into a dictionary of plain Python values and how
to rebuild itself from one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

import numpy as np

from pycurves.exceptions import SerializationError


class Serializable(ABC):
    """Mixin for entities that can export and import their fields."""

    #: Tag written under ``"type"`` and used by the curve-type registry.
    serialization_tag: str = ""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Export the fields needed to rebuild an identical instance."""

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any], version: Optional[int] = None) -> "Serializable":
        """Rebuild an instance from exported fields.

        Args:
            data: Dictionary produced by ``to_dict``.
            version: Archive version tag, accepted and currently ignored.
        """


def require_fields(data: Dict[str, Any], fields: Iterable[str], tag: str) -> None:
    """Raise SerializationError if any of ``fields`` is missing from ``data``."""
    if not isinstance(data, dict):
        raise SerializationError("exported fields must be a dictionary", type=tag)
    missing = [name for name in fields if name not in data]
    if missing:
        raise SerializationError("missing fields", type=tag, missing=missing)
    found = data.get("type", tag)
    if found != tag:
        raise SerializationError("type tag does not match", expected=tag, found=found)


def matrix_to_list(matrix: np.ndarray) -> list:
    return np.asarray(matrix, dtype=float).tolist()


def list_to_matrix(values: Any, rows: int, cols: int) -> np.ndarray:
    """Rebuild a 2-D float array, keeping the shape of empty matrices."""
    if rows == 0 or cols == 0:
        return np.zeros((rows, cols))
    return np.asarray(values, dtype=float).reshape(rows, cols)
