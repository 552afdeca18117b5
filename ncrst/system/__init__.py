"""Snapshot and unit cell representation."""

from .cell import CellShape, UnitCell
from .frame import Frame

__all__ = ["CellShape", "Frame", "UnitCell"]
