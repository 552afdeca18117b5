"""Simulation unit cell representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Tolerance (in degrees) when deciding whether an angle is a right angle
ANGLE_TOLERANCE = 1e-5


class CellShape(Enum):
    """Classification of a unit cell."""

    INFINITE = "infinite"
    ORTHORHOMBIC = "orthorhombic"
    TRICLINIC = "triclinic"


def _default_lengths() -> NDArray[np.floating]:
    return np.zeros(3)


def _default_angles() -> NDArray[np.floating]:
    return np.full(3, 90.0)


@dataclass(frozen=True, eq=False)
class UnitCell:
    """
    Unit cell described by three lengths and three angles.

    ``UnitCell()`` is the "no cell known" value: zero lengths with right
    angles, classified as ``CellShape.INFINITE``.

    Attributes:
        lengths: Cell lengths [a, b, c] in angstrom.
        angles: Cell angles [alpha, beta, gamma] in degree.
    """

    lengths: NDArray[np.floating] = field(default_factory=_default_lengths)
    angles: NDArray[np.floating] = field(default_factory=_default_angles)

    def __post_init__(self) -> None:
        """Validate and convert lengths and angles."""
        lengths = np.asarray(self.lengths, dtype=np.float64).reshape(-1)
        angles = np.asarray(self.angles, dtype=np.float64).reshape(-1)
        if lengths.shape != (3,):
            raise ValueError(f"Cell lengths must have shape (3,), got {lengths.shape}")
        if angles.shape != (3,):
            raise ValueError(f"Cell angles must have shape (3,), got {angles.shape}")
        if np.any(lengths < 0):
            raise ValueError(f"Cell lengths must be positive, got {lengths}")
        if np.any(angles <= 0) or np.any(angles >= 180):
            raise ValueError(f"Cell angles must be in (0, 180), got {angles}")

        lengths.flags.writeable = False
        angles.flags.writeable = False
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(self, "lengths", lengths)
        object.__setattr__(self, "angles", angles)

    @classmethod
    def from_parameters(
        cls,
        a: float,
        b: float,
        c: float,
        alpha: float = 90.0,
        beta: float = 90.0,
        gamma: float = 90.0,
    ) -> UnitCell:
        """Create a cell from its six parameters."""
        return cls(np.array([a, b, c]), np.array([alpha, beta, gamma]))

    @classmethod
    def orthorhombic(cls, a: float, b: float, c: float) -> UnitCell:
        """Create an orthorhombic cell with given side lengths."""
        return cls.from_parameters(a, b, c)

    @classmethod
    def cubic(cls, length: float) -> UnitCell:
        """Create a cubic cell with given side length."""
        return cls.orthorhombic(length, length, length)

    @property
    def a(self) -> float:
        return float(self.lengths[0])

    @property
    def b(self) -> float:
        return float(self.lengths[1])

    @property
    def c(self) -> float:
        return float(self.lengths[2])

    @property
    def alpha(self) -> float:
        return float(self.angles[0])

    @property
    def beta(self) -> float:
        return float(self.angles[1])

    @property
    def gamma(self) -> float:
        return float(self.angles[2])

    @property
    def shape(self) -> CellShape:
        """Classify the cell from its lengths and angles."""
        right_angles = bool(np.all(np.abs(self.angles - 90.0) < ANGLE_TOLERANCE))
        if right_angles and np.all(self.lengths == 0):
            return CellShape.INFINITE
        if right_angles:
            return CellShape.ORTHORHOMBIC
        return CellShape.TRICLINIC

    @property
    def matrix(self) -> NDArray[np.floating]:
        """
        Return the cell vectors as rows of a 3x3 matrix.

        The a vector lies along x and the b vector in the xy plane.
        """
        a, b, c = self.lengths
        cos_alpha, cos_beta, cos_gamma = np.cos(np.radians(self.angles))
        sin_gamma = np.sin(np.radians(self.gamma))

        cx = c * cos_beta
        cy = c * (cos_alpha - cos_beta * cos_gamma) / sin_gamma
        cz = np.sqrt(max(c * c - cx * cx - cy * cy, 0.0))
        return np.array(
            [
                [a, 0.0, 0.0],
                [b * cos_gamma, b * sin_gamma, 0.0],
                [cx, cy, cz],
            ]
        )

    @property
    def volume(self) -> float:
        """Return cell volume (zero for an infinite cell)."""
        if self.shape is CellShape.INFINITE:
            return 0.0
        return float(np.abs(np.linalg.det(self.matrix)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitCell):
            return NotImplemented
        return bool(
            np.array_equal(self.lengths, other.lengths)
            and np.array_equal(self.angles, other.angles)
        )

    def __hash__(self) -> int:
        return hash((tuple(self.lengths), tuple(self.angles)))

    def __repr__(self) -> str:
        lengths = ", ".join(f"{v:g}" for v in self.lengths)
        angles = ", ".join(f"{v:g}" for v in self.angles)
        return f"UnitCell(lengths=[{lengths}], angles=[{angles}])"


def as_cell(value: UnitCell | ArrayLike | None) -> UnitCell:
    """Convert None, a UnitCell or three lengths into a UnitCell."""
    if value is None:
        return UnitCell()
    if isinstance(value, UnitCell):
        return value
    return UnitCell(np.asarray(value, dtype=np.float64))
