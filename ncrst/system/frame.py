"""Single simulation snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .cell import UnitCell, as_cell


def _empty_vectors() -> NDArray[np.floating]:
    return np.zeros((0, 3), dtype=np.float64)


@dataclass
class Frame:
    """
    One snapshot of a system: positions, optional velocities and a cell.

    Positions and velocities are index-aligned, one 3-vector per atom.
    Velocities are absent (None) until ``add_velocities`` is called.

    Attributes:
        positions: Atomic positions, shape (N, 3).
        velocities: Atomic velocities, shape (N, 3), or None.
        cell: Unit cell; ``UnitCell()`` when unknown.
        step: Simulation step this frame was taken at.
    """

    positions: NDArray[np.floating] = field(default_factory=_empty_vectors)
    velocities: NDArray[np.floating] | None = None
    cell: UnitCell = field(default_factory=UnitCell)
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        if self.positions.size == 0:
            self.positions = self.positions.reshape(0, 3)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(
                f"positions must have shape (N, 3), got {self.positions.shape}"
            )
        if self.velocities is not None:
            self.velocities = np.asarray(self.velocities, dtype=np.float64)
            if self.velocities.shape != self.positions.shape:
                raise ValueError(
                    f"velocities shape {self.velocities.shape} incompatible with "
                    f"{self.size} atoms"
                )
        self.cell = as_cell(self.cell)

    @classmethod
    def create(
        cls,
        positions: ArrayLike,
        velocities: ArrayLike | None = None,
        cell: UnitCell | ArrayLike | None = None,
        step: int = 0,
    ) -> Frame:
        """
        Create a frame from array-likes.

        Args:
            positions: Atomic positions, shape (N, 3).
            velocities: Atomic velocities, shape (N, 3). Defaults to none.
            cell: UnitCell or three orthorhombic lengths. Defaults to no cell.
            step: Simulation step.

        Returns:
            New Frame instance.
        """
        return cls(positions=positions, velocities=velocities, cell=cell, step=step)

    @property
    def size(self) -> int:
        """Return number of atoms."""
        return len(self.positions)

    def __len__(self) -> int:
        return self.size

    @property
    def has_velocities(self) -> bool:
        return self.velocities is not None

    def resize(self, n_atoms: int) -> None:
        """
        Change the number of atoms.

        Existing data is kept up to ``n_atoms``; new atoms are zero-filled.
        """
        if n_atoms < 0:
            raise ValueError(f"number of atoms must be positive, got {n_atoms}")
        self.positions = _resized(self.positions, n_atoms)
        if self.velocities is not None:
            self.velocities = _resized(self.velocities, n_atoms)

    def add_velocities(self) -> None:
        """Allocate zero velocities if the frame does not have any yet."""
        if self.velocities is None:
            self.velocities = np.zeros_like(self.positions)

    def copy(self) -> Frame:
        """Create a deep copy of this frame."""
        return Frame(
            positions=self.positions.copy(),
            velocities=self.velocities.copy() if self.velocities is not None else None,
            cell=self.cell,  # UnitCell is immutable
            step=self.step,
        )


def _resized(array: NDArray[np.floating], n_atoms: int) -> NDArray[np.floating]:
    resized = np.zeros((n_atoms, 3), dtype=np.float64)
    keep = min(n_atoms, len(array))
    resized[:keep] = array[:keep]
    return resized
