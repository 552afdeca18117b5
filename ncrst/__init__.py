"""
ncrst - Reader and writer for AMBER NetCDF restart files.

An AMBER restart (``.ncrst``) file is a NetCDF container following the
``AMBERRESTART`` convention, version 1.0. It stores exactly one snapshot:
atomic positions, optional velocities and an optional unit cell.

Quick Start:
    >>> from ncrst import Trajectory
    >>> with Trajectory("water.ncrst") as trajectory:
    ...     frame = trajectory.read()
    >>> print(frame.size, frame.cell.shape)
"""

__version__ = "0.1.0"

from .errors import FileError, FormatError, NcrstError, SchemaConsistencyError
from .io import AmberRestartFormat, Trajectory, formats_list
from .system import CellShape, Frame, UnitCell


def version() -> str:
    """Return the version of the ncrst package."""
    return __version__


__all__ = [
    "version",
    "Trajectory",
    "AmberRestartFormat",
    "formats_list",
    "Frame",
    "UnitCell",
    "CellShape",
    "NcrstError",
    "FormatError",
    "FileError",
    "SchemaConsistencyError",
]
