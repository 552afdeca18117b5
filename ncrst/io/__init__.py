"""I/O layer for restart file handling."""

from .base import Compression, Format, FormatInfo
from .formats import AmberRestartFormat, ConventionViolation, RestartState
from .netcdf import FileMode, NcFile, NcMode, NcVariable
from .registry import FORMATS, find_format, formats_list
from .trajectory import Trajectory

__all__ = [
    # Base classes
    "Format",
    "FormatInfo",
    "Compression",
    # Containers
    "FileMode",
    "NcFile",
    "NcMode",
    "NcVariable",
    # Formats
    "AmberRestartFormat",
    "ConventionViolation",
    "RestartState",
    # Registry
    "FORMATS",
    "find_format",
    "formats_list",
    "Trajectory",
]
