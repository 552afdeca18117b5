"""Base classes for snapshot file formats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from ..errors import FormatError

if TYPE_CHECKING:
    from ..system import Frame


class Compression(Enum):
    """Compression method requested when opening a file."""

    DEFAULT = "default"
    GZIP = "gzip"
    BZIP2 = "bzip2"
    LZMA = "lzma"


@dataclass(frozen=True)
class FormatInfo:
    """
    Metadata describing a format.

    Attributes:
        name: Format name, usable to select the format explicitly.
        extension: File extension (with leading dot) associated with the format.
        description: One-line human readable description.
        reference: URL of the format documentation.
    """

    name: str
    extension: str | None = None
    description: str = ""
    reference: str = ""


class Format(ABC):
    """
    Abstract base class for file formats.

    A format owns the underlying file for its whole lifetime. Subclasses
    override the operations they support; the others fail with FormatError.

    Example:
        with AmberRestartFormat("water.ncrst", "r") as fmt:
            frame = Frame()
            fmt.read(frame)
    """

    info: ClassVar[FormatInfo]

    def __init__(self, path: str | Path) -> None:
        """
        Initialize format.

        Args:
            path: File path.
        """
        self.path = Path(path)

    def read(self, frame: Frame) -> None:
        """Read the next frame into `frame`."""
        raise FormatError(f"{self.info.name} format does not support reading")

    def read_step(self, step: int, frame: Frame) -> None:
        """Read the frame at `step` into `frame`."""
        raise FormatError(f"{self.info.name} format does not support reading")

    def write(self, frame: Frame) -> None:
        """Write `frame` to the file."""
        raise FormatError(f"{self.info.name} format does not support writing")

    @abstractmethod
    def nsteps(self) -> int:
        """Return number of frames in the file."""
        ...

    def close(self) -> None:
        """Close file (optional, format-dependent)."""
        pass

    def __enter__(self) -> Format:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
