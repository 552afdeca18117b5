"""High-level file access dispatching to the registered formats."""

from __future__ import annotations

import logging
from pathlib import Path

from ..diagnostics import WarningSink
from ..errors import FileError
from ..system import Frame
from .base import Compression, Format
from .netcdf import FileMode
from .registry import find_format

logger = logging.getLogger(__name__)


class Trajectory:
    """
    File containing one or more frames, in any registered format.

    Example:
        with Trajectory("water.ncrst") as trajectory:
            frame = trajectory.read()

        with Trajectory("copy.ncrst", "w") as trajectory:
            trajectory.write(frame)
    """

    def __init__(
        self,
        path: str | Path,
        mode: str = "r",
        format: str | None = None,
        compression: Compression = Compression.DEFAULT,
        sink: WarningSink | None = None,
    ) -> None:
        """
        Open a trajectory.

        Args:
            path: File path.
            mode: 'r', 'w' or 'a'.
            format: Format name, guessed from the extension when None.
            compression: Compression of the file.
            sink: Receives warnings from the format. Defaults to logging.
        """
        self.path = Path(path)
        self.mode = FileMode.parse(mode)
        format_class = find_format(self.path, format)
        logger.debug("opening '%s' with %s format", self.path, format_class.info.name)
        self._format: Format | None = format_class(
            self.path, self.mode, compression=compression, sink=sink
        )

    @property
    def closed(self) -> bool:
        return self._format is None

    def _checked_format(self) -> Format:
        if self._format is None:
            raise FileError(f"can not use the closed trajectory at '{self.path}'")
        return self._format

    @property
    def nsteps(self) -> int:
        """Number of frames in the trajectory."""
        return self._checked_format().nsteps()

    def read(self) -> Frame:
        """Read the next frame."""
        frame = Frame()
        self._checked_format().read(frame)
        return frame

    def read_step(self, step: int) -> Frame:
        """Read the frame at `step`."""
        frame = Frame()
        self._checked_format().read_step(step, frame)
        frame.step = step
        return frame

    def write(self, frame: Frame) -> None:
        """Write a frame."""
        self._checked_format().write(frame)

    def close(self) -> None:
        """Close the trajectory, flushing written data to disk."""
        if self._format is not None:
            self._format.close()
            self._format = None

    def __enter__(self) -> Trajectory:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
