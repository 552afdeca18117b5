"""NetCDF-3 container access built on scipy.io.netcdf_file."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.io import netcdf_file

from ..errors import FileError

logger = logging.getLogger(__name__)

# NetCDF-3 64-bit offset format, as written by AMBER
NETCDF_VERSION = 2

# Length of the `label` dimension used for fixed-size strings
STRING_MAXLEN = 10


class FileMode(Enum):
    """Mode a file is opened with."""

    READ = "r"
    WRITE = "w"
    APPEND = "a"

    @classmethod
    def parse(cls, mode: str | FileMode) -> FileMode:
        """Convert a one-letter mode string into a FileMode."""
        if isinstance(mode, FileMode):
            return mode
        try:
            return cls(mode)
        except ValueError:
            raise FileError(
                f"unknown file mode '{mode}', expected 'r', 'w' or 'a'"
            ) from None


class NcMode(Enum):
    """Define mode allows schema changes, data mode allows writing values."""

    DEFINE = "define"
    DATA = "data"


def _decode(value: bytes | str | NDArray) -> str:
    if isinstance(value, bytes):
        return value.decode("ascii")
    if isinstance(value, np.ndarray):
        return b"".join(value.ravel()).decode("ascii")
    return str(value)


class NcVariable:
    """
    Accessor for a single variable of an NcFile.

    Example:
        coordinates = file.variable("coordinates")
        data = coordinates.get([0, 0], [natoms, 3])
    """

    def __init__(self, file: NcFile, name: str) -> None:
        self._file = file
        self.name = name
        self._variable = file._handle.variables[name]

    @property
    def dimensions(self) -> tuple[str, ...]:
        return tuple(self._variable.dimensions)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._variable.shape)

    def _slices(self, start: Sequence[int], count: Sequence[int]) -> tuple[slice, ...]:
        if len(start) != len(self.shape) or len(count) != len(self.shape):
            raise FileError(
                f"variable '{self.name}' has {len(self.shape)} dimensions, "
                f"got start={list(start)} and count={list(count)}"
            )
        return tuple(slice(s, s + n) for s, n in zip(start, count))

    def get(self, start: Sequence[int], count: Sequence[int]) -> NDArray:
        """
        Read a hyperslab of values as a flat array.

        Args:
            start: First index along each dimension.
            count: Number of values along each dimension.

        Returns:
            Flat, row-major copy of the requested values.
        """
        data = self._variable.data[self._slices(start, count)]
        if data.size != int(np.prod(count)):
            raise FileError(
                f"can not read {list(count)} values from variable '{self.name}' "
                f"with shape {list(self.shape)}"
            )
        return np.array(data, dtype=data.dtype.newbyteorder("=")).ravel()

    def add(self, start: Sequence[int], count: Sequence[int], data: ArrayLike) -> None:
        """
        Write a hyperslab of values.

        Args:
            start: First index along each dimension.
            count: Number of values along each dimension.
            data: Values to write, in row-major order.
        """
        self._file._check_mode(NcMode.DATA, f"write to variable '{self.name}'")
        values = np.asarray(data)
        if values.size != int(np.prod(count)):
            raise FileError(
                f"expected {int(np.prod(count))} values for variable '{self.name}', "
                f"got {values.size}"
            )
        self._variable[self._slices(start, count)] = values.reshape(tuple(count))

    def add_strings(self, values: str | Sequence[str]) -> None:
        """Write a string (1-D char variable) or strings padded to the last dimension."""
        self._file._check_mode(NcMode.DATA, f"write to variable '{self.name}'")
        if isinstance(values, str):
            chars = np.array(list(values), dtype="S1")
        else:
            width = self.shape[-1]
            chars = np.zeros((len(values), width), dtype="S1")
            for i, value in enumerate(values):
                if len(value) > width:
                    raise FileError(
                        f"string '{value}' is too long for variable '{self.name}' "
                        f"(max {width} characters)"
                    )
                chars[i, : len(value)] = list(value)
        if chars.shape != self.shape:
            raise FileError(
                f"can not write strings of shape {chars.shape} to variable "
                f"'{self.name}' with shape {self.shape}"
            )
        self._variable[:] = chars

    def strings(self) -> list[str]:
        """Read a char variable as a list of strings (one per row)."""
        data = np.atleast_2d(self._variable.data)
        return [b"".join(row).rstrip(b"\x00").decode("ascii") for row in data]

    def attribute_exists(self, name: str) -> bool:
        return name in self._variable._attributes

    def float_attribute(self, name: str) -> float:
        """Read a numeric attribute as a float."""
        if not self.attribute_exists(name):
            raise FileError(
                f"missing attribute '{name}' on variable '{self.name}' "
                f"in '{self._file.path}'"
            )
        value = np.asarray(self._variable._attributes[name]).ravel()
        if value.size != 1 or value.dtype.kind not in "iuf":
            raise FileError(
                f"attribute '{name}' on variable '{self.name}' is not a number"
            )
        return float(value[0])

    def string_attribute(self, name: str) -> str:
        if not self.attribute_exists(name):
            raise FileError(
                f"missing attribute '{name}' on variable '{self.name}' "
                f"in '{self._file.path}'"
            )
        return _decode(self._variable._attributes[name])

    def add_string_attribute(self, name: str, value: str) -> None:
        self._file._check_mode(NcMode.DEFINE, f"add attribute '{name}'")
        setattr(self._variable, name, value)

    def add_float_attribute(self, name: str, value: float) -> None:
        self._file._check_mode(NcMode.DEFINE, f"add attribute '{name}'")
        setattr(self._variable, name, np.float32(value))


class NcFile:
    """
    Named dimensions, typed variables and attributes stored in a NetCDF file.

    Files opened for reading are loaded without memory mapping, so arrays
    read from them stay valid after the file is closed. Files opened for
    writing start in define mode and are written to disk on close.

    Example:
        with NcFile("water.ncrst", "r") as file:
            natoms = file.dimension("atom")
    """

    def __init__(self, path: str | Path, mode: str | FileMode = "r") -> None:
        """
        Open a NetCDF file.

        Args:
            path: File path.
            mode: 'r' to read, 'w' to create or overwrite, 'a' to append.
        """
        self.path = Path(path)
        self.mode = FileMode.parse(mode)
        try:
            if self.mode is FileMode.READ:
                self._handle = netcdf_file(self.path, "r", mmap=False)
            else:
                self._handle = netcdf_file(
                    self.path, self.mode.value, mmap=False, version=NETCDF_VERSION
                )
        except (OSError, TypeError, ValueError) as e:
            raise FileError(f"could not open the file at '{self.path}': {e}") from e

        self._nc_mode = NcMode.DATA if self.mode is FileMode.READ else NcMode.DEFINE
        self._closed = False
        logger.debug("opened NetCDF file '%s' in mode '%s'", self.path, self.mode.value)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def nc_mode(self) -> NcMode:
        return self._nc_mode

    def set_nc_mode(self, mode: NcMode) -> None:
        """Switch between define mode and data mode."""
        if self.mode is FileMode.READ and mode is NcMode.DEFINE:
            raise FileError(f"can not define new data in read mode file '{self.path}'")
        self._nc_mode = mode

    def _check_mode(self, expected: NcMode, action: str) -> None:
        if self._closed:
            raise FileError(f"can not {action}: file '{self.path}' is closed")
        if self.mode is FileMode.READ:
            raise FileError(f"can not {action}: file '{self.path}' is opened for reading")
        if self._nc_mode is not expected:
            raise FileError(
                f"can not {action} in {self._nc_mode.value} mode, "
                f"switch to {expected.value} mode first"
            )

    # Dimensions

    def dimension(self, name: str) -> int:
        """Get the size of a dimension."""
        size = self.optional_dimension(name, None)
        if size is None:
            raise FileError(f"missing dimension '{name}' in '{self.path}'")
        return size

    def optional_dimension(self, name: str, default: int | None = 0) -> int | None:
        """Get the size of a dimension, or `default` when it does not exist."""
        size = self._handle.dimensions.get(name, default)
        return default if size is None else int(size)

    def add_dimension(self, name: str, size: int) -> None:
        self._check_mode(NcMode.DEFINE, f"add dimension '{name}'")
        if name in self._handle.dimensions:
            raise FileError(f"dimension '{name}' already exists in '{self.path}'")
        # NetCDF-3 reads a zero size as an unlimited dimension
        if int(size) <= 0:
            raise FileError(f"dimension '{name}' must have a positive size, got {size}")
        self._handle.createDimension(name, int(size))

    # Global attributes

    def global_attribute(self, name: str) -> str:
        """Get a global string attribute."""
        value = self.optional_global_attribute(name)
        if value is None:
            raise FileError(f"missing global attribute '{name}' in '{self.path}'")
        return value

    def optional_global_attribute(self, name: str, default: str | None = None) -> str | None:
        if name not in self._handle._attributes:
            return default
        return _decode(self._handle._attributes[name])

    def add_global_attribute(self, name: str, value: str) -> None:
        self._check_mode(NcMode.DEFINE, f"add global attribute '{name}'")
        setattr(self._handle, name, value)

    # Variables

    def variable_exists(self, name: str) -> bool:
        return name in self._handle.variables

    def variable(self, name: str) -> NcVariable:
        """Get an accessor for an existing variable."""
        if not self.variable_exists(name):
            raise FileError(f"missing variable '{name}' in '{self.path}'")
        return NcVariable(self, name)

    def add_variable(self, name: str, typecode: str, *dimensions: str) -> NcVariable:
        """
        Create a new variable.

        Args:
            name: Variable name.
            typecode: NumPy type code, 'd' for double and 'c' for char.
            *dimensions: Names of existing dimensions, slowest varying first.
        """
        self._check_mode(NcMode.DEFINE, f"add variable '{name}'")
        if self.variable_exists(name):
            raise FileError(f"variable '{name}' already exists in '{self.path}'")
        for dimension in dimensions:
            if dimension not in self._handle.dimensions:
                raise FileError(
                    f"can not add variable '{name}': missing dimension '{dimension}'"
                )
        self._handle.createVariable(name, typecode, dimensions)
        return NcVariable(self, name)

    def close(self) -> None:
        """Close the file, writing it to disk in write mode."""
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.close()
        except (OSError, ValueError) as e:
            raise FileError(f"could not write the file at '{self.path}': {e}") from e
        logger.debug("closed NetCDF file '%s'", self.path)

    def __enter__(self) -> NcFile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
