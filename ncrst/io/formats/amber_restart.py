"""AMBER NetCDF restart (.ncrst) format.

A restart file holds a single snapshot following the AMBERRESTART
convention, version 1.0:

    dimensions:  spatial = 3, atom = N, cell_spatial = 3,
                 cell_angular = 3, label = STRING_MAXLEN
    variables:   coordinates(atom, spatial)      units = "angstrom"
                 velocities(atom, spatial)       units = "angstrom/picosecond"
                 cell_lengths(cell_spatial)      units = "angstrom"
                 cell_angles(cell_angular)       units = "degree"

Any double variable may carry a ``scale_factor`` attribute, which is
applied when reading and never written back.

Reference: http://ambermd.org/netcdf/nctraj.xhtml
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ... import __version__
from ...diagnostics import WarningSink, log_warning
from ...errors import FormatError, SchemaConsistencyError
from ...system import UnitCell
from ..base import Compression, Format, FormatInfo
from ..netcdf import STRING_MAXLEN, FileMode, NcFile, NcMode, NcVariable

if TYPE_CHECKING:
    from ...system import Frame

logger = logging.getLogger(__name__)

CONVENTION = "AMBERRESTART"
CONVENTION_VERSION = "1.0"
PROGRAM = "ncrst"

SCALE_FACTOR = "scale_factor"


@dataclass(frozen=True)
class ConventionViolation:
    """
    One condition of the AMBERRESTART convention that a file breaks.

    Attributes:
        name: Name of the offending global attribute or dimension.
        kind: Either "attribute" or "dimension".
        expected: Value required by the convention.
        actual: Value found in the file, None when missing.
    """

    name: str
    kind: str
    expected: str | int
    actual: str | int | None

    @property
    def message(self) -> str:
        if self.actual is None:
            return f"missing {self.kind} '{self.name}', expected {self.expected!r}"
        return (
            f"wrong value for {self.kind} '{self.name}': "
            f"should be {self.expected!r}, is {self.actual!r}"
        )


def check_conventions(
    file: NcFile, natoms: int | None = None
) -> tuple[ConventionViolation, ...]:
    """
    List the convention conditions broken by a file.

    Args:
        file: Opened NetCDF file.
        natoms: Expected size of the atom dimension, or None to skip this check.

    Returns:
        Every violated condition, empty when the file is valid.
    """
    violations = []

    for name, expected in (
        ("Conventions", CONVENTION),
        ("ConventionVersion", CONVENTION_VERSION),
    ):
        actual = file.optional_global_attribute(name)
        if actual != expected:
            violations.append(ConventionViolation(name, "attribute", expected, actual))

    spatial = file.optional_dimension("spatial", None)
    if spatial != 3:
        violations.append(ConventionViolation("spatial", "dimension", 3, spatial))

    if natoms is not None:
        atom = file.optional_dimension("atom", None)
        if atom != natoms:
            violations.append(ConventionViolation("atom", "dimension", natoms, atom))

    return tuple(violations)


def is_valid(
    file: NcFile, natoms: int | None = None, sink: WarningSink | None = None
) -> bool:
    """
    Check that a file follows the AMBERRESTART convention.

    When reading (`natoms` is None) every violation is reported to `sink`.
    When checking a file we just created (`natoms` given) nothing is
    reported: a failure there is a bug, and callers handle it as such.
    """
    violations = check_conventions(file, natoms)
    if natoms is None:
        sink = log_warning if sink is None else sink
        for violation in violations:
            sink(f"Amber Restart reader: {violation.message}")
    return not violations


def _scale_factor(variable: NcVariable) -> float | None:
    if variable.attribute_exists(SCALE_FACTOR):
        return variable.float_attribute(SCALE_FACTOR)
    return None


def read_cell(file: NcFile) -> UnitCell:
    """
    Read the unit cell of a validated file.

    Files without cell variables, or with cell dimensions of the wrong size,
    have no cell and give ``UnitCell()``.
    """
    if not file.variable_exists("cell_lengths") or not file.variable_exists("cell_angles"):
        return UnitCell()

    if (
        file.optional_dimension("cell_spatial", 0) != 3
        or file.optional_dimension("cell_angular", 0) != 3
    ):
        return UnitCell()

    lengths_var = file.variable("cell_lengths")
    angles_var = file.variable("cell_angles")

    lengths = lengths_var.get([0], [3]).astype(np.float64)
    angles = angles_var.get([0], [3]).astype(np.float64)

    # Each variable is scaled on its own
    scale = _scale_factor(lengths_var)
    if scale is not None:
        lengths *= scale
    scale = _scale_factor(angles_var)
    if scale is not None:
        angles *= scale

    return UnitCell(lengths, angles)


def write_cell(file: NcFile, cell: UnitCell) -> None:
    """Write the unit cell, without any scale factor."""
    file.variable("cell_lengths").add([0], [3], [cell.a, cell.b, cell.c])
    file.variable("cell_angles").add([0], [3], [cell.alpha, cell.beta, cell.gamma])


def read_array(file: NcFile, name: str) -> NDArray[np.floating]:
    """
    Read a per-atom array of 3-vectors from a validated file.

    Args:
        file: Opened NetCDF file.
        name: Variable name, "coordinates" or "velocities".

    Returns:
        Array of shape (natoms, 3), with the scale factor applied.
    """
    variable = file.variable(name)
    natoms = file.dimension("atom")

    data = variable.get([0, 0], [natoms, 3]).astype(np.float64)

    scale = _scale_factor(variable)
    if scale is not None:
        data *= scale

    # Values are stored x, y, z for each atom in turn
    return data.reshape(natoms, 3)


def write_array(file: NcFile, name: str, array: ArrayLike) -> None:
    """Write a per-atom array of 3-vectors, without any scale factor."""
    data = np.asarray(array, dtype=np.float64)
    natoms = len(data)
    file.variable(name).add([0, 0], [natoms, 3], data.reshape(natoms * 3))


def initialize(file: NcFile, natoms: int, with_velocities: bool) -> None:
    """Create the schema of an empty file."""
    file.set_nc_mode(NcMode.DEFINE)

    file.add_global_attribute("Conventions", CONVENTION)
    file.add_global_attribute("ConventionVersion", CONVENTION_VERSION)
    file.add_global_attribute("program", PROGRAM)
    file.add_global_attribute("programVersion", __version__)

    file.add_dimension("spatial", 3)
    file.add_dimension("atom", natoms)
    file.add_dimension("cell_spatial", 3)
    file.add_dimension("cell_angular", 3)
    file.add_dimension("label", STRING_MAXLEN)

    spatial = file.add_variable("spatial", "c", "spatial")
    cell_spatial = file.add_variable("cell_spatial", "c", "cell_spatial")
    cell_angular = file.add_variable("cell_angular", "c", "cell_angular", "label")

    coordinates = file.add_variable("coordinates", "d", "atom", "spatial")
    coordinates.add_string_attribute("units", "angstrom")

    cell_lengths = file.add_variable("cell_lengths", "d", "cell_spatial")
    cell_lengths.add_string_attribute("units", "angstrom")

    cell_angles = file.add_variable("cell_angles", "d", "cell_angular")
    cell_angles.add_string_attribute("units", "degree")

    if with_velocities:
        velocities = file.add_variable("velocities", "d", "atom", "spatial")
        velocities.add_string_attribute("units", "angstrom/picosecond")

    file.set_nc_mode(NcMode.DATA)

    spatial.add_strings("xyz")
    cell_spatial.add_strings("abc")
    cell_angular.add_strings(["alpha", "beta", "gamma"])

    logger.debug(
        "created AMBER restart schema for %d atoms in '%s' (velocities: %s)",
        natoms,
        file.path,
        with_velocities,
    )


class RestartState(Enum):
    """Lifecycle of an AmberRestartFormat."""

    VALIDATED_READ = "validated_read"
    UNINITIALIZED_WRITE = "uninitialized_write"
    INITIALIZED = "initialized"
    DONE = "done"


class AmberRestartFormat(Format):
    """
    Reader and writer for AMBER NetCDF restart files.

    A restart file contains exactly one frame: it can be read once from a
    file opened in read mode, or written once to a file opened in write
    mode. The schema of a new file is created on the first write, from
    the number of atoms and presence of velocities in the written frame.

    Example:
        with AmberRestartFormat("restart.ncrst", "w") as fmt:
            fmt.write(frame)

        with AmberRestartFormat("restart.ncrst", "r") as fmt:
            frame = Frame()
            fmt.read(frame)
    """

    info = FormatInfo(
        name="Amber Restart",
        extension=".ncrst",
        description="Amber convention for binary NetCDF Restart files",
        reference="http://ambermd.org/netcdf/nctraj.xhtml",
    )

    def __init__(
        self,
        path: str | Path,
        mode: str | FileMode = "r",
        compression: Compression = Compression.DEFAULT,
        sink: WarningSink | None = None,
    ) -> None:
        """
        Open an AMBER restart file.

        Args:
            path: File path.
            mode: 'r' to read or 'w' to write. Append mode is not supported.
            compression: Must be Compression.DEFAULT.
            sink: Receives warnings about invalid files. Defaults to logging.

        Raises:
            FormatError: If the mode or compression is not supported, or if
                a file opened for reading does not follow the convention.
        """
        super().__init__(path)
        self.mode = FileMode.parse(mode)
        if self.mode is FileMode.APPEND:
            raise FormatError("append mode ('a') is not supported with AMBER Restart format")
        if Compression(compression) is not Compression.DEFAULT:
            raise FormatError("compression is not supported with NetCDF format")

        self._sink = log_warning if sink is None else sink
        self._file = NcFile(self.path, self.mode)

        if self.mode is FileMode.READ:
            if not is_valid(self._file, sink=self._sink):
                self._file.close()
                raise FormatError(f"invalid AMBER Restart file at '{self.path}'")
            self._state = RestartState.VALIDATED_READ
        else:
            self._state = RestartState.UNINITIALIZED_WRITE

    @property
    def state(self) -> RestartState:
        return self._state

    @property
    def validated(self) -> bool:
        """Whether the file is known to follow the convention."""
        return self._state is not RestartState.UNINITIALIZED_WRITE

    @property
    def frame_done(self) -> bool:
        """Whether the single frame of this file was already read or written."""
        return self._state is RestartState.DONE

    def nsteps(self) -> int:
        """A restart file always contains exactly one frame."""
        return 1

    def read(self, frame: Frame) -> None:
        if self.frame_done:
            raise FormatError("AMBER Restart format only supports reading one frame")
        self.read_step(0, frame)

    def read_step(self, step: int, frame: Frame) -> None:
        if step != 0 or self.frame_done:
            raise FormatError("AMBER Restart format only supports reading one frame")
        if self.mode is not FileMode.READ:
            raise FormatError(f"the file at '{self.path}' was not opened in read mode")

        frame.cell = read_cell(self._file)

        frame.resize(self._file.dimension("atom"))
        frame.positions[:] = read_array(self._file, "coordinates")
        if self._file.variable_exists("velocities"):
            frame.add_velocities()
            frame.velocities[:] = read_array(self._file, "velocities")

        self._state = RestartState.DONE
        logger.debug("read %d atoms from '%s'", frame.size, self.path)

    def write(self, frame: Frame) -> None:
        if self.frame_done:
            raise FormatError("AMBER Restart format only supports writing one frame")
        if self.mode is not FileMode.WRITE:
            raise FormatError(f"the file at '{self.path}' was not opened in write mode")

        natoms = frame.size
        if self._state is RestartState.UNINITIALIZED_WRITE:
            initialize(self._file, natoms, frame.velocities is not None)
            violations = check_conventions(self._file, natoms)
            if violations:
                raise SchemaConsistencyError(
                    "newly created AMBER Restart file is invalid: "
                    + "; ".join(v.message for v in violations)
                )
            self._state = RestartState.INITIALIZED

        write_cell(self._file, frame.cell)
        write_array(self._file, "coordinates", frame.positions)
        if frame.velocities is not None:
            write_array(self._file, "velocities", frame.velocities)

        self._state = RestartState.DONE
        logger.debug("wrote %d atoms to '%s'", natoms, self.path)

    def close(self) -> None:
        """Close the file, writing it to disk in write mode."""
        self._file.close()
