"""Tests for the NetCDF container layer."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from ncrst.errors import FileError
from ncrst.io.netcdf import STRING_MAXLEN, FileMode, NcFile, NcMode


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_file(temp_dir):
    """Write a small NetCDF file with one variable of each kind."""
    path = temp_dir / "sample.nc"
    with NcFile(path, "w") as file:
        file.add_global_attribute("title", "sample")
        file.add_dimension("atom", 2)
        file.add_dimension("spatial", 3)
        file.add_dimension("label", STRING_MAXLEN)
        file.add_dimension("names", 2)

        values = file.add_variable("values", "d", "atom", "spatial")
        values.add_string_attribute("units", "angstrom")
        values.add_float_attribute("scale_factor", 0.5)
        spatial = file.add_variable("spatial", "c", "spatial")
        names = file.add_variable("names", "c", "names", "label")

        file.set_nc_mode(NcMode.DATA)
        values.add([0, 0], [2, 3], [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        spatial.add_strings("xyz")
        names.add_strings(["alpha", "beta"])
    return path


class TestFileMode:
    """Tests for file mode parsing."""

    def test_parse(self):
        """Test parsing of one-letter modes."""
        assert FileMode.parse("r") is FileMode.READ
        assert FileMode.parse("w") is FileMode.WRITE
        assert FileMode.parse(FileMode.APPEND) is FileMode.APPEND

    def test_parse_invalid(self):
        """Test that unknown modes raise errors."""
        with pytest.raises(FileError, match="unknown file mode"):
            FileMode.parse("x")


class TestNcFileRead:
    """Tests for reading NetCDF files."""

    def test_dimensions(self, sample_file):
        """Test dimension lookup."""
        with NcFile(sample_file) as file:
            assert file.dimension("atom") == 2
            assert file.dimension("label") == STRING_MAXLEN
            assert file.optional_dimension("missing", 0) == 0
            assert file.optional_dimension("missing", None) is None

            with pytest.raises(FileError, match="missing dimension 'missing'"):
                file.dimension("missing")

    def test_global_attributes(self, sample_file):
        """Test global attribute lookup."""
        with NcFile(sample_file) as file:
            assert file.global_attribute("title") == "sample"
            assert file.optional_global_attribute("missing") is None
            assert file.optional_global_attribute("missing", "") == ""

            with pytest.raises(FileError, match="missing global attribute"):
                file.global_attribute("missing")

    def test_variable_values(self, sample_file):
        """Test reading variable values."""
        with NcFile(sample_file) as file:
            assert file.variable_exists("values")
            assert not file.variable_exists("missing")

            values = file.variable("values")
            assert values.dimensions == ("atom", "spatial")
            assert values.shape == (2, 3)

            data = values.get([0, 0], [2, 3])
            np.testing.assert_array_equal(data, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

            data = values.get([1, 0], [1, 3])
            np.testing.assert_array_equal(data, [4.0, 5.0, 6.0])

    def test_values_outlive_file(self, sample_file):
        """Test that read arrays stay valid after closing."""
        with NcFile(sample_file) as file:
            data = file.variable("values").get([0, 0], [2, 3])

        assert data.sum() == 21.0

    def test_variable_attributes(self, sample_file):
        """Test reading variable attributes."""
        with NcFile(sample_file) as file:
            values = file.variable("values")
            assert values.attribute_exists("units")
            assert values.string_attribute("units") == "angstrom"
            assert values.float_attribute("scale_factor") == 0.5
            assert not values.attribute_exists("missing")

            with pytest.raises(FileError, match="missing attribute"):
                values.float_attribute("missing")
            with pytest.raises(FileError, match="is not a number"):
                values.float_attribute("units")

    def test_strings(self, sample_file):
        """Test reading char variables."""
        with NcFile(sample_file) as file:
            assert file.variable("spatial").strings() == ["xyz"]
            assert file.variable("names").strings() == ["alpha", "beta"]

    def test_out_of_bounds(self, sample_file):
        """Test that reading past the end raises errors."""
        with NcFile(sample_file) as file:
            with pytest.raises(FileError, match="can not read"):
                file.variable("values").get([0, 0], [3, 3])
            with pytest.raises(FileError, match="dimensions"):
                file.variable("values").get([0], [3])

    def test_missing_variable(self, sample_file):
        """Test that missing variables raise errors."""
        with NcFile(sample_file) as file:
            with pytest.raises(FileError, match="missing variable 'missing'"):
                file.variable("missing")

    def test_read_only(self, sample_file):
        """Test that files opened for reading can not be modified."""
        with NcFile(sample_file) as file:
            with pytest.raises(FileError):
                file.set_nc_mode(NcMode.DEFINE)
            with pytest.raises(FileError, match="opened for reading"):
                file.variable("values").add([0, 0], [1, 3], [0.0, 0.0, 0.0])


class TestNcFileErrors:
    """Tests for file level errors."""

    def test_missing_file(self, temp_dir):
        """Test opening a file that does not exist."""
        with pytest.raises(FileError, match="could not open"):
            NcFile(temp_dir / "missing.nc")

    def test_not_netcdf(self, temp_dir):
        """Test opening a file that is not NetCDF."""
        path = temp_dir / "text.nc"
        path.write_text("this is not a NetCDF file\n")

        with pytest.raises(FileError, match="could not open"):
            NcFile(path)


class TestNcFileWrite:
    """Tests for define and data modes."""

    def test_starts_in_define_mode(self, temp_dir):
        """Test initial mode of a new file."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            assert file.nc_mode is NcMode.DEFINE

    def test_data_requires_data_mode(self, temp_dir):
        """Test that values can not be written in define mode."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            file.add_dimension("x", 3)
            variable = file.add_variable("x", "d", "x")

            with pytest.raises(FileError, match="define mode"):
                variable.add([0], [3], [1.0, 2.0, 3.0])

    def test_schema_requires_define_mode(self, temp_dir):
        """Test that the schema can not change in data mode."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            file.set_nc_mode(NcMode.DATA)

            with pytest.raises(FileError, match="data mode"):
                file.add_dimension("x", 3)
            with pytest.raises(FileError, match="data mode"):
                file.add_global_attribute("title", "new")

    def test_duplicates(self, temp_dir):
        """Test that dimensions and variables are created once."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            file.add_dimension("x", 3)
            file.add_variable("x", "d", "x")

            with pytest.raises(FileError, match="already exists"):
                file.add_dimension("x", 3)
            with pytest.raises(FileError, match="already exists"):
                file.add_variable("x", "d", "x")

    def test_unknown_dimension(self, temp_dir):
        """Test that variables need existing dimensions."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            with pytest.raises(FileError, match="missing dimension 'y'"):
                file.add_variable("y", "d", "y")

    def test_empty_dimension(self, temp_dir):
        """Test that zero-sized dimensions are rejected."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            with pytest.raises(FileError, match="positive size"):
                file.add_dimension("atom", 0)

    def test_wrong_value_count(self, temp_dir):
        """Test that the number of written values is checked."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            file.add_dimension("x", 3)
            variable = file.add_variable("x", "d", "x")
            file.set_nc_mode(NcMode.DATA)

            with pytest.raises(FileError, match="expected 3 values"):
                variable.add([0], [3], [1.0, 2.0])

    def test_string_too_long(self, temp_dir):
        """Test that strings must fit in the label dimension."""
        with NcFile(temp_dir / "new.nc", "w") as file:
            file.add_dimension("names", 1)
            file.add_dimension("label", 4)
            variable = file.add_variable("names", "c", "names", "label")
            file.set_nc_mode(NcMode.DATA)

            with pytest.raises(FileError, match="too long"):
                variable.add_strings(["alpha"])

    def test_close_twice(self, temp_dir):
        """Test that closing is idempotent."""
        file = NcFile(temp_dir / "new.nc", "w")
        file.close()
        file.close()

        assert file.closed
