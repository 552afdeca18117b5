"""Tests for Frame class."""

import numpy as np
import pytest

from ncrst.system import Frame, UnitCell


class TestFrameCreation:
    """Test Frame creation."""

    def test_empty_frame(self):
        """Test the default frame."""
        frame = Frame()

        assert frame.size == 0
        assert len(frame) == 0
        assert frame.positions.shape == (0, 3)
        assert frame.velocities is None
        assert not frame.has_velocities
        assert frame.cell == UnitCell()

    def test_create_factory(self):
        """Test Frame.create factory method."""
        positions = np.random.rand(5, 3)
        velocities = np.random.rand(5, 3)

        frame = Frame.create(positions, velocities, cell=[10.0, 10.0, 10.0])

        assert frame.size == 5
        assert np.allclose(frame.positions, positions)
        assert np.allclose(frame.velocities, velocities)
        assert frame.cell == UnitCell.cubic(10.0)

    def test_shape_mismatch_positions(self):
        """Test that badly shaped positions raise errors."""
        with pytest.raises(ValueError):
            Frame.create(np.zeros((5, 2)))

    def test_shape_mismatch_velocities(self):
        """Test that mismatched velocity shape raises error."""
        with pytest.raises(ValueError):
            Frame.create(np.zeros((5, 3)), velocities=np.zeros((4, 3)))


class TestFrameModification:
    """Test resizing and velocities."""

    def test_resize_grow(self):
        """Test that growing keeps existing atoms and zero-fills new ones."""
        frame = Frame.create([[1.0, 2.0, 3.0]])
        frame.resize(3)

        assert frame.size == 3
        assert np.allclose(frame.positions[0], [1.0, 2.0, 3.0])
        assert np.allclose(frame.positions[1:], 0.0)

    def test_resize_shrink(self):
        """Test that shrinking truncates positions and velocities."""
        frame = Frame.create(np.ones((4, 3)), velocities=np.ones((4, 3)))
        frame.resize(2)

        assert frame.positions.shape == (2, 3)
        assert frame.velocities.shape == (2, 3)

    def test_resize_negative(self):
        """Test that negative sizes raise errors."""
        with pytest.raises(ValueError):
            Frame().resize(-1)

    def test_add_velocities(self):
        """Test that velocities are zero-filled once."""
        frame = Frame.create(np.ones((3, 3)))
        frame.add_velocities()

        assert frame.has_velocities
        assert np.allclose(frame.velocities, 0.0)

        frame.velocities[0] = [1.0, 1.0, 1.0]
        frame.add_velocities()
        assert np.allclose(frame.velocities[0], [1.0, 1.0, 1.0])

    def test_copy(self):
        """Test that copies are independent."""
        frame = Frame.create(np.ones((2, 3)), velocities=np.ones((2, 3)))
        copy = frame.copy()
        copy.positions[0] = 0.0
        copy.velocities[0] = 0.0

        assert np.allclose(frame.positions, 1.0)
        assert np.allclose(frame.velocities, 1.0)
