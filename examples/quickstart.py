#!/usr/bin/env python
"""
Quick start example - write an AMBER restart file and read it back.

Usage:
    python examples/quickstart.py [output.ncrst]
"""

import logging
import sys

import numpy as np

from ncrst import Frame, Trajectory, UnitCell


def main():
    logging.basicConfig(level=logging.DEBUG)
    path = sys.argv[1] if len(sys.argv) > 1 else "quickstart.ncrst"

    print("=" * 60)
    print("AMBER Restart Quick Start")
    print("=" * 60)

    # 1. Build a small frame with velocities and a cubic cell
    rng = np.random.default_rng(2024)
    frame = Frame.create(
        positions=rng.uniform(0.0, 15.0, size=(8, 3)),
        velocities=rng.normal(scale=0.5, size=(8, 3)),
        cell=UnitCell.cubic(15.0),
    )

    # 2. Restart files hold exactly one frame
    print(f"\n1. Writing {frame.size} atoms to {path}")
    with Trajectory(path, "w") as trajectory:
        trajectory.write(frame)

    # 3. Read it back
    print(f"\n2. Reading {path}")
    with Trajectory(path) as trajectory:
        print(f"   Steps in file: {trajectory.nsteps}")
        restored = trajectory.read()

    print(f"   Atoms: {restored.size}")
    print(f"   Cell: {restored.cell} ({restored.cell.shape.value})")
    print(f"   Max position error: {np.abs(restored.positions - frame.positions).max():.2e}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
