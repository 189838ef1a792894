#!/usr/bin/env python3
"""End-to-end example: generate, decode and inspect a mesh with gmshreader.

Usage:
    python python_example.py [mesh.msh]

Without an argument this writes the box test mesh shipped with the test
data generator and reads it back.  Pass any Gmsh MSH 4.x ASCII file to
inspect your own mesh.
"""

import logging
import subprocess
import sys
from collections import Counter
from pathlib import Path

import numpy as np

import gmshreader as gr

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

TEST_DATA = Path(__file__).resolve().parent.parent / "tests" / "test_data"

if len(sys.argv) > 1:
    MESH_FILE = Path(sys.argv[1])
else:
    MESH_FILE = TEST_DATA / "box_tet4.msh"
    if not MESH_FILE.exists():
        print(f"Generating {MESH_FILE}")
        subprocess.run(
            [sys.executable, str(TEST_DATA / "generate_test_mesh.py"), str(MESH_FILE)],
            check=True,
        )

# --- 1. Probe the header ---
if not gr.can_decode(MESH_FILE):
    print(f"{MESH_FILE} is not a Gmsh MSH 4.x ASCII file")
    sys.exit(1)

# --- 2. Decode ---
mesh = gr.read_msh(MESH_FILE)
print(f"\nMSH version {mesh.header.version}")
print(f"  {mesh.num_points} points, {mesh.num_cells} cells")

# --- 3. Cell kinds ---
kinds = Counter(cell.kind.name for cell in mesh.cells)
for name, count in sorted(kinds.items()):
    print(f"  {name:<28s} {count}")

# --- 4. Bounding box ---
lo = np.nanmin(mesh.points, axis=0)
hi = np.nanmax(mesh.points, axis=0)
print(f"\nBounding box: {lo} -> {hi}")

# --- 5. Consistency warnings ---
for record in mesh.warnings:
    print(f"WARNING: {record}")

# --- 6. Plot (requires pyvista) ---
try:
    grid = mesh.to_pyvista()
except ImportError:
    print("\nInstall pyvista to plot the mesh: pip install gmshreader[viz]")
else:
    grid.plot(show_edges=True)
