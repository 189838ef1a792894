"""Shared fixtures for gmshreader Python tests."""

import importlib.util
import io
from pathlib import Path

import pytest

# Path to the test data directory (mesh generators)
TEST_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "tests" / "test_data"

# Two node blocks (5 nodes), one triangle block and one tetrahedron block.
SIMPLE_MSH = """\
$MeshFormat
4.1 0 8
$EndMeshFormat
$Nodes
2 5 1 5
2 1 0 3
1
2
3
0 0 0
1 0 0
0 1 0
3 1 0 2
4
5
0 0 1
1 1 1
$EndNodes
$Elements
2 3 1 3
2 1 2 1
1 1 2 3
3 1 4 2
2 1 2 3 4
3 2 3 4 5
$EndElements
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "gmsh: tests that drive the gmsh Python API")


@pytest.fixture(scope="session")
def test_data_dir():
    """Return path to the test data directory."""
    return TEST_DATA_DIR


@pytest.fixture(scope="session")
def box_generator(test_data_dir):
    """The box mesh generator script, loaded as a module."""
    path = test_data_dir / "generate_test_mesh.py"
    if not path.exists():
        pytest.skip(f"Mesh generator not found: {path}")
    spec = importlib.util.spec_from_file_location("generate_test_mesh", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def box_mesh(box_generator, tmp_path_factory):
    """Write the generated box mesh once; return (path, nodes, triangles, tets)."""
    path = tmp_path_factory.mktemp("msh") / "box_tet4.msh"
    nodes, triangles, tets = box_generator.write_msh41(path)
    return path, nodes, triangles, tets


@pytest.fixture
def simple_msh():
    """A small hand-written MSH 4.1 mesh as a text stream."""
    return io.StringIO(SIMPLE_MSH)
