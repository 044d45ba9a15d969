"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from planesweep.geometry.solid import TrimeshSolid


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cube():
    """Axis-aligned 10 mm cube from (0, 0, 0) to (10, 10, 10)."""
    return TrimeshSolid.cube((0.0, 0.0, 0.0), (10.0, 10.0, 10.0))


@pytest.fixture
def cube_stl(temp_dir, cube):
    """The 10 mm cube written to an STL file."""
    path = temp_dir / "cube.stl"
    cube.mesh.export(str(path))
    return path


@pytest.fixture
def sample_config_dir(temp_dir, cube_stl):
    """Create a sample configuration directory structure."""
    config_dir = temp_dir / "config"
    (config_dir / "jobs").mkdir(parents=True)

    additive_job = f"""
job:
  name: "Cube layers"
  model: "{cube_stl.as_posix()}"

slicing:
  mode: additive
  layer_height: 1.0
  min_z: 0.0
  max_z: 10.0
"""
    (config_dir / "jobs" / "cube_additive.yaml").write_text(additive_job)

    subtractive_job = """
job:
  name: "Cube contours"
  model: "../../cube.stl"

slicing:
  mode: subtractive
  step_down: 2.0
"""
    (config_dir / "jobs" / "cube_subtractive.yaml").write_text(subtractive_job)

    return config_dir
