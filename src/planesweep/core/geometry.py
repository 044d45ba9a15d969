"""
Geometry file handling for planesweep using COMPAS and trimesh.

Provides utilities for loading meshes from disk and converting between the
COMPAS and trimesh representations. Slicing itself works on
:class:`planesweep.geometry.solid.TrimeshSolid`.
"""

import logging
from pathlib import Path
from typing import Any

import trimesh
from compas.datastructures import Mesh as CompasMesh

from planesweep.core.exceptions import GeometryError

logger = logging.getLogger(__name__)


class GeometryConverter:
    """
    Converter between different geometry representations.

    Handles conversion between COMPAS and Trimesh meshes.
    """

    @staticmethod
    def trimesh_to_compas(mesh: trimesh.Trimesh) -> CompasMesh:
        """
        Convert Trimesh mesh to COMPAS Mesh.

        Raises:
            GeometryError: If conversion fails
        """
        try:
            vertices = mesh.vertices.tolist()
            faces = mesh.faces.tolist()
            return CompasMesh.from_vertices_and_faces(vertices, faces)
        except Exception as e:
            raise GeometryError(f"Failed to convert Trimesh to COMPAS: {e}") from e

    @staticmethod
    def compas_to_trimesh(mesh: CompasMesh) -> trimesh.Trimesh:
        """
        Convert COMPAS Mesh to Trimesh.

        Vertex keys are remapped to contiguous indices, so meshes that had
        vertices deleted convert correctly. Polygonal faces are triangulated
        by trimesh.

        Raises:
            GeometryError: If conversion fails
        """
        try:
            keys = list(mesh.vertices())
            index = {key: i for i, key in enumerate(keys)}
            vertices = [mesh.vertex_coordinates(key) for key in keys]
            faces = [[index[key] for key in mesh.face_vertices(f)] for f in mesh.faces()]
            return trimesh.Trimesh(vertices=vertices, faces=faces)
        except Exception as e:
            raise GeometryError(f"Failed to convert COMPAS to Trimesh: {e}") from e


class GeometryLoader:
    """
    Loads geometric models from various file formats.

    Supports STL, OBJ, PLY and OFF (via trimesh), and converts to COMPAS format.
    """

    SUPPORTED_FORMATS = {".stl", ".obj", ".ply", ".off"}

    @classmethod
    def load_trimesh(cls, file_path: str | Path, **kwargs: Any) -> trimesh.Trimesh:
        """
        Load geometry from file as a single trimesh.

        Scenes are flattened by concatenating every mesh they contain.

        Raises:
            GeometryError: If file format is unsupported, loading fails or
                the file holds no triangles
        """
        path = Path(file_path)

        if not path.exists():
            raise GeometryError(f"File not found: {path}")

        if path.suffix.lower() not in cls.SUPPORTED_FORMATS:
            raise GeometryError(
                f"Unsupported format: {path.suffix}. "
                f"Supported formats: {cls.SUPPORTED_FORMATS}"
            )

        try:
            loaded = trimesh.load(str(path), **kwargs)
        except Exception as e:
            raise GeometryError(f"Failed to load geometry from {path}: {e}") from e

        if isinstance(loaded, trimesh.Scene):
            meshes = [
                geom for geom in loaded.geometry.values()
                if isinstance(geom, trimesh.Trimesh)
            ]
            if not meshes:
                raise GeometryError(f"No triangle meshes in {path}")
            mesh = trimesh.util.concatenate(meshes)
        elif isinstance(loaded, trimesh.Trimesh):
            mesh = loaded
        else:
            raise GeometryError(f"Unexpected geometry type: {type(loaded)}")

        if len(mesh.faces) == 0:
            raise GeometryError(f"Mesh has no faces: {path}")

        if not mesh.is_watertight:
            # open meshes still slice, but may produce open chains
            logger.warning("Mesh %s is not watertight", path.name)

        return mesh

    @classmethod
    def load(cls, file_path: str | Path, **kwargs: Any) -> CompasMesh:
        """
        Load geometry from file.

        Args:
            file_path: Path to geometry file
            **kwargs: Additional arguments passed to trimesh.load

        Returns:
            COMPAS Mesh object

        Raises:
            GeometryError: If file format is unsupported or loading fails
        """
        return GeometryConverter.trimesh_to_compas(cls.load_trimesh(file_path, **kwargs))

    @classmethod
    def save(cls, mesh: CompasMesh, file_path: str | Path, **kwargs: Any) -> None:
        """
        Save COMPAS mesh to file.

        Raises:
            GeometryError: If saving fails
        """
        path = Path(file_path)

        try:
            tmesh = GeometryConverter.compas_to_trimesh(mesh)
            tmesh.export(str(path), **kwargs)
        except GeometryError:
            raise
        except Exception as e:
            raise GeometryError(f"Failed to save geometry to {path}: {e}") from e
