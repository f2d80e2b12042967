import logging
import numpy as np

LOG = logging.getLogger(__name__)

_CELL_FACES = np.array(
    [
        [1, 3, 0],
        [4, 1, 0],
        [0, 3, 2],
        [2, 4, 0],
        [1, 7, 3],
        [5, 1, 4],
        [5, 7, 1],
        [3, 7, 2],
        [6, 4, 2],
        [2, 7, 6],
        [6, 5, 4],
        [7, 5, 6],
    ]
)


def cell_vertices(lattice) -> np.ndarray:
    """
    The 8 corners of the unit cell parallelepiped in Cartesian
    coordinates, i.e. the images of the fractional corners
    (0,0,0) ... (1,1,1) ordered with the a index varying slowest.

    Args:
        lattice (Lattice): the lattice whose cell to describe

    Returns:
        np.ndarray: (8, 3) array of vertex positions
    """
    corners = np.array(
        [(i, j, k) for i in (0, 1) for j in (0, 1) for k in (0, 1)], dtype=np.float64
    )
    return lattice.to_cartesian(corners)


def lattice_to_mesh(lattice):
    """
    Represent the unit cell of the given lattice as a closed
    triangle mesh, e.g. for visualisation alongside replicated points.

    Args:
        lattice (Lattice): the lattice whose cell to describe

    Returns:
        trimesh.Trimesh: a mesh with 8 vertices and 12 triangular faces
    """
    from trimesh import Trimesh

    verts = cell_vertices(lattice)
    faces = _CELL_FACES
    # left handed cells would otherwise have inward facing normals
    if lattice.volume < 0:
        faces = faces[:, ::-1]
    return Trimesh(vertices=verts, faces=faces, process=False)


def save_mesh(mesh, filename):
    """
    Save the given Trimesh to a file.

    Args:
        mesh (trimesh.Trimesh): The mesh to save.
        filename (str): The path to the destination file, the format
            is determined by its extension.
    """
    ext = str(filename).split(".")[-1]
    with open(filename, "wb") as f:
        mesh.export(f, ext)

    LOG.debug("Saved mesh %s to %s", mesh, filename)
