"""
Enumeration of periodic images (integer lattice translations) and
replication of points over a block of unit cells.

Image triples (na, nb, nc) denote the translation na*a + nb*b + nc*c,
i.e. `image @ lattice.direct` in the row-major convention used
throughout this package.
"""
import logging
import numpy as np
from typing import Tuple

from pbclattice.exceptions import InvalidArgument
from pbclattice.util.num import as_points, cartesian_product

LOG = logging.getLogger(__name__)


def _index_range(r, name) -> np.ndarray:
    if isinstance(r, (int, np.integer)):
        if r < 0:
            raise InvalidArgument(
                "{} must be a non-negative half-extent, got {}".format(name, r)
            )
        return np.arange(-r, r + 1, dtype=np.int64)
    arr = np.asarray(list(r))
    if arr.size == 0:
        return np.empty(0, dtype=np.int64)
    if arr.ndim != 1 or not np.issubdtype(arr.dtype, np.integer):
        raise InvalidArgument("{} must be a sequence of integers".format(name))
    return arr.astype(np.int64)


def minimal_image_radius(lattice, cutoff: float) -> Tuple[int, int, int]:
    """
    The minimal number of images along each cell direction
    required so that every point within `cutoff` of the home cell
    is covered, i.e. ceil(cutoff / width) per axis.

    Args:
        lattice (Lattice): the periodic lattice
        cutoff (float): search radius in Cartesian length units

    Returns:
        Tuple[int, int, int]: half-extents (n_a, n_b, n_c)
    """
    cutoff = float(cutoff)
    if not np.isfinite(cutoff) or cutoff < 0:
        raise InvalidArgument(
            "cutoff must be a finite non-negative number, got {}".format(cutoff)
        )
    ns = np.ceil(cutoff / lattice.widths).astype(int)
    return tuple(int(n) for n in ns)


def enumerate_images(range_a, range_b, range_c) -> np.ndarray:
    """
    All integer image triples in the Cartesian product of the three
    index ranges, in lexicographic order (a varies slowest, c fastest).

    Args:
        range_a (Iterable[int] or int): indices along a, an int `n` is
            shorthand for `range(-n, n + 1)`
        range_b (Iterable[int] or int): indices along b
        range_c (Iterable[int] or int): indices along c

    Returns:
        np.ndarray: (K, 3) integer array of image triples
    """
    ra = _index_range(range_a, "range_a")
    rb = _index_range(range_b, "range_b")
    rc = _index_range(range_c, "range_c")
    return cartesian_product(ra, rb, rc)


def relevant_images(lattice, radius: float) -> np.ndarray:
    """
    The images required for a neighbourhood search within `radius`,
    see `minimal_image_radius`.

    Returns:
        np.ndarray: (K, 3) integer array of image triples
    """
    na, nb, nc = minimal_image_radius(lattice, radius)
    LOG.debug("Image search box for r=%g: (%d, %d, %d)", radius, na, nb, nc)
    return enumerate_images(na, nb, nc)


def replicate(lattice, points, range_a, range_b, range_c) -> np.ndarray:
    """
    Replicate Cartesian points over a block of unit cells, e.g. to
    build a supercell. Each point is shifted by `to_cartesian(image)`, so
    a lattice with a non-zero origin also offsets the replicas by that
    origin. Output is ordered image-major, point-minor:
    all points translated by the first image, then by the second, etc.

    Args:
        lattice (Lattice): the periodic lattice
        points (array_like): (3,) or (N, 3) Cartesian positions
        range_a (Iterable[int] or int): image indices along a
        range_b (Iterable[int] or int): image indices along b
        range_c (Iterable[int] or int): image indices along c

    Returns:
        np.ndarray: (K * N, 3) array of translated positions
    """
    pos, _ = as_points(points, "points")
    images = enumerate_images(range_a, range_b, range_c)
    shifts = lattice.to_cartesian(images.astype(np.float64))
    return (shifts[:, np.newaxis, :] + pos[np.newaxis, :, :]).reshape(-1, 3)
