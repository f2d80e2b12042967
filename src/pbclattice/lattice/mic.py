"""
Minimum image convention (MIC) for displacement vectors in a
periodic lattice.

Two algorithms are combined:

- Tuckerman's algorithm: round each fractional component of the
  displacement to the nearest integer. This is exact for orthorhombic
  cells, but only an estimate for skewed ones.
- Brute force: search all images inside the box that could contain a
  vector shorter than the Tuckerman estimate.

A Tuckerman vector shorter than half the smallest cell width cannot
have a shorter periodic image, so `apply_mic` only pays for the
brute force search when that certificate fails.

References:
    Tuckerman, M. E. Statistical Mechanics: Theory and Molecular
    Simulation, 1st ed.; Oxford University Press: Oxford, 2010.
"""
import logging
import numpy as np

from pbclattice.exceptions import InvalidArgument
from pbclattice.util.num import as_points, restore_shape
from .images import enumerate_images, minimal_image_radius

LOG = logging.getLogger(__name__)


def _tuckerman(lattice, d):
    frac = d @ lattice.inverse
    # round half up, so each component lands in [-0.5, 0.5)
    image = -np.floor(frac + 0.5)
    return (frac + image) @ lattice.direct, image.astype(np.int64)


def _brute_force_single(lattice, v):
    # v is already Tuckerman reduced, so its length bounds the true minimum
    cutoff = np.linalg.norm(v)
    na, nb, nc = minimal_image_radius(lattice, cutoff)
    images = enumerate_images(na, nb, nc)
    candidates = v + images @ lattice.direct
    i = np.argmin(np.einsum("ij,ij->i", candidates, candidates))
    return candidates[i], images[i]


def _result(vectors, images, single, return_image):
    vectors = restore_shape(vectors, single)
    if return_image:
        return vectors, restore_shape(images, single)
    return vectors


def safe_radius(lattice) -> float:
    """
    Half the smallest cell width: any displacement shorter than this
    is guaranteed to be its own minimum image.
    """
    return 0.5 * float(np.min(lattice.widths))


def apply_mic_tuckerman(lattice, d, return_image=False):
    """
    Approximate minimum image vector(s) using Tuckerman's algorithm.

    Args:
        lattice (Lattice): the periodic lattice
        d (array_like): (3,) or (N, 3) Cartesian displacement(s)
        return_image (bool, optional): also return the image triple(s)
            such that `result == d + image @ lattice.direct`

    Returns:
        np.ndarray or Tuple[np.ndarray, np.ndarray]: the reduced vector(s),
        and optionally the corresponding integer image(s)
    """
    d, single = as_points(d, "d")
    vectors, images = _tuckerman(lattice, d)
    return _result(vectors, images, single, return_image)


def apply_mic_brute_force(lattice, d, return_image=False):
    """
    Exact minimum image vector(s), found by looping over all relevant
    images around the Tuckerman estimate. When several images are
    exactly equally short the first in enumeration order is kept.

    Args:
        lattice (Lattice): the periodic lattice
        d (array_like): (3,) or (N, 3) Cartesian displacement(s)
        return_image (bool, optional): also return the image triple(s)

    Returns:
        np.ndarray or Tuple[np.ndarray, np.ndarray]: the minimum image
        vector(s), and optionally the corresponding integer image(s)
    """
    d, single = as_points(d, "d")
    vectors, images = _tuckerman(lattice, d)
    for i in range(len(vectors)):
        v, image = _brute_force_single(lattice, vectors[i])
        vectors[i] = v
        images[i] += image
    return _result(vectors, images, single, return_image)


def apply_mic(lattice, d, return_image=False):
    """
    Shortest vector(s) congruent to `d` modulo the lattice.

    Uses Tuckerman's algorithm where its result is provably optimal
    (orthorhombic cells, or results shorter than `safe_radius`) and
    falls back to a brute force search otherwise.

    Args:
        lattice (Lattice): the periodic lattice
        d (array_like): (3,) or (N, 3) Cartesian displacement(s)
        return_image (bool, optional): also return the image triple(s)
            such that `result == d + image @ lattice.direct`

    Returns:
        np.ndarray or Tuple[np.ndarray, np.ndarray]: the minimum image
        vector(s), and optionally the corresponding integer image(s)
    """
    d, single = as_points(d, "d")
    vectors, images = _tuckerman(lattice, d)
    if lattice.is_orthorhombic:
        return _result(vectors, images, single, return_image)

    r_max = safe_radius(lattice)
    unsafe = np.flatnonzero(np.linalg.norm(vectors, axis=1) >= r_max)
    if len(unsafe) > 0:
        LOG.debug(
            "%d of %d vectors beyond safe radius %.4f, using brute force",
            len(unsafe),
            len(vectors),
            r_max,
        )
    for i in unsafe:
        v, image = _brute_force_single(lattice, vectors[i])
        vectors[i] = v
        images[i] += image
    return _result(vectors, images, single, return_image)


def _displacements(pi, pj):
    pi, single_i = as_points(pi, "pi")
    pj, single_j = as_points(pj, "pj")
    if len(pi) != len(pj) and not (single_i or single_j):
        raise InvalidArgument(
            "cannot pair {} points with {} points".format(len(pi), len(pj))
        )
    return pj - pi, single_i and single_j


def _norms(vectors, single):
    r = np.linalg.norm(vectors, axis=1)
    if single:
        return float(r[0])
    return r


def distance(lattice, pi, pj):
    """
    Shortest distance between point(s) `pi` and the periodic images
    of point(s) `pj`. Either argument may be a single (3,) point,
    which is paired with every point of the other.

    Args:
        lattice (Lattice): the periodic lattice
        pi (array_like): (3,) or (N, 3) Cartesian coordinates
        pj (array_like): (3,) or (N, 3) Cartesian coordinates

    Returns:
        float or np.ndarray: distance(s) under the minimum image convention
    """
    d, single = _displacements(pi, pj)
    return _norms(apply_mic(lattice, d), single)


def distance_tuckerman(lattice, pi, pj):
    "Like `distance`, but always using Tuckerman's algorithm"
    d, single = _displacements(pi, pj)
    return _norms(apply_mic_tuckerman(lattice, d), single)


def distance_brute_force(lattice, pi, pj):
    "Like `distance`, but always using the brute force image search"
    d, single = _displacements(pi, pj)
    return _norms(apply_mic_brute_force(lattice, d), single)
