import numpy as np
from typing import Tuple

from pbclattice.exceptions import InvalidArgument


def cartesian_product(*arrays) -> np.ndarray:
    """
    Efficiently calculate the Cartesian product of the
    provided vectors A x B x C ... etc. This will maintain
    order in loops from the right most array, i.e. the first
    array varies slowest.

    Args:
        *arrays (array_like): 1D arrays to use for the Cartesian product

    Returns:
        np.ndarray: The Cartesian product of the provided vectors.
    """
    arrays = [np.asarray(a) for a in arrays]
    la = len(arrays)
    dtype = np.result_type(*arrays)
    arr = np.empty([len(a) for a in arrays] + [la], dtype=dtype)
    for i, a in enumerate(np.ix_(*arrays)):
        arr[..., i] = a
    return arr.reshape(-1, la)


def as_points(coords, name="coords") -> Tuple[np.ndarray, bool]:
    """
    Coerce a point-like object (a sequence of 3 numbers, or an (N, 3)
    array of them) into a float64 array of shape (N, 3).

    Args:
        coords (array_like): (3,) or (N, 3) coordinates
        name (str, optional): argument name used in error messages

    Returns:
        Tuple[np.ndarray, bool]: the (N, 3) array, and whether the input
        was a single (3,) point, so callers can restore the original shape.
    """
    arr = np.asarray(coords, dtype=np.float64)
    if arr.shape == (3,):
        return arr.reshape(1, 3), True
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidArgument(
            "{} must have shape (3,) or (N, 3), got {}".format(name, arr.shape)
        )
    return arr, False


def restore_shape(arr: np.ndarray, single: bool) -> np.ndarray:
    "Inverse of the reshaping done in `as_points`"
    if single:
        return arr[0]
    return arr


def vector_angle(u: np.ndarray, v: np.ndarray) -> float:
    """
    Angle between two vectors in radians, clipping the cosine to [-1, 1]
    to avoid NaN from rounding.

    Args:
        u (array_like): first vector
        v (array_like): second vector

    Returns:
        float: the angle between `u` and `v` in radians
    """
    cos = np.vdot(u, v) / (np.linalg.norm(u) * np.linalg.norm(v))
    return float(np.arccos(np.clip(cos, -1, 1)))
