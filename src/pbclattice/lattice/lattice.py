import logging
import numpy as np
from collections import namedtuple
from typing import Tuple

from pbclattice.exceptions import InvalidArgument, InvalidBasis, NumericDegeneracy
from pbclattice.util.num import as_points, restore_shape, vector_angle
from . import images as _images
from . import mic as _mic

LOG = logging.getLogger(__name__)

# relative tolerance on |volume| / (a * b * c) below which a basis is singular
VOLUME_TOLERANCE = 1e-8
# tolerance on off-diagonal basis entries, relative to the longest lattice
# vector, below which a cell is orthorhombic
ORTHORHOMBIC_TOLERANCE = 1e-10
# fractional coordinates this close to an integer are snapped onto it when wrapping
WRAP_TOLERANCE = 1e-12

_AXES = {"a": 0, "b": 1, "c": 2, 0: 0, 1: 1, 2: 2}

_LatticeState = namedtuple(
    "_LatticeState", "direct inverse volume lengths angles widths orthorhombic"
)


def _readonly(arr):
    arr.setflags(write=False)
    return arr


def _lattice_state(vectors, tolerance, orthorhombic_tolerance) -> _LatticeState:
    direct = np.array(vectors, dtype=np.float64)
    if direct.shape != (3, 3):
        raise InvalidBasis(
            "lattice vectors must form a (3, 3) array, got {}".format(direct.shape)
        )
    if not np.all(np.isfinite(direct)):
        raise InvalidBasis("lattice vectors contain non-finite values")
    lengths = np.linalg.norm(direct, axis=1)
    va, vb, vc = direct
    volume = float(np.vdot(va, np.cross(vb, vc)))
    if not abs(volume) > tolerance * np.prod(lengths):
        raise InvalidBasis(
            "lattice vectors are singular or degenerate (volume={:g})".format(volume)
        )
    la, lb, lc = lengths
    widths = abs(volume) / np.array([lb * lc, lc * la, la * lb])
    angles = np.degrees(
        [vector_angle(vb, vc), vector_angle(vc, va), vector_angle(va, vb)]
    )
    off_diagonal = direct[~np.eye(3, dtype=bool)]
    orthorhombic = np.all(
        np.abs(off_diagonal) <= orthorhombic_tolerance * np.max(lengths)
    )
    return _LatticeState(
        direct=_readonly(direct),
        inverse=_readonly(np.linalg.inv(direct)),
        volume=volume,
        lengths=_readonly(lengths),
        angles=_readonly(angles),
        widths=_readonly(widths),
        orthorhombic=bool(orthorhombic),
    )


class Lattice:
    """
    A 3D periodic lattice, i.e. the unit cell of a crystal or of a
    periodic simulation box, with an origin.

    Lattice vectors are stored row major: `direct[0]` is lattice
    vector a etc. so that Cartesian coordinates are `frac @ direct + origin`.
    `basis` is the column major view of the same matrix.

    Everything derived from the lattice vectors (inverse, volume, lengths,
    angles, widths) is computed once whenever the vectors are set and
    replaced together, so an instance can be read concurrently as long
    as nobody mutates it.

    Attributes:
        direct (np.ndarray): (3, 3) row major lattice vectors
        basis (np.ndarray): (3, 3) column major lattice vectors
        inverse (np.ndarray): inverse of `direct`
        origin (np.ndarray): Cartesian position of fractional (0, 0, 0)
    """

    def __init__(
        self,
        vectors=None,
        origin=None,
        tolerance=VOLUME_TOLERANCE,
        orthorhombic_tolerance=ORTHORHOMBIC_TOLERANCE,
    ):
        """
        Create a Lattice from a row major (3, 3) array of lattice vectors.

        Args:
            vectors (array_like, optional): (3, 3) array of lattice vectors,
                row major i.e. vectors[0, :] is lattice vector a etc.
                Defaults to the identity i.e. a unit cube.
            origin (array_like, optional): Cartesian location of the
                fractional origin. Defaults to (0, 0, 0).
            tolerance (float, optional): relative volume below which the
                vectors are rejected as singular.
            orthorhombic_tolerance (float, optional): largest off-diagonal
                entry, relative to the longest lattice vector, for which the
                cell still counts as orthorhombic.

        Raises:
            InvalidBasis: if the vectors are singular or malformed
        """
        if vectors is None:
            vectors = np.eye(3)
        self._tolerance = tolerance
        self._orthorhombic_tolerance = orthorhombic_tolerance
        self._state = _lattice_state(vectors, tolerance, orthorhombic_tolerance)
        self._origin = _readonly(np.zeros(3))
        if origin is not None:
            self.set_origin(origin)

    @classmethod
    def from_vectors(cls, a, b, c, origin=None, **kwargs):
        """
        Construct a new Lattice from three lattice vectors.

        Args:
            a (array_like): lattice vector a
            b (array_like): lattice vector b
            c (array_like): lattice vector c

        Returns:
            Lattice: A new lattice with the provided vectors.
        """
        return cls(np.array([a, b, c], dtype=np.float64), origin=origin, **kwargs)

    @classmethod
    def from_matrix(cls, matrix, origin=None, **kwargs):
        """
        Construct a new Lattice from a column major basis matrix,
        i.e. matrix[:, 0] is lattice vector a.

        Returns:
            Lattice: A new lattice with the provided basis.
        """
        return cls(np.asarray(matrix, dtype=np.float64).T, origin=origin, **kwargs)

    @classmethod
    def from_lengths_and_angles(cls, lengths, angles, unit="degrees", **kwargs):
        """
        Construct a new Lattice from the provided lengths and angles, with
        a along x, b in the xy-plane and c completing a right handed set.

        Args:
            lengths (array_like): Lattice side lengths (a, b, c).
            angles (array_like): Lattice angles (alpha, beta, gamma) in the
                provided units (default degrees).
            unit (str, optional): 'degrees' or 'radians'.

        Returns:
            Lattice: A new lattice representing the provided cell.

        Raises:
            InvalidBasis: for non-positive lengths
            NumericDegeneracy: if the angles do not describe a real cell
            InvalidArgument: for an unknown angle unit
        """
        a, b, c = (float(x) for x in lengths)
        if not all(np.isfinite(x) and x > 0 for x in (a, b, c)):
            raise InvalidBasis(
                "cell lengths must be positive, got ({}, {}, {})".format(a, b, c)
            )
        angles = np.asarray(angles, dtype=np.float64)
        if unit == "radians":
            if np.any(np.abs(angles) > np.pi):
                LOG.warning(
                    "Large angle in Lattice.from_lengths_and_angles, "
                    "are you sure your angles are not in degrees?"
                )
        elif unit == "degrees":
            angles = np.radians(angles)
        else:
            raise InvalidArgument(
                "unknown angle unit {!r}, expected 'degrees' or 'radians'".format(unit)
            )
        if not np.all(np.isfinite(angles)):
            raise NumericDegeneracy("cell angles must be finite")

        ca, cb, cg = np.cos(angles)
        sg = np.sin(angles[2])
        if abs(sg) < VOLUME_TOLERANCE:
            raise NumericDegeneracy(
                "sin(gamma) vanishes, a and b are collinear (gamma={:g} rad)".format(
                    angles[2]
                )
            )
        gram = 1.0 - ca * ca - cb * cb - cg * cg + 2.0 * ca * cb * cg
        if not gram > 0:
            raise NumericDegeneracy(
                "cell angles {} do not describe a real cell".format(
                    np.degrees(angles)
                )
            )
        v = np.sqrt(gram)
        vectors = (
            (a, 0.0, 0.0),
            (b * cg, b * sg, 0.0),
            (c * cb, c * (ca - cb * cg) / sg, c * v / sg),
        )
        return cls(vectors, **kwargs)

    @classmethod
    def from_parameters(cls, a, b, c, alpha, beta, gamma, **kwargs):
        """
        Construct a new Lattice from the six cell parameters, angles in degrees.

        Returns:
            Lattice: A new lattice representing the provided cell.
        """
        return cls.from_lengths_and_angles((a, b, c), (alpha, beta, gamma), **kwargs)

    @classmethod
    def cubic(cls, length, **kwargs):
        "Construct a new cubic Lattice from the provided side length."
        return cls(np.eye(3) * length, **kwargs)

    @classmethod
    def orthorhombic(cls, *lengths, **kwargs):
        "Construct a new orthorhombic Lattice from the provided side lengths (a, b, c)."
        if len(lengths) != 3:
            raise InvalidArgument("Require three lengths for an orthorhombic cell")
        return cls(np.diag(lengths), **kwargs)

    @property
    def direct(self) -> np.ndarray:
        "Row major lattice vectors"
        return self._state.direct

    @property
    def basis(self) -> np.ndarray:
        "Column major lattice vectors"
        return self._state.direct.T

    @property
    def inverse(self) -> np.ndarray:
        "Inverse of the row major `direct` matrix"
        return self._state.inverse

    @property
    def inverse_basis(self) -> np.ndarray:
        "Inverse of the column major `basis` matrix"
        return self._state.inverse.T

    @property
    def origin(self) -> np.ndarray:
        "Cartesian position of fractional coordinate (0, 0, 0)"
        return self._origin

    @property
    def vector_a(self) -> np.ndarray:
        "lattice vector a"
        return self.direct[0]

    @property
    def vector_b(self) -> np.ndarray:
        "lattice vector b"
        return self.direct[1]

    @property
    def vector_c(self) -> np.ndarray:
        "lattice vector c"
        return self.direct[2]

    @property
    def vectors(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.vector_a, self.vector_b, self.vector_c

    @property
    def volume(self) -> float:
        "Signed volume a . (b x c) of the unit cell"
        return self._state.volume

    @property
    def lengths(self) -> np.ndarray:
        "Lengths of the lattice vectors (a, b, c)"
        return self._state.lengths

    @property
    def angles(self) -> np.ndarray:
        "Cell angles (alpha, beta, gamma) in degrees"
        return self._state.angles

    @property
    def widths(self) -> np.ndarray:
        """
        Cell widths along the three directions, volume divided by the
        product of the other two lattice vector lengths. These never
        exceed the distances between opposite faces, so image bounds
        derived from them are conservative.
        """
        return self._state.widths

    @property
    def is_orthorhombic(self) -> bool:
        "True if the lattice vectors lie along x, y and z i.e. the basis is diagonal"
        return self._state.orthorhombic

    @property
    def parameters(self) -> np.ndarray:
        "single vector of lattice side lengths and angles in degrees"
        return np.hstack((self.lengths, self.angles))

    @property
    def a(self) -> float:
        return float(self.lengths[0])

    @property
    def b(self) -> float:
        return float(self.lengths[1])

    @property
    def c(self) -> float:
        return float(self.lengths[2])

    @property
    def alpha(self) -> float:
        "Angle between lattice vectors b and c in degrees"
        return float(self.angles[0])

    @property
    def beta(self) -> float:
        "Angle between lattice vectors a and c in degrees"
        return float(self.angles[1])

    @property
    def gamma(self) -> float:
        "Angle between lattice vectors a and b in degrees"
        return float(self.angles[2])

    def to_fractional(self, coords) -> np.ndarray:
        """
        Transform coordinates from Cartesian space (x, y, z)
        to fractional space (a, b, c), relative to the origin.

        Args:
            coords (array_like): (3,) or (N, 3) array of Cartesian coordinates

        Returns:
            np.ndarray: fractional coordinates with the same shape
        """
        pos, single = as_points(coords)
        return restore_shape((pos - self.origin) @ self.inverse, single)

    def to_cartesian(self, coords) -> np.ndarray:
        """
        Transform coordinates from fractional space (a, b, c)
        to Cartesian space (x, y, z).

        Args:
            coords (array_like): (3,) or (N, 3) array of fractional coordinates

        Returns:
            np.ndarray: Cartesian coordinates with the same shape
        """
        frac, single = as_points(coords)
        return restore_shape(frac @ self.direct + self.origin, single)

    def wrap_fractional(self, coords) -> np.ndarray:
        """
        Wrap fractional coordinates into the unit cell, i.e. into
        [0, 1) along each axis.

        Args:
            coords (array_like): (3,) or (N, 3) array of fractional coordinates

        Returns:
            np.ndarray: wrapped fractional coordinates with the same shape
        """
        frac, single = as_points(coords)
        # points on a cell face come back from to_fractional as n +- epsilon
        nearest = np.round(frac)
        frac = np.where(np.abs(frac - nearest) <= WRAP_TOLERANCE, nearest, frac)
        wrapped = frac - np.floor(frac)
        wrapped[wrapped >= 1.0] = 0.0
        return restore_shape(wrapped, single)

    def wrap(self, coords) -> np.ndarray:
        """
        Wrap Cartesian coordinates into the unit cell, obeying periodic
        boundary conditions.

        Args:
            coords (array_like): (3,) or (N, 3) array of Cartesian coordinates

        Returns:
            np.ndarray: wrapped Cartesian coordinates with the same shape
        """
        return self.to_cartesian(self.wrap_fractional(self.to_fractional(coords)))

    def set_origin(self, origin):
        "Set the cell origin in Cartesian coordinates"
        pos, single = as_points(origin, "origin")
        if not single:
            raise InvalidArgument("origin must be a single (3,) point")
        self._origin = _readonly(pos[0].copy())

    def scale(self, factor: float, axis=None):
        """
        Scale the lattice by a positive factor, either as a whole or
        along a single lattice vector.

        Args:
            factor (float): strictly positive scale factor
            axis (int or str, optional): 0/1/2 or 'a'/'b'/'c' to scale only
                that lattice vector. Defaults to scaling all three.

        Raises:
            InvalidArgument: for a non-positive factor or unknown axis
        """
        factor = float(factor)
        if not (np.isfinite(factor) and factor > 0):
            raise InvalidArgument("invalid scale factor: {}".format(factor))
        direct = np.array(self.direct)
        if axis is None:
            direct *= factor
        else:
            if axis not in _AXES:
                raise InvalidArgument("invalid lattice axis: {!r}".format(axis))
            direct[_AXES[axis]] *= factor
        self._state = _lattice_state(
            direct, self._tolerance, self._orthorhombic_tolerance
        )

    def scale_a(self, factor: float):
        "Scale lattice vector a by a positive factor"
        self.scale(factor, axis=0)

    def scale_b(self, factor: float):
        "Scale lattice vector b by a positive factor"
        self.scale(factor, axis=1)

    def scale_c(self, factor: float):
        "Scale lattice vector c by a positive factor"
        self.scale(factor, axis=2)

    def supercell(self, na: int, nb: int, nc: int) -> "Lattice":
        """
        A new lattice whose vectors are (na * a, nb * b, nc * c),
        sharing this lattice's origin.
        """
        reps = np.array([na, nb, nc])
        if not np.issubdtype(reps.dtype, np.integer) or np.any(reps < 1):
            raise InvalidArgument(
                "supercell repeats must be positive integers, got {}".format(
                    (na, nb, nc)
                )
            )
        return Lattice(
            self.direct * reps[:, np.newaxis],
            origin=self.origin,
            tolerance=self._tolerance,
            orthorhombic_tolerance=self._orthorhombic_tolerance,
        )

    def apply_mic(self, d, return_image=False):
        "Shortest vector(s) congruent to `d`, see `pbclattice.lattice.mic.apply_mic`"
        return _mic.apply_mic(self, d, return_image=return_image)

    def apply_mic_tuckerman(self, d, return_image=False):
        return _mic.apply_mic_tuckerman(self, d, return_image=return_image)

    def apply_mic_brute_force(self, d, return_image=False):
        return _mic.apply_mic_brute_force(self, d, return_image=return_image)

    def distance(self, pi, pj):
        """
        Shortest distance between `pi` and the periodic images of `pj`
        under the minimum image convention.

        Args:
            pi (array_like): (3,) or (N, 3) Cartesian coordinates of point(s) i
            pj (array_like): (3,) or (N, 3) Cartesian coordinates of point(s) j

        Returns:
            float or np.ndarray: the distance(s)
        """
        return _mic.distance(self, pi, pj)

    def distance_tuckerman(self, pi, pj):
        return _mic.distance_tuckerman(self, pi, pj)

    def distance_brute_force(self, pi, pj):
        return _mic.distance_brute_force(self, pi, pj)

    def minimal_image_radius(self, cutoff: float) -> Tuple[int, int, int]:
        return _images.minimal_image_radius(self, cutoff)

    def relevant_images(self, radius: float) -> np.ndarray:
        return _images.relevant_images(self, radius)

    def replicate(self, points, range_a, range_b, range_c) -> np.ndarray:
        "Replicate points over a block of cells, see `pbclattice.lattice.images.replicate`"
        return _images.replicate(self, points, range_a, range_b, range_c)

    def to_mesh(self):
        "The unit cell as a `trimesh.Trimesh`"
        from pbclattice.util.mesh import lattice_to_mesh

        return lattice_to_mesh(self)

    def copy(self) -> "Lattice":
        return Lattice(
            self.direct,
            origin=self.origin,
            tolerance=self._tolerance,
            orthorhombic_tolerance=self._orthorhombic_tolerance,
        )

    def __eq__(self, other):
        if not isinstance(other, Lattice):
            return NotImplemented
        return np.array_equal(self.direct, other.direct) and np.array_equal(
            self.origin, other.origin
        )

    __hash__ = None

    def __repr__(self):
        s = "<{{}}: ({})>".format(",".join("{:.3f}" for p in range(6)))
        return s.format(self.__class__.__name__, *self.parameters)
