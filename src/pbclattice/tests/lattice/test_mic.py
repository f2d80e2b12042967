import logging
import unittest
import numpy as np
from pbclattice import InvalidArgument, Lattice
from pbclattice.lattice import apply_mic, safe_radius
from .. import MONOCLINIC, ORTHORHOMBIC, RHOMBOHEDRAL_60, SKEWED_5, random_points

LOG = logging.getLogger(__name__)


class MinimumImageTestCase(unittest.TestCase):
    def test_mic_distance(self):
        lattice = Lattice(RHOMBOHEDRAL_60)
        # range in which Tuckerman's algorithm is guaranteed to work
        self.assertAlmostEqual(safe_radius(lattice), 1.4142, places=4)

        pi = [0.0, 0.0, 0.0]
        pj = [-0.0743502, 2.5356374, -2.0623249]
        d_naive = lattice.distance_tuckerman(pi, pj)
        self.assertAlmostEqual(d_naive, 1.2270, places=4)
        self.assertAlmostEqual(lattice.distance_brute_force(pi, pj), d_naive, places=4)
        self.assertAlmostEqual(lattice.distance(pi, pj), 1.2270, places=4)

        # true distance is outside the safe range
        pj = [-0.0834941, 1.8252187, -1.5169388]
        d_brute = lattice.distance_brute_force(pi, pj)
        self.assertAlmostEqual(d_brute, 1.8167, places=4)
        self.assertGreater(lattice.distance_tuckerman(pi, pj), d_brute)
        self.assertAlmostEqual(lattice.distance(pi, pj), d_brute, places=4)

    def test_fallback_is_logged(self):
        lattice = Lattice(RHOMBOHEDRAL_60)
        with self.assertLogs("pbclattice.lattice.mic", level="DEBUG"):
            lattice.apply_mic([-0.0834941, 1.8252187, -1.5169388])

    def test_mic_vector(self):
        lat = Lattice(MONOCLINIC)
        expected = [-0.48651737, 0.184824, -1.31913642]
        d = [5.42168688, 0.184824, 4.33269058]
        np.testing.assert_allclose(lat.apply_mic_tuckerman(d), expected, atol=1e-4)
        np.testing.assert_allclose(lat.apply_mic(d), expected, atol=1e-4)

    def test_mic_distance_skewed(self):
        lat = Lattice(SKEWED_5)
        origin = np.zeros(3)
        p = [-0.94112, -4.34823, 2.53058]
        self.assertAlmostEqual(lat.distance_tuckerman(origin, p), 2.66552, places=4)
        self.assertAlmostEqual(lat.distance_brute_force(origin, p), 2.61383, places=4)
        self.assertAlmostEqual(lat.distance(origin, p), 2.61383, places=4)

        p = [-2.46763, 0.57717, 0.08775]
        self.assertAlmostEqual(lat.distance_tuckerman(origin, p), 2.59879, places=4)
        self.assertAlmostEqual(lat.distance(origin, p), 2.53575, places=4)

    def test_zero_displacement(self):
        lat = Lattice(SKEWED_5)
        v, image = lat.apply_mic(np.zeros(3), return_image=True)
        np.testing.assert_allclose(v, np.zeros(3))
        np.testing.assert_array_equal(image, [0, 0, 0])
        self.assertEqual(lat.distance([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]), 0.0)

    def test_image_is_congruent(self):
        for vectors in (RHOMBOHEDRAL_60, SKEWED_5, MONOCLINIC, ORTHORHOMBIC):
            lat = Lattice(vectors)
            d = random_points(40, scale=25.0, seed=1)
            for method in (lat.apply_mic, lat.apply_mic_tuckerman, lat.apply_mic_brute_force):
                v, images = method(d, return_image=True)
                self.assertTrue(np.issubdtype(images.dtype, np.integer))
                np.testing.assert_allclose(v, d + images @ lat.direct, atol=1e-9)

    def test_brute_force_never_longer(self):
        lat = Lattice(SKEWED_5)
        d = random_points(100, scale=12.0, seed=2)
        naive = np.linalg.norm(lat.apply_mic_tuckerman(d), axis=1)
        brute = np.linalg.norm(lat.apply_mic_brute_force(d), axis=1)
        hybrid = np.linalg.norm(lat.apply_mic(d), axis=1)
        self.assertTrue(np.all(brute <= naive + 1e-12))
        np.testing.assert_allclose(hybrid, brute, atol=1e-12)

    def test_orthorhombic_agreement(self):
        lat = Lattice(ORTHORHOMBIC)
        box = np.diag(ORTHORHOMBIC)
        d = random_points(200, scale=50.0, seed=4)
        expected = d - box * np.floor(d / box + 0.5)
        result = lat.apply_mic(d)
        np.testing.assert_allclose(result, expected, atol=1e-9)
        self.assertTrue(np.all(result >= -0.5 * box - 1e-9))
        self.assertTrue(np.all(result < 0.5 * box + 1e-9))

    def test_skewed_cell_in_small_units(self):
        lat = Lattice(SKEWED_5 * 1e-10)
        self.assertFalse(lat.is_orthorhombic)
        p = np.array([-0.94112, -4.34823, 2.53058]) * 1e-10
        self.assertAlmostEqual(lat.distance(np.zeros(3), p) * 1e10, 2.61383, places=4)
        self.assertAlmostEqual(
            lat.distance_tuckerman(np.zeros(3), p) * 1e10, 2.66552, places=4
        )

    def test_half_cell_ties_round_down(self):
        lat = Lattice.cubic(10.0)
        np.testing.assert_allclose(lat.apply_mic([5.0, -5.0, 15.0]), [-5.0, -5.0, -5.0])

    def test_symmetry(self):
        lat = Lattice(RHOMBOHEDRAL_60, origin=(0.3, 0.2, 0.1))
        pi = random_points(50, seed=5)
        pj = random_points(50, seed=6)
        np.testing.assert_allclose(lat.distance(pi, pj), lat.distance(pj, pi), atol=1e-12)

    def test_vectorized_matches_single(self):
        lat = Lattice(RHOMBOHEDRAL_60)
        d = random_points(30, scale=6.0, seed=7)
        many = apply_mic(lat, d)
        for i in range(len(d)):
            np.testing.assert_allclose(many[i], apply_mic(lat, d[i]), atol=1e-12)

    def test_distance_broadcast(self):
        lat = Lattice(SKEWED_5)
        pj = random_points(10, seed=8)
        r = lat.distance(np.zeros(3), pj)
        self.assertEqual(r.shape, (10,))
        self.assertAlmostEqual(r[3], lat.distance(np.zeros(3), pj[3]))
        self.assertIsInstance(lat.distance(np.zeros(3), pj[0]), float)

    def test_bad_inputs(self):
        lat = Lattice(SKEWED_5)
        with self.assertRaises(InvalidArgument):
            lat.distance(np.zeros((2, 3)), np.zeros((3, 3)))
        with self.assertRaises(InvalidArgument):
            lat.apply_mic(np.zeros((4, 2)))
