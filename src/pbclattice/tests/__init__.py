import numpy as np

# a = b = c = 4, alpha = beta = gamma = 60
RHOMBOHEDRAL_60 = np.array(
    [
        [4.00000000, 0.00000000, 0.00000000],
        [2.00000000, 3.46410162, 0.00000000],
        [2.00000000, 1.15470054, 3.26598632],
    ]
)

SKEWED_5 = np.array([[5.0, 0.0, 0.0], [1.0, 5.0, 0.0], [1.0, 1.0, 5.0]])

ORTHORHOMBIC = np.array([[18.256, 0.0, 0.0], [0.0, 20.534, 0.0], [0.0, 0.0, 15.084]])

MONOCLINIC = np.array(
    [[7.055, 0.0, 0.0], [0.0, 6.795, 0.0], [-1.14679575, 0.0, 5.65182701]]
)


def random_points(n, scale=10.0, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-scale, scale, size=(n, 3))
