from .exceptions import InvalidArgument, InvalidBasis, LatticeError, NumericDegeneracy
from .lattice import Lattice, apply_mic, distance, enumerate_images, replicate

__all__ = [
    "InvalidArgument",
    "InvalidBasis",
    "Lattice",
    "LatticeError",
    "NumericDegeneracy",
    "apply_mic",
    "distance",
    "enumerate_images",
    "replicate",
]
