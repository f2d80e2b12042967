class LatticeError(ValueError):
    "Base class for errors raised when building or using a `Lattice`"
    pass


class InvalidBasis(LatticeError):
    "The lattice vectors are singular, degenerate or otherwise malformed"
    pass


class InvalidArgument(LatticeError):
    "An argument is outside its meaningful domain e.g. a non-positive scale factor"
    pass


class NumericDegeneracy(LatticeError):
    "Cell parameters do not describe a real, non-flat parallelepiped"
    pass
