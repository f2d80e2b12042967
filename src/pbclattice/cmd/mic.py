import logging
import sys
import numpy as np
from pbclattice import Lattice, LatticeError

LOG = logging.getLogger("pbclattice-mic")

_METHODS = {
    "auto": Lattice.apply_mic,
    "tuckerman": Lattice.apply_mic_tuckerman,
    "brute-force": Lattice.apply_mic_brute_force,
}


def parse_args(argv=None):
    import argparse

    parser = argparse.ArgumentParser(
        description="Minimum image distance between two points in a periodic cell"
    )
    cell = parser.add_mutually_exclusive_group(required=True)
    cell.add_argument(
        "--cell",
        nargs=6,
        type=float,
        metavar=("A", "B", "C", "ALPHA", "BETA", "GAMMA"),
        help="cell lengths and angles (degrees)",
    )
    cell.add_argument(
        "--vectors",
        nargs=9,
        type=float,
        metavar="X",
        help="lattice vectors a, b, c (row major)",
    )
    parser.add_argument(
        "--from", dest="pi", nargs=3, type=float, default=[0.0, 0.0, 0.0]
    )
    parser.add_argument("--to", dest="pj", nargs=3, type=float, required=True)
    parser.add_argument("--method", choices=sorted(_METHODS), default="auto")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level)

    try:
        if args.cell is not None:
            lattice = Lattice.from_parameters(*args.cell)
        else:
            lattice = Lattice(np.reshape(args.vectors, (3, 3)))
        d = np.subtract(args.pj, args.pi)
        vector, image = _METHODS[args.method](lattice, d, return_image=True)
    except LatticeError as e:
        LOG.error("%s", e)
        sys.exit(1)

    LOG.debug("Using %s with method '%s'", lattice, args.method)
    print("distance: {:.6f}".format(np.linalg.norm(vector)))
    print("vector: {:.6f} {:.6f} {:.6f}".format(*vector))
    print("image: {:d} {:d} {:d}".format(*image))


if __name__ == "__main__":
    main()
