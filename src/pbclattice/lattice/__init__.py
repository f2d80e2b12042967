"""
This module implements functionality associated with
3D periodic lattices (`Lattice`): conversion between Cartesian and
fractional coordinates, wrapping into the unit cell, distances under the
minimum image convention (`apply_mic`, `distance`) and enumeration of
periodic images (`enumerate_images`, `replicate`).
"""

from .images import enumerate_images, minimal_image_radius, relevant_images, replicate
from .lattice import Lattice
from .mic import (
    apply_mic,
    apply_mic_brute_force,
    apply_mic_tuckerman,
    distance,
    safe_radius,
)

__all__ = [
    "Lattice",
    "apply_mic",
    "apply_mic_brute_force",
    "apply_mic_tuckerman",
    "distance",
    "enumerate_images",
    "minimal_image_radius",
    "relevant_images",
    "replicate",
    "safe_radius",
]
