"""
Local coordinate systems for material orientation and result output.

A local system gives, at each point x, the orthonormal rotation matrix T
whose rows are the local base vectors in global coordinates.

Keyword/XML text format:

    cartesian            global axes (no local system)
    cylindric [X|Y|Z]    radial, tangential and axial directions
                         about the given global axis (default Z)
"""

import re
import numpy as np
from abc import ABC, abstractmethod
from typing import Optional


class LocalSystem(ABC):
    """Point-dependent local coordinate system."""

    @abstractmethod
    def rotation(self, x) -> np.ndarray:
        """Rotation matrix T (rows = local base vectors) at point x."""
        pass


class CylindricalSystem(LocalSystem):
    """
    Cylindrical system about a global axis.

    Local base vectors: (e_r, e_t, e_axis). In 2D only the Z axis makes sense,
    and the system reduces to (e_r, e_t).
    """

    def __init__(self, axis: int = 2, n_dim: int = 3):
        if axis not in (0, 1, 2):
            raise ValueError(f"Invalid cylinder axis {axis}")
        if n_dim == 2 and axis != 2:
            raise ValueError("2D cylindrical systems must use the Z axis")
        self.axis = axis
        self.n_dim = n_dim

    def rotation(self, x) -> np.ndarray:
        X = np.zeros(3)
        coords = np.asarray(x, dtype=np.float64)
        X[:len(coords)] = coords

        e_a = np.zeros(3)
        e_a[self.axis] = 1.0
        radial = X - X[self.axis] * e_a
        r = np.linalg.norm(radial)
        if r < 1e-14:
            # On the axis: any orthogonal pair is valid
            radial = np.roll(e_a, 1)
            r = 1.0
        e_r = radial / r
        e_t = np.cross(e_a, e_r)

        T = np.vstack([e_r, e_t, e_a])
        if self.n_dim == 2:
            return T[:2, :2]
        return T


def parse_local_system(text: str, n_dim: int) -> Optional[LocalSystem]:
    """
    Create a local system from its text definition.

    Returns:
        LocalSystem, or None for the cartesian (global) system

    Raises:
        ValueError: For an unknown system or axis
    """
    tokens = text.split()
    if not tokens:
        raise ValueError("Empty local system definition")

    name = tokens[0].lower()
    if name == "cartesian":
        return None

    match = re.fullmatch(r"cylind(?:er|rical|ric)([xyz]?)", name)
    if match:
        # Axis either as a separate token or as suffix: "cylindricZ"
        axis_name = tokens[1] if len(tokens) > 1 else (match.group(1) or "z")
        axes = {"x": 0, "y": 1, "z": 2}
        if axis_name.lower() not in axes:
            raise ValueError(f"Invalid cylinder axis \"{axis_name}\"")
        return CylindricalSystem(axes[axis_name.lower()], n_dim)

    raise ValueError(f"Unknown local system \"{tokens[0]}\"")
