"""
Abstract function types used as boundary and body load data.

Spatial functions are evaluated at a point x (array-like of length 1-3)
and an optional time t:

    RealFunc:      f(x, t) -> float
    VecFunc:       f(x, t) -> ndarray (n_comp,)
    STensorFunc:   f(x, t) -> ndarray (dim, dim), symmetric
    TractionFunc:  f(x, n, t) -> ndarray (dim,), n = outward unit normal

Time functions (TimeFunc) depend on t only, and are turned into spatial
functions by wrapping them in ConstTimeFunc.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Tuple


def point_xyz(x) -> Tuple[float, float, float]:
    """Pad a 1D/2D/3D point to (x, y, z) coordinates."""
    coords = np.atleast_1d(np.asarray(x, dtype=np.float64))
    padded = np.zeros(3)
    n = min(len(coords), 3)
    padded[:n] = coords[:n]
    return float(padded[0]), float(padded[1]), float(padded[2])


class TimeFunc(ABC):
    """Scalar function of time."""

    @abstractmethod
    def __call__(self, t: float) -> float:
        pass


class RealFunc(ABC):
    """Scalar function of space and time."""

    @abstractmethod
    def __call__(self, x, t: float = 0.0) -> float:
        pass

    def is_constant(self) -> bool:
        """True if the function value is independent of x and t."""
        return False


class VecFunc(ABC):
    """Vector-valued function of space and time."""

    @property
    @abstractmethod
    def n_comp(self) -> int:
        """Number of vector components."""
        pass

    @abstractmethod
    def __call__(self, x, t: float = 0.0) -> np.ndarray:
        pass


class STensorFunc(ABC):
    """Symmetric tensor-valued function of space and time."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Spatial dimension of the tensor."""
        pass

    @abstractmethod
    def __call__(self, x, t: float = 0.0) -> np.ndarray:
        pass


class TractionFunc(ABC):
    """Boundary traction depending on the surface normal."""

    @abstractmethod
    def __call__(self, x, n, t: float = 0.0) -> np.ndarray:
        pass
