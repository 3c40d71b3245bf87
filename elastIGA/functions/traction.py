"""
Traction functions for Neumann boundary conditions.

PressureField applies a scalar pressure either along a global axis or along
the surface normal. A positive normal pressure acts against the outward
normal (compression):

    pdir in 1..dim:   t = p * e_pdir
    otherwise:        t = -p * n

TractionField derives the traction from a stress tensor field, t = sigma . n,
which is how Neumann conditions are obtained from an analytical solution.
"""

import numpy as np
from typing import Union

from .base import RealFunc, STensorFunc, TractionFunc
from .scalar import ConstFunc


class PressureField(TractionFunc):
    """
    Pressure load, constant or time-varying.

    Parameters:
        pressure: Constant value or scalar function p(x, t)
        pdir: Global direction (1-based), or 0 for normal pressure
    """

    def __init__(self, pressure: Union[float, RealFunc], pdir: int = 0):
        if isinstance(pressure, RealFunc):
            self.pressure = pressure
        else:
            self.pressure = ConstFunc(pressure)
        self.pdir = pdir

    def __call__(self, x, n, t: float = 0.0) -> np.ndarray:
        n = np.asarray(n, dtype=np.float64)
        p = self.pressure(x, t)
        if 1 <= self.pdir <= len(n):
            traction = np.zeros(len(n))
            traction[self.pdir - 1] = p
            return traction
        return -p * n

    def __repr__(self):
        return f"PressureField({self.pressure!r}, pdir={self.pdir})"


class TractionField(TractionFunc):
    """Traction derived from a stress tensor field."""

    def __init__(self, stress: STensorFunc):
        self.stress = stress

    def __call__(self, x, n, t: float = 0.0) -> np.ndarray:
        n = np.asarray(n, dtype=np.float64)
        sigma = self.stress(x, t)
        return sigma[:len(n), :len(n)] @ n
