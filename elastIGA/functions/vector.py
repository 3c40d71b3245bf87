"""
Vector and symmetric tensor functions.

Vector function text formats (selected by the XML 'type' attribute):

    constant     "0.0 -9.81"            space separated component values
    expression   "0 | -rho*g*(1-x)"     '|' separated component expressions

Stress tensor expressions list the independent components separated by '|':

    2D   sxx | syy | sxy
    3D   sxx | syy | szz | sxy | syz | sxz
"""

import logging
import numpy as np
from typing import List, Optional, Sequence

from .base import VecFunc, STensorFunc, point_xyz
from .scalar import compile_expression

logger = logging.getLogger(__name__)


class ConstVecFunc(VecFunc):
    """Constant vector function."""

    def __init__(self, values: Sequence[float]):
        self.values = np.asarray(values, dtype=np.float64)

    @property
    def n_comp(self) -> int:
        return len(self.values)

    def __call__(self, x, t: float = 0.0) -> np.ndarray:
        return self.values.copy()

    def __repr__(self):
        return f"ConstVecFunc({self.values.tolist()})"


class VecExpressionFunc(VecFunc):
    """Vector function with one expression in x, y, z, t per component."""

    def __init__(self, components: Sequence[str]):
        self.texts: List[str] = [c.strip() for c in components]
        if not self.texts or not all(self.texts):
            raise ValueError(f"Empty component in vector expression {list(components)}")
        self._funcs = [compile_expression(c)[1] for c in self.texts]

    @classmethod
    def from_string(cls, text: str) -> 'VecExpressionFunc':
        """Create from '|' separated component expressions."""
        return cls(text.split("|"))

    @property
    def n_comp(self) -> int:
        return len(self._funcs)

    def __call__(self, x, t: float = 0.0) -> np.ndarray:
        xyz = point_xyz(x)
        return np.array([float(f(*xyz, t)) for f in self._funcs])

    def __repr__(self):
        return f"VecExpressionFunc(\"{' | '.join(self.texts)}\")"


# Positions of the independent components in the symmetric tensor
_VOIGT_INDICES = {
    2: [(0, 0), (1, 1), (0, 1)],
    3: [(0, 0), (1, 1), (2, 2), (0, 1), (1, 2), (0, 2)],
}


class STensorExpressionFunc(STensorFunc):
    """Symmetric tensor function given by expressions of its components."""

    def __init__(self, components: Sequence[str], dimension: int):
        if dimension not in _VOIGT_INDICES:
            raise ValueError(f"Unsupported tensor dimension: {dimension}")
        n_expected = len(_VOIGT_INDICES[dimension])
        if len(components) != n_expected:
            raise ValueError(
                f"A {dimension}D symmetric tensor needs {n_expected} components, "
                f"got {len(components)}"
            )
        self._dimension = dimension
        self.texts = [c.strip() for c in components]
        self._funcs = [compile_expression(c)[1] for c in self.texts]

    @classmethod
    def from_string(cls, text: str, dimension: int) -> 'STensorExpressionFunc':
        """Create from '|' separated component expressions."""
        return cls(text.split("|"), dimension)

    @property
    def dimension(self) -> int:
        return self._dimension

    def __call__(self, x, t: float = 0.0) -> np.ndarray:
        xyz = point_xyz(x)
        sigma = np.zeros((self._dimension, self._dimension))
        for (i, j), f in zip(_VOIGT_INDICES[self._dimension], self._funcs):
            sigma[i, j] = sigma[j, i] = float(f(*xyz, t))
        return sigma


def parse_vec_func(text: str, func_type: str = "") -> Optional[VecFunc]:
    """
    Create a vector function from its text definition.

    Parameters:
        text: Function definition (see module docstring)
        func_type: "constant" (or empty) or "expression"

    Returns:
        VecFunc, or None if the text cannot be parsed
    """
    func_type = func_type.lower()
    try:
        if func_type in ("", "constant"):
            values = [float(v) for v in text.split()]
            if not values:
                raise ValueError("no components")
            return ConstVecFunc(values)
        if func_type == "expression":
            return VecExpressionFunc.from_string(text)
    except ValueError as e:
        logger.warning(f"Cannot parse vector function \"{text}\": {e}")
        return None

    logger.warning(f"Unknown vector function type \"{func_type}\"")
    return None
