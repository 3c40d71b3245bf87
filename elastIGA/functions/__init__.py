"""
Function objects for loads, boundary conditions and analytical solutions.
"""

from .base import TimeFunc, RealFunc, VecFunc, STensorFunc, TractionFunc
from .scalar import (
    ConstFunc,
    LinearFunc,
    RampFunc,
    StepFunc,
    SineFunc,
    ConstTimeFunc,
    ExpressionFunc,
    parse_real_func,
)
from .vector import ConstVecFunc, VecExpressionFunc, STensorExpressionFunc, parse_vec_func
from .traction import PressureField, TractionField
from .anasol import AnalyticalSolution
