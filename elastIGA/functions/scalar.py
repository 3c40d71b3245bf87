"""
Scalar functions: constants, time functions and parsed expressions.

Time-varying loads in keyword input are specified by a function name
following the load amplitude A:

    RampT    A * min(t/T, 1)    linear ramp reaching A at time T
    StepT    A for t >= T, else 0
    SinW     A * sin(W*t)
    Linear   A * t
    <expr>   A * expr(t), e.g. "1-exp(-t)"

Expressions are parsed with sympy and compiled to numpy callables, with the
free variables x, y, z and t. Parsing evaluates the text as Python code, so
input files must come from a trusted source.
"""

import logging
import numpy as np
import sympy
from tokenize import TokenError
from typing import Optional, Tuple

from sympy.parsing.sympy_parser import (
    convert_xor, parse_expr, standard_transformations
)

from .base import TimeFunc, RealFunc, point_xyz

logger = logging.getLogger(__name__)

SYMBOLS: Tuple[sympy.Symbol, ...] = sympy.symbols("x y z t")

TRANSFORMATIONS = standard_transformations + (convert_xor,)


def compile_expression(text: str):
    """
    Parse an expression in x, y, z and t into a numpy callable.

    Parameters:
        text: Expression, e.g. "sin(pi*x)*t"

    Returns:
        (expr, func) where func(x, y, z, t) evaluates the expression

    Raises:
        ValueError: If the text is not a valid expression of x, y, z, t
    """
    try:
        expr = parse_expr(text, local_dict={s.name: s for s in SYMBOLS},
                          transformations=TRANSFORMATIONS)
    except (SyntaxError, TokenError, TypeError, AttributeError, sympy.SympifyError) as e:
        raise ValueError(f"Invalid expression \"{text}\": {e}") from None

    # Tuples, lists and relations parse fine but are not scalar expressions
    if not isinstance(expr, sympy.Expr):
        raise ValueError(f"Invalid expression \"{text}\"")

    unknown = expr.free_symbols - set(SYMBOLS)
    if unknown:
        names = ", ".join(sorted(s.name for s in unknown))
        raise ValueError(f"Unknown variables {names} in expression \"{text}\"")

    return expr, sympy.lambdify(SYMBOLS, expr, "numpy")


class ConstFunc(RealFunc):
    """Constant scalar function."""

    def __init__(self, value: float):
        self.value = float(value)

    def __call__(self, x, t: float = 0.0) -> float:
        return self.value

    def is_constant(self) -> bool:
        return True

    def __repr__(self):
        return f"ConstFunc({self.value})"


class LinearFunc(TimeFunc):
    """f(t) = slope * t."""

    def __init__(self, slope: float):
        self.slope = float(slope)

    def __call__(self, t: float) -> float:
        return self.slope * t


class RampFunc(TimeFunc):
    """Linear ramp from 0 at t=0 to amplitude at t=t_end, constant after."""

    def __init__(self, amplitude: float, t_end: float):
        if t_end <= 0.0:
            raise ValueError(f"Ramp end time must be positive, got {t_end}")
        self.amplitude = float(amplitude)
        self.t_end = float(t_end)

    def __call__(self, t: float) -> float:
        return self.amplitude * min(max(t, 0.0) / self.t_end, 1.0)


class StepFunc(TimeFunc):
    """Amplitude for t >= t_step, zero before."""

    def __init__(self, amplitude: float, t_step: float):
        self.amplitude = float(amplitude)
        self.t_step = float(t_step)

    def __call__(self, t: float) -> float:
        return self.amplitude if t >= self.t_step else 0.0


class SineFunc(TimeFunc):
    """amplitude * sin(omega*t)."""

    def __init__(self, amplitude: float, omega: float):
        self.amplitude = float(amplitude)
        self.omega = float(omega)

    def __call__(self, t: float) -> float:
        return self.amplitude * np.sin(self.omega * t)


class TimeExpressionFunc(TimeFunc):
    """Scaled expression in t."""

    def __init__(self, text: str, amplitude: float = 1.0):
        self.text = text
        self.amplitude = float(amplitude)
        self.expr, self._func = compile_expression(text)
        if self.expr.free_symbols - {SYMBOLS[3]}:
            raise ValueError(f"Time function \"{text}\" may only depend on t")

    def __call__(self, t: float) -> float:
        return self.amplitude * float(self._func(0.0, 0.0, 0.0, t))


class ConstTimeFunc(RealFunc):
    """Spatially constant function with a time-varying value."""

    def __init__(self, time_func: TimeFunc):
        self.time_func = time_func

    def __call__(self, x, t: float = 0.0) -> float:
        return self.time_func(t)


class ExpressionFunc(RealFunc):
    """Scalar function given by an expression in x, y, z and t."""

    def __init__(self, text: str):
        self.text = text
        self.expr, self._func = compile_expression(text)

    def __call__(self, x, t: float = 0.0) -> float:
        return float(self._func(*point_xyz(x), t))

    def is_constant(self) -> bool:
        return not self.expr.free_symbols

    def __repr__(self):
        return f"ExpressionFunc(\"{self.text}\")"


def _parse_parameter(name: str, prefix: str) -> Optional[float]:
    """Numeric suffix of a function name like 'Ramp2.5', or None."""
    if not name.lower().startswith(prefix.lower()):
        return None
    try:
        return float(name[len(prefix):])
    except ValueError:
        return None


def parse_time_func(name: str, amplitude: float) -> Optional[TimeFunc]:
    """
    Create a time function from its name and amplitude.

    Parameters:
        name: Function name (see module docstring)
        amplitude: Load amplitude

    Returns:
        TimeFunc, or None if the name cannot be parsed
    """
    if name.lower() == "linear":
        return LinearFunc(amplitude)

    param = _parse_parameter(name, "Ramp")
    if param is not None and param > 0.0:
        return RampFunc(amplitude, param)

    param = _parse_parameter(name, "Step")
    if param is not None:
        return StepFunc(amplitude, param)

    param = _parse_parameter(name, "Sin")
    if param is not None:
        return SineFunc(amplitude, param)

    try:
        return TimeExpressionFunc(name, amplitude)
    except ValueError as e:
        logger.warning(f"Cannot parse time function: {e}")
        return None


def parse_real_func(name: str, amplitude: float) -> Optional[RealFunc]:
    """
    Create a spatially constant, time-varying scalar function.

    Returns:
        ConstTimeFunc wrapping the named time function, or None
    """
    time_func = parse_time_func(name, amplitude)
    return ConstTimeFunc(time_func) if time_func is not None else None
