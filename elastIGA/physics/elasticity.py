"""
Elasticity integrands.

Solves the elasticity equations:
    -div(sigma) = f     in Omega
              u = g     on Gamma_D (Dirichlet)
        sigma.n = t     on Gamma_N (Neumann/traction)

with the body force f = rho*g_grav + f_ext.

The integrand holds the data bound by the driver before each patch or
boundary is integrated:

    material    -> set_material()     (per patch)
    f_ext       -> set_body_force()   (per patch)
    t           -> set_traction()     (per Neumann property)
    g_grav      -> set_gravity()      (global)

and evaluates the resulting loads at a point. The element-level
integration itself is done by the assembly code of the driver.
"""

import logging
import numpy as np
from typing import Optional, Union
from xml.etree import ElementTree

from .integrand import Integrand
from .material import LinIsotropic
from .local_system import LocalSystem, parse_local_system
from ..functions.base import VecFunc, TractionFunc
from ..io.tokenizer import LineTokenizer, InputError
from ..io.xmlutils import get_attribute, get_text, tag_is

logger = logging.getLogger(__name__)


class Elasticity(Integrand):
    """
    Base class for elasticity integrands.

    Attributes:
        material: Material of the current patch
        body_force_func: External body force of the current patch
        traction_func: Traction function of the current Neumann boundary
        vec_traction_func: Vector function used as traction (normal-independent)
        gravity: Gravitation vector (always 3 components)
        local_system: Optional local coordinate system
        dt, dtn: Current and previous time step size
        step: Number of completed time steps
    """

    def __init__(self, n_dim: int):
        super().__init__(n_dim)
        self.material: Optional[LinIsotropic] = None
        self.body_force_func: Optional[VecFunc] = None
        self.traction_func: Optional[TractionFunc] = None
        self.vec_traction_func: Optional[VecFunc] = None
        self.gravity = np.zeros(3)
        self.local_system: Optional[LocalSystem] = None
        self.dt = 0.0
        self.dtn = 0.0
        self.step = 0

    def as_elasticity(self) -> 'Elasticity':
        return self

    def set_material(self, material: Optional[LinIsotropic]):
        """Bind the material of the current patch."""
        self.material = material

    def set_body_force(self, func: Optional[VecFunc]):
        """Bind the external body force of the current patch (None = no load)."""
        self.body_force_func = func

    def set_traction(self, func: Union[VecFunc, TractionFunc, None]):
        """
        Bind the traction of the current Neumann boundary.

        A TractionFunc depends on the surface normal, a VecFunc does not.
        Binding one kind unbinds the other; None unbinds both.
        """
        self.traction_func = func if isinstance(func, TractionFunc) else None
        self.vec_traction_func = func if isinstance(func, VecFunc) else None

    def set_gravity(self, gx: float, gy: float = 0.0, gz: float = 0.0):
        """Set the gravitation vector."""
        self.gravity = np.array([gx, gy, gz], dtype=np.float64)

    def parse_local_system(self, text: str) -> bool:
        """
        Define the local coordinate system from its text definition.

        Returns:
            False if the definition is invalid (the current system is kept)
        """
        try:
            self.local_system = parse_local_system(text, self.n_dim)
        except ValueError as e:
            logger.warning(f"Ignoring local system: {e}")
            return False
        logger.info(f"Local coordinate system: {text}")
        return True

    def parse(self, elem: ElementTree.Element) -> bool:
        """Handle the <gravity> and <localsystem> elements."""
        if tag_is(elem, "gravity"):
            gx = get_attribute(elem, "x", 0.0)
            gy = get_attribute(elem, "y", 0.0)
            gz = get_attribute(elem, "z", 0.0) if self.n_dim == 3 else 0.0
            logger.info(f"\tGravitation vector: {gx} {gy}" + (f" {gz}" if self.n_dim == 3 else ""))
            self.set_gravity(gx, gy, gz)
            return True

        if tag_is(elem, "localsystem"):
            text = get_text(elem)
            if text is not None:
                self.parse_local_system(text)
            return True

        return False

    def advance_step(self, dt: float, dtn: float):
        self.dt = dt
        self.dtn = dtn
        self.step += 1

    def body_force(self, x, t: float = 0.0) -> np.ndarray:
        """
        Total body force at a point, rho*g + f_ext(x, t).

        Returns:
            Body force vector, shape (n_dim,)
        """
        f = np.zeros(self.n_dim)
        if self.material is not None:
            f += self.material.rho * self.gravity[:self.n_dim]
        if self.body_force_func is not None:
            f_ext = self.body_force_func(x, t)
            n = min(len(f_ext), self.n_dim)
            f[:n] += f_ext[:n]
        return f

    def traction(self, x, normal, t: float = 0.0) -> np.ndarray:
        """
        Traction at a boundary point with outward unit normal.

        Returns:
            Traction vector, shape (n_dim,); zero if no traction is bound
        """
        tr = np.zeros(self.n_dim)
        if self.traction_func is not None:
            value = self.traction_func(x, normal, t)
        elif self.vec_traction_func is not None:
            value = self.vec_traction_func(x, t)
        else:
            return tr
        n = min(len(value), self.n_dim)
        tr[:n] = value[:n]
        return tr


class LinearElasticity(Elasticity):
    """
    Linear elasticity with isotropic materials.

    Parameters:
        n_dim: Number of spatial dimensions
        axisymmetric: Axisymmetric formulation (2D only)
        gauss_points_vtf: Gauss point result export (2D only)
    """

    def __init__(self, n_dim: int, axisymmetric: bool = False,
                 gauss_points_vtf: bool = False):
        super().__init__(n_dim)
        self.axisymmetric = axisymmetric and n_dim == 2
        self.gauss_points_vtf = gauss_points_vtf and n_dim == 2

    def parse_mat_prop(self, tokens: LineTokenizer,
                       plane_strain: bool = False) -> LinIsotropic:
        """
        Create a material from the next tokens of a keyword input line.

        Consumes the tokens <E> <nu> <rho>, leaving the rest of the line
        to the caller.

        Raises:
            InputError: For missing, malformed or invalid values
        """
        E = tokens.next_float("Young's modulus")
        nu = tokens.next_float("Poisson's ratio")
        rho = tokens.next_float("mass density")
        try:
            material = LinIsotropic(E, nu, rho, plane_strain and self.n_dim == 2,
                                    self.axisymmetric)
        except ValueError as e:
            raise InputError(f"{e} in \"{tokens.line}\"") from None
        logger.info(f"\t{material.describe()}")
        return material

    def parse_mat_prop_xml(self, elem: ElementTree.Element,
                           plane_strain: bool = False) -> Optional[LinIsotropic]:
        """
        Create a material from the attributes E, nu and rho of an element.

        Missing attributes take the default (steel) values.

        Returns:
            Material, or None for invalid material constants
        """
        defaults = LinIsotropic()
        E = get_attribute(elem, "E", defaults.E)
        nu = get_attribute(elem, "nu", defaults.nu)
        rho = get_attribute(elem, "rho", defaults.rho)
        try:
            material = LinIsotropic(E, nu, rho, plane_strain and self.n_dim == 2,
                                    self.axisymmetric)
        except ValueError as e:
            logger.warning(f"Invalid material <{elem.tag}>: {e}")
            return None
        logger.info(f"\t{material.describe()}")
        return material

    def describe(self) -> str:
        lines = ["Linear elasticity problem:"]
        lines.append(f"\tSpatial dimension: {self.n_dim}")
        if self.axisymmetric:
            lines.append("\tAxisymmetric formulation")
        if np.any(self.gravity != 0.0):
            lines.append(f"\tGravitation vector: {self.gravity[:self.n_dim].tolist()}")
        if self.local_system is not None:
            lines.append(f"\tLocal system: {type(self.local_system).__name__}")
        return "\n".join(lines)
