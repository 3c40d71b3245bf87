"""
Linear isotropic elastic material.

Constitutive relation in Voigt notation, sigma = C * epsilon, with
engineering shear strains. Component ordering:

    1D:              [xx]
    2D:              [xx, yy, xy]
    2D axisymmetric: [rr, zz, tt, rz]
    3D:              [xx, yy, zz, xy, yz, xz]

For 2D, plane stress is the default; plane strain is selected per material.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class LinIsotropic:
    """
    Linear isotropic material.

    Attributes:
        E: Young's modulus
        nu: Poisson's ratio
        rho: Mass density
        plane_strain: Plane strain (2D only, otherwise plane stress)
        axisymmetric: Axisymmetric formulation (2D only)
    """
    E: float = 2.05e11
    nu: float = 0.29
    rho: float = 7.85e3
    plane_strain: bool = False
    axisymmetric: bool = False

    def __post_init__(self):
        """Validate the material constants."""
        self.E = float(self.E)
        self.nu = float(self.nu)
        self.rho = float(self.rho)
        if self.E <= 0.0:
            raise ValueError(f"Young's modulus must be positive, got {self.E}")
        if not -1.0 < self.nu < 0.5:
            raise ValueError(f"Poisson's ratio must lie in (-1, 0.5), got {self.nu}")
        if self.rho < 0.0:
            raise ValueError(f"Mass density must be non-negative, got {self.rho}")

    @property
    def shear_modulus(self) -> float:
        """G = E / (2(1+nu))."""
        return self.E / (2.0 * (1.0 + self.nu))

    @property
    def bulk_modulus(self) -> float:
        """K = E / (3(1-2nu))."""
        return self.E / (3.0 * (1.0 - 2.0 * self.nu))

    def constitutive_matrix(self, n_dim: int) -> np.ndarray:
        """
        Elasticity matrix C in Voigt notation.

        Parameters:
            n_dim: Number of spatial dimensions (1, 2 or 3)

        Returns:
            C: shape (1, 1), (3, 3), (4, 4) for axisymmetry, or (6, 6)
        """
        E, nu = self.E, self.nu

        if n_dim == 1:
            return np.array([[E]])

        if n_dim == 2 and not (self.plane_strain or self.axisymmetric):
            f = E / (1.0 - nu * nu)
            return f * np.array([
                [1.0, nu, 0.0],
                [nu, 1.0, 0.0],
                [0.0, 0.0, 0.5 * (1.0 - nu)],
            ])

        f = E / ((1.0 + nu) * (1.0 - 2.0 * nu))
        g = 0.5 * (1.0 - 2.0 * nu)

        if n_dim == 2 and self.axisymmetric:
            C = np.full((4, 4), nu)
            C[3, :] = C[:, 3] = 0.0
            np.fill_diagonal(C, [1.0 - nu, 1.0 - nu, 1.0 - nu, g])
            return f * C

        if n_dim == 2:
            return f * np.array([
                [1.0 - nu, nu, 0.0],
                [nu, 1.0 - nu, 0.0],
                [0.0, 0.0, g],
            ])

        if n_dim == 3:
            C = np.zeros((6, 6))
            C[:3, :3] = nu
            np.fill_diagonal(C, [1.0 - nu] * 3 + [g] * 3)
            return f * C

        raise ValueError(f"Unsupported dimension: {n_dim}")

    def describe(self) -> str:
        text = f"E = {self.E:g}, nu = {self.nu:g}, rho = {self.rho:g}"
        if self.axisymmetric:
            text += " (axisymmetric)"
        elif self.plane_strain:
            text += " (plane strain)"
        return text
