"""
Unit tests for the isotropic material, local systems and the elasticity integrand.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from elastIGA.functions.traction import PressureField
from elastIGA.functions.vector import ConstVecFunc
from elastIGA.io.tokenizer import InputError, LineTokenizer
from elastIGA.physics.elasticity import LinearElasticity
from elastIGA.physics.local_system import CylindricalSystem, parse_local_system
from elastIGA.physics.material import LinIsotropic


class TestLinIsotropic:
    """Tests for LinIsotropic."""

    def test_moduli(self):
        mat = LinIsotropic(E=2.6, nu=0.3)
        assert mat.shear_modulus == pytest.approx(1.0)
        assert mat.bulk_modulus == pytest.approx(2.6 / 1.2)

    @pytest.mark.parametrize("kwargs", [
        {"E": 0.0},
        {"nu": 0.5},
        {"nu": -1.0},
        {"rho": -1.0},
    ])
    def test_invalid_constants(self, kwargs):
        with pytest.raises(ValueError):
            LinIsotropic(**kwargs)

    def test_1d(self):
        assert_allclose(LinIsotropic(E=3.0).constitutive_matrix(1), [[3.0]])

    def test_plane_stress(self, tolerance):
        C = LinIsotropic(E=1.0, nu=0.25).constitutive_matrix(2)
        f = 1.0 / (1.0 - 0.0625)
        expected = f * np.array([[1.0, 0.25, 0.0],
                                 [0.25, 1.0, 0.0],
                                 [0.0, 0.0, 0.375]])
        assert_allclose(C, expected, atol=tolerance)

    def test_plane_strain(self, tolerance):
        C = LinIsotropic(E=1.0, nu=0.25, plane_strain=True).constitutive_matrix(2)
        f = 1.0 / (1.25 * 0.5)
        expected = f * np.array([[0.75, 0.25, 0.0],
                                 [0.25, 0.75, 0.0],
                                 [0.0, 0.0, 0.25]])
        assert_allclose(C, expected, atol=tolerance)

    def test_axisymmetric(self):
        C = LinIsotropic(E=1.0, nu=0.25, axisymmetric=True).constitutive_matrix(2)
        assert C.shape == (4, 4)
        assert_allclose(C, C.T)
        assert C[3, 0] == 0.0
        assert C[0, 2] == pytest.approx(C[0, 1])

    def test_3d(self):
        mat = LinIsotropic(E=2.6, nu=0.3)
        C = mat.constitutive_matrix(3)
        assert C.shape == (6, 6)
        assert_allclose(C, C.T)
        # Shear terms equal the shear modulus
        assert C[3, 3] == pytest.approx(mat.shear_modulus)
        assert C[0, 3] == 0.0

    def test_describe(self):
        assert LinIsotropic(E=1e9, nu=0.3, rho=1000, plane_strain=True).describe() == \
            "E = 1e+09, nu = 0.3, rho = 1000 (plane strain)"


class TestLocalSystem:
    """Tests for local coordinate systems."""

    def test_cartesian(self):
        assert parse_local_system("cartesian", 3) is None

    @pytest.mark.parametrize("text, axis", [
        ("cylindric", 2),
        ("cylindrical Y", 1),
        ("cylinderX", 0),
        ("Cylindricz", 2),
    ])
    def test_cylindrical(self, text, axis):
        system = parse_local_system(text, 3)
        assert isinstance(system, CylindricalSystem)
        assert system.axis == axis

    @pytest.mark.parametrize("text", ["", "spherical", "cylindric W"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_local_system(text, 3)

    def test_2d_requires_z_axis(self):
        with pytest.raises(ValueError):
            parse_local_system("cylindric X", 2)

    def test_rotation(self, tolerance):
        T = CylindricalSystem(axis=2).rotation([0.0, 2.0, 1.0])
        expected = np.array([[0.0, 1.0, 0.0],
                             [-1.0, 0.0, 0.0],
                             [0.0, 0.0, 1.0]])
        assert_allclose(T, expected, atol=tolerance)
        assert CylindricalSystem(axis=2, n_dim=2).rotation([1.0, 0.0]).shape == (2, 2)


class TestLinearElasticity:
    """Tests for the elasticity integrand."""

    def test_capability(self):
        integrand = LinearElasticity(2)
        assert integrand.as_elasticity() is integrand

    def test_parse_mat_prop_leaves_rest(self):
        integrand = LinearElasticity(2)
        tokens = LineTokenizer("2.1e11 0.3 7850 1 2")
        mat = integrand.parse_mat_prop(tokens, plane_strain=True)
        assert mat.plane_strain
        assert tokens.remaining() == ["1", "2"]

    def test_parse_mat_prop_invalid(self):
        with pytest.raises(InputError):
            LinearElasticity(3).parse_mat_prop(LineTokenizer("-1 0.3 7850"))

    def test_plane_strain_only_in_2d(self):
        mat = LinearElasticity(3).parse_mat_prop(LineTokenizer("1 0.3 1"), plane_strain=True)
        assert not mat.plane_strain

    def test_body_force(self):
        integrand = LinearElasticity(2)
        integrand.set_material(LinIsotropic(rho=2.0))
        integrand.set_gravity(0.0, -10.0)
        integrand.set_body_force(ConstVecFunc([1.0, 1.0, 1.0]))
        assert_allclose(integrand.body_force([0.0, 0.0]), [1.0, -19.0])

    def test_no_body_force(self):
        assert_allclose(LinearElasticity(3).body_force([0.0, 0.0, 0.0]), np.zeros(3))

    def test_traction_kinds_exclusive(self):
        integrand = LinearElasticity(2)
        integrand.set_traction(PressureField(1.0))
        integrand.set_traction(ConstVecFunc([2.0, 3.0]))
        assert integrand.traction_func is None
        assert_allclose(integrand.traction([0.0, 0.0], [1.0, 0.0]), [2.0, 3.0])

        integrand.set_traction(None)
        assert_allclose(integrand.traction([0.0, 0.0], [1.0, 0.0]), [0.0, 0.0])

    def test_describe(self):
        integrand = LinearElasticity(2, axisymmetric=True)
        integrand.set_gravity(0.0, -9.81)
        text = integrand.describe()
        assert "Axisymmetric" in text
        assert "Gravitation" in text
