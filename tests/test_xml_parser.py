"""
Tests for the XML input sections of the elasticity driver.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose
from xml.etree import ElementTree

from elastIGA.functions.vector import ConstVecFunc, VecExpressionFunc
from elastIGA.model.property import Property, PropertyKind
from elastIGA.sim.elasticity import SIMElasticity


MODEL_2D = """<?xml version="1.0"?>
<simulation>
  <geometry>
    <patches count="2"/>
    <topologysets>
      <set name="body">
        <item patch="1"/>
      </set>
      <set name="left" type="edge">
        <item patch="1">4</item>
      </set>
      <set name="right" type="edge">
        <item patch="2">2</item>
      </set>
    </topologysets>
  </geometry>
  <elasticity>
    <isotropic set="body" E="2.1e11" nu="0.3" rho="7850"/>
    <bodyforce set="body" type="expression">0 | -9.81*x</bodyforce>
    <gravity x="0" y="-9.81"/>
  </elasticity>
  <boundaryconditions>
    <dirichlet set="left" comp="12"/>
    <neumann set="right">1000 0</neumann>
  </boundaryconditions>
</simulation>
"""


@pytest.fixture
def model_file(tmp_path):
    """The 2D model written to an .xinp file."""
    path = tmp_path / "model.xinp"
    path.write_text(MODEL_2D)
    return path


def element(text):
    return ElementTree.fromstring(text)


class TestModelFile:
    """Tests for reading a complete XML model."""

    def test_read(self, make_sim, model_file):
        sim = make_sim(n_patches=0)
        assert sim.read(model_file)
        assert sim.n_patches == 2
        assert len(sim.properties) == 4

    def test_material_binding(self, make_sim, model_file):
        """The body set gets code 1, which is rebound to material 0."""
        sim = make_sim(n_patches=0)
        sim.read(model_file)

        assert len(sim.materials) == 1
        assert sim.materials[0].E == 2.1e11
        material = sim.properties[0]
        assert material.kind == PropertyKind.MATERIAL
        assert (material.index, material.patch) == (0, 1)

    def test_body_force(self, make_sim, model_file):
        """The body force code starts at 12 in 2D."""
        sim = make_sim(n_patches=0)
        sim.read(model_file)

        body = sim.properties[1]
        assert body.kind == PropertyKind.BODYLOAD
        assert body.index == 12
        func = sim.get_vec_func(1, PropertyKind.BODYLOAD)
        assert isinstance(func, VecExpressionFunc)
        assert_allclose(func([2.0, 0.0]), [0.0, -19.62])
        assert sim.get_vec_func(2, PropertyKind.BODYLOAD) is None

    def test_dirichlet_code_is_unique(self, make_sim, model_file):
        """Code 12 is taken by the body force, so the Dirichlet set gets 1012."""
        sim = make_sim(n_patches=0)
        sim.read(model_file)

        dirichlet = sim.properties[2]
        assert dirichlet.kind == PropertyKind.DIRICHLET
        assert dirichlet.index == 1012
        assert dirichlet.dofs == 12
        assert (dirichlet.patch, dirichlet.ldim, dirichlet.lindx) == (1, 1, 4)

    def test_neumann(self, make_sim, model_file):
        sim = make_sim(n_patches=0)
        sim.read(model_file)

        neumann = sim.properties[3]
        assert neumann.kind == PropertyKind.NEUMANN
        assert neumann.index == 1
        assert neumann.patch == 2
        assert isinstance(sim.vectors[1], ConstVecFunc)
        assert_allclose(sim.vectors[1]([0.0, 0.0]), [1000.0, 0.0])

    def test_gravity(self, make_sim, model_file):
        sim = make_sim(n_patches=0)
        sim.read(model_file)
        assert_allclose(sim.get_integrand().gravity, [0.0, -9.81, 0.0])

    def test_invalid_xml(self, make_sim, tmp_path):
        path = tmp_path / "broken.xinp"
        path.write_text("<simulation><elasticity></simulation>")
        assert not make_sim().read(path)


class TestElasticitySection:
    """Tests for individual children of <elasticity>."""

    def test_isotropic_by_code(self, make_sim):
        sim = make_sim()
        sim.properties.append(Property(PropertyKind.UNDEFINED, 3, 1, 2))
        assert sim.parse_xml(element(
            '<elasticity><isotropic code="3" E="1e9" nu="0.2" rho="1000"/></elasticity>'))

        assert len(sim.materials) == 1
        assert sim.properties[0].kind == PropertyKind.MATERIAL
        assert sim.properties[0].index == 0

    def test_isotropic_defaults(self, make_sim):
        """Missing constants take the default steel values."""
        sim = make_sim()
        sim.parse_xml(element('<elasticity><isotropic E="1e9"/></elasticity>'))
        material = sim.materials[0]
        assert material.E == 1e9
        assert material.nu == 0.29
        assert material.rho == 7850.0
        assert sim.properties == []

    def test_invalid_isotropic_skipped(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element('<elasticity><isotropic nu="0.7"/></elasticity>'))
        assert sim.materials == []

    def test_plane_strain(self, make_sim):
        sim = make_sim(plane_strain=True)
        sim.parse_xml(element('<elasticity><isotropic/></elasticity>'))
        assert sim.materials[0].plane_strain

    def test_axisymmetric(self, make_sim):
        sim = make_sim(axisymmetric=True)
        sim.parse_xml(element('<elasticity><isotropic/></elasticity>'))
        assert sim.materials[0].axisymmetric
        assert sim.get_integrand().axisymmetric

    def test_body_force_by_code(self, make_sim):
        sim = make_sim()
        sim.properties.append(Property(PropertyKind.UNDEFINED, 5, 1, 2))
        sim.parse_xml(element('<elasticity><bodyforce code="5">1 2</bodyforce></elasticity>'))

        assert sim.properties[0].kind == PropertyKind.BODYLOAD
        assert_allclose(sim.vectors[5]([0.0, 0.0]), [1.0, 2.0])

    def test_body_force_without_entities(self, make_sim):
        """A body force whose code matches no entity is not stored."""
        sim = make_sim()
        assert sim.parse_xml(element('<elasticity><bodyforce code="5">1 2</bodyforce></elasticity>'))
        assert sim.vectors == {}

    def test_body_force_not_an_expression(self, make_sim):
        """Component text that parses to a list is skipped."""
        sim = make_sim()
        sim.parse_xml(element(
            '<geometry><topologysets><set name="b"><item patch="1"/></set></topologysets></geometry>'))
        assert sim.parse_xml(element(
            '<elasticity><bodyforce set="b" type="expression">[1] | 0</bodyforce></elasticity>'))
        assert sim.vectors == {}
        assert all(p.kind != PropertyKind.BODYLOAD for p in sim.properties)
        assert sim.get_vec_func(1, PropertyKind.BODYLOAD) is None

    def test_body_force_code_3d(self, make_sim):
        sim = make_sim(dimension=3)
        sim.parse_xml(element(
            '<geometry><topologysets><set name="all"><item patch="1"/></set></topologysets></geometry>'))
        sim.parse_xml(element('<elasticity><bodyforce set="all">0 0 -1</bodyforce></elasticity>'))
        assert 123 in sim.vectors

    def test_gravity_3d(self, make_sim):
        sim = make_sim(dimension=3)
        sim.parse_xml(element('<elasticity><gravity x="1" y="2" z="3"/></elasticity>'))
        assert_allclose(sim.get_integrand().gravity, [1.0, 2.0, 3.0])

    def test_gravity_z_ignored_in_2d(self, make_sim):
        sim = make_sim()
        sim.parse_xml(element('<elasticity><gravity x="1" y="2" z="3"/></elasticity>'))
        assert_allclose(sim.get_integrand().gravity, [1.0, 2.0, 0.0])

    def test_local_system(self, make_sim):
        sim = make_sim(dimension=3)
        sim.parse_xml(element('<elasticity><localsystem>cylindricX</localsystem></elasticity>'))
        assert sim.get_integrand().local_system.axis == 0

    def test_case_insensitive_tags(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element('<Elasticity><Isotropic E="1e9"/></Elasticity>'))
        assert len(sim.materials) == 1

    def test_failed_delegation(self, make_sim):
        """A failing child handled by the base driver fails the section."""
        sim = make_sim()
        ok = sim.parse_xml(element(
            '<elasticity>'
            '  <geometry><partitioning><part proc="0" lower="3" upper="1"/></partitioning></geometry>'
            '  <isotropic E="1e9"/>'
            '</elasticity>'))
        assert not ok
        # The remaining children are still parsed
        assert len(sim.materials) == 1

    def test_unknown_child_ignored(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element('<elasticity><nonsense/></elasticity>'))

    def test_dimension_specific_hook(self):
        class Hooked(SIMElasticity):
            def parse_dim_specific_xml(self, elem):
                return elem.tag == "isotropic"

        sim = Hooked(2)
        assert sim.parse_xml(element('<elasticity><isotropic/></elasticity>'))
        assert sim.materials == []


class TestBaseSections:
    """Tests for the sections handled by the base driver."""

    def test_bad_partition(self, make_sim):
        sim = make_sim()
        assert not sim.parse_xml(element(
            '<geometry><partitioning><part proc="0" lower="3" upper="1"/></partitioning></geometry>'))

    def test_partition(self, make_sim):
        sim = make_sim(n_patches=0, rank=1)
        assert sim.parse_xml(element(
            '<geometry><partitioning>'
            '<part proc="0" lower="1" upper="2"/>'
            '<part proc="1" lower="3" upper="4"/>'
            '</partitioning></geometry>'))
        assert sim.n_patches == 2
        assert sim.get_local_patch_index(4) == 2
        assert sim.get_local_patch_index(1) == 0

    def test_unknown_topology_type_ignored(self, make_sim):
        sim = make_sim()
        sim.parse_xml(element(
            '<geometry><topologysets><set name="s" type="blob"><item patch="1"/></set>'
            '</topologysets></geometry>'))
        assert "s" not in sim.topology_sets

    def test_undefined_set(self, make_sim):
        sim = make_sim()
        assert sim.get_unique_property_code("missing") == 0
        assert sim.get_unique_property_code("") == 0

    def test_anasol_dirichlet_marker(self, make_sim):
        sim = make_sim()
        sim.properties.append(Property(PropertyKind.UNDEFINED, 7, 1, 1, 2))
        sim.parse_xml(element(
            '<boundaryconditions><dirichlet code="7" comp="1" type="anasol"/></boundaryconditions>'))
        assert sim.properties[0].kind == PropertyKind.DIRICHLET_ANASOL
        assert sim.properties[0].dofs == 1

    def test_inhomogeneous_dirichlet(self, make_sim):
        sim = make_sim()
        sim.properties.append(Property(PropertyKind.UNDEFINED, 7, 1, 1, 2))
        sim.parse_xml(element(
            '<boundaryconditions><dirichlet code="7" comp="2">0.01</dirichlet></boundaryconditions>'))
        assert sim.properties[0].kind == PropertyKind.DIRICHLET_INHOM
        assert_allclose(sim.vectors[7]([0.0, 0.0]), [0.01])

    def test_anasol(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element(
            '<anasol type="expression"><primary>x | 0</primary><stress>1 | 2 | 0</stress></anasol>'))
        solution = sim.analytical_solution
        assert_allclose(solution.get_vector_sol()([3.0, 0.0]), [3.0, 0.0])
        assert_allclose(solution.get_stress_sol()([0.0, 0.0]), np.diag([1.0, 2.0]))

    def test_anasol_not_an_expression(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element('<anasol type="expression"><primary>a,b</primary></anasol>'))
        assert sim.analytical_solution is None

    def test_unsupported_anasol_ignored(self, make_sim):
        sim = make_sim()
        assert sim.parse_xml(element('<anasol type="function"/>'))
        assert sim.analytical_solution is None

    def test_unknown_element_ignored(self, make_sim):
        assert make_sim().parse_xml(element("<postprocessing/>"))
