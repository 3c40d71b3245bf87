"""
Solution driver for NURBS-based linear elastic analysis.

Reads the elasticity sections of a model description and resolves them
into property records, function objects and materials:

Keyword input:
    ISOTROPIC n            n lines: <code> <E> <nu> <rho>
    GRAVITY gx gy [gz]     gravitation vector (gz in 3D only)
    MATERIAL n             n lines: <E> <nu> <rho> (ALL | <patch> ...)
    PRESSURE n             n lines: <patch> <face> <dir> <p> [<function>]
    CONSTANT_PRESSURE n    n lines: <code> <dir> <p>
    LINEAR_PRESSURE n      n lines: <code> <dir> <p>   (p*t)
    LOCAL_SYSTEM <text>    local coordinate system

XML input (inside <elasticity>):
    <isotropic set="..." code="..." E="..." nu="..." rho="..."/>
    <bodyforce set="..." code="..." type="constant|expression">...</bodyforce>
    <gravity x="..." y="..." z="..."/>
    <localsystem>...</localsystem>

Analytical boundary conditions:
    Dirichlet and Neumann conditions may be declared as derived from the
    analytical solution (*_ANASOL). They are resolved once, in
    preprocess_a(): the displacement field can be bound to a single
    Dirichlet property code only (the first one encountered), whereas every
    Neumann condition gets its own traction field derived from the stress
    solution.
"""

from __future__ import annotations

import logging
from typing import List, Optional, TextIO
from xml.etree import ElementTree

from .base import SIMbase, TimeStep
from ..functions.scalar import ConstTimeFunc, LinearFunc, parse_real_func
from ..functions.traction import PressureField, TractionField
from ..functions.vector import parse_vec_func
from ..io.config import ElasticityConfig
from ..io.tokenizer import InputError, LineTokenizer, keyword_argument, read_line
from ..io.xmlutils import get_attribute, get_text, tag_is
from ..model.property import Property, PropertyKind
from ..physics.elasticity import Elasticity, LinearElasticity
from ..physics.integrand import Integrand
from ..physics.material import LinIsotropic

logger = logging.getLogger(__name__)


class SIMElasticity(SIMbase):
    """
    Driver for isogeometric analysis of elasticity problems.

    Example usage:
        sim = SIMElasticity(dimension=2, config=ElasticityConfig(plane_strain=True))
        if not sim.read("beam.xinp") or not sim.preprocess():
            raise SystemExit(1)

        for patch in range(1, sim.n_patches + 1):
            sim.setup_patch(patch)

    Attributes:
        materials: Material list; MATERIAL records index into it
        context: XML tag holding the elasticity input sections
        a_code: Property code bound to the analytical displacement field
                (0 = none). The field is owned by the analytical solution.
    """

    def __init__(self, dimension: int, config: Optional[ElasticityConfig] = None):
        """
        Initialize driver.

        Parameters:
            dimension: Number of spatial dimensions (2 or 3)
            config: Elasticity configuration, defaults to ElasticityConfig()
        """
        config = config if config is not None else ElasticityConfig()
        super().__init__(dimension, config)
        if dimension != 2 and config.has_2d_options:
            logger.warning(f"2D-only options are ignored in {dimension}D")

        self.materials: List[LinIsotropic] = []
        self.context = "elasticity"
        self.a_code = 0

    @property
    def plane_strain(self) -> bool:
        """Plane strain option (2D only)."""
        return self.dimension == 2 and self.config.plane_strain

    def get_name(self) -> str:
        return "Elasticity"

    def get_integrand(self) -> Integrand:
        """Return the integrand, creating a LinearElasticity if necessary."""
        if self.problem is None:
            if self.dimension == 2:
                self.problem = LinearElasticity(2, self.config.axisymmetric,
                                                self.config.gauss_points_vtf)
            else:
                self.problem = LinearElasticity(self.dimension)
        return self.problem

    def _elasticity(self) -> Optional[Elasticity]:
        """Elasticity capability of the current integrand, or None."""
        return self.problem.as_elasticity() if self.problem is not None else None

    def _elasticity_input(self) -> Elasticity:
        """The elasticity capability of the integrand, for keyword input."""
        integrand = self.get_integrand()
        elasticity = integrand.as_elasticity()
        if elasticity is None:
            raise InputError(f"Integrand {type(integrand).__name__} is not an elasticity integrand")
        return elasticity

    def _linear_elasticity(self) -> LinearElasticity:
        """The integrand, for material parsing."""
        integrand = self.get_integrand()
        if not isinstance(integrand, LinearElasticity):
            raise InputError(f"Integrand {type(integrand).__name__} cannot parse materials")
        return integrand

    def advance_step(self, time_step: TimeStep) -> bool:
        elasticity = self._elasticity()
        if elasticity is not None:
            elasticity.advance_step(time_step.dt, time_step.dtn)
        return True

    def clear_properties(self):
        """
        Remove all property records, function objects and materials.

        The analytical displacement field is dropped from the function maps
        before they are cleared, as it is owned by the analytical solution.
        """
        if self.a_code > 0:
            self.vectors.pop(self.a_code, None)
        self.a_code = 0

        elasticity = self._elasticity()
        if elasticity is not None:
            elasticity.set_material(None)
            elasticity.set_body_force(None)
            elasticity.set_traction(None)

        self.materials.clear()
        super().clear_properties()

    # ------------------------------------------------------------------
    # Pre-processing
    # ------------------------------------------------------------------

    def preprocess_a(self):
        """
        Resolve boundary conditions derived from the analytical solution.

        Also makes sure the integrand exists, in case the input did not
        contain any elasticity section.
        """
        self.get_integrand()
        self.print_problem()

        if self.analytical_solution is None:
            return

        for prop in self.properties:
            if prop.kind == PropertyKind.DIRICHLET_ANASOL:
                self._resolve_dirichlet_anasol(prop)
            elif prop.kind == PropertyKind.NEUMANN_ANASOL:
                self._resolve_neumann_anasol(prop)

    def _resolve_dirichlet_anasol(self, prop: Property):
        vec_field = self.analytical_solution.get_vector_sol()
        if vec_field is None:
            prop.kind = PropertyKind.UNDEFINED
        elif self.a_code == prop.code:
            prop.kind = PropertyKind.DIRICHLET_INHOM
        elif self.a_code == 0:
            self.a_code = prop.code
            self.vectors[self.a_code] = vec_field
            prop.kind = PropertyKind.DIRICHLET_INHOM
        else:
            logger.warning(f"Analytical displacement already bound to code {self.a_code}, "
                           f"dropping {prop.describe(self.dimension)}")
            prop.kind = PropertyKind.UNDEFINED

    def _resolve_neumann_anasol(self, prop: Property):
        stress_field = self.analytical_solution.get_stress_sol()
        if stress_field is None:
            prop.kind = PropertyKind.UNDEFINED
        else:
            prop.kind = PropertyKind.NEUMANN
            self.tractions[prop.index] = TractionField(stress_field)

    # ------------------------------------------------------------------
    # Keyword input
    # ------------------------------------------------------------------

    def parse_dim_specific(self, keyword: str, stream: TextIO) -> bool:
        """Dimension-specific keyword hook, tried before all other keywords."""
        return False

    def parse(self, keyword: str, stream: TextIO) -> bool:
        """
        Parse a data section of keyword input.

        Parameters:
            keyword: The keyword line starting the section
            stream: The stream to read data lines from

        Returns:
            False on invalid input
        """
        try:
            return self._parse_elasticity_keyword(keyword, stream)
        except InputError as e:
            logger.error(f"SIMElasticity.parse: {e}")
            return False

    def _parse_elasticity_keyword(self, keyword: str, stream: TextIO) -> bool:
        key = keyword.upper()
        n_const_press = 0
        n_linear_press = 0

        if self.parse_dim_specific(keyword, stream):
            return True

        elif key.startswith("ISOTROPIC"):
            n_mat = keyword_argument(keyword, "ISOTROPIC").next_int("number of materials")
            logger.info(f"Number of isotropic materials: {n_mat}")
            integrand = self._linear_elasticity()
            for _ in range(n_mat):
                line = read_line(stream)
                if line is None:
                    break
                tokens = LineTokenizer(line)
                code = tokens.next_int("material code")
                logger.info(f"\tMaterial code {code}:")
                if code > 0:
                    self.set_property_type(code, PropertyKind.MATERIAL, len(self.materials))
                self.materials.append(integrand.parse_mat_prop(tokens, self.plane_strain))

        elif key.startswith("GRAVITY"):
            tokens = keyword_argument(keyword, "GRAVITY")
            gx = tokens.next_float("gravity x-component")
            gy = tokens.next_float("gravity y-component")
            gz = tokens.next_float("gravity z-component") if self.dimension == 3 else 0.0
            logger.info(f"Gravitation vector: {gx} {gy}" + (f" {gz}" if self.dimension == 3 else ""))
            self._elasticity_input().set_gravity(gx, gy, gz)

        elif key.startswith("CONSTANT_PRESSURE"):
            n_const_press = keyword_argument(keyword, "CONSTANT_PRESSURE").next_int("number of pressures")
        elif key.startswith("LINEAR_PRESSURE"):
            n_linear_press = keyword_argument(keyword, "LINEAR_PRESSURE").next_int("number of pressures")

        # The remaining keywords are the legacy format, specifying properties
        # directly onto the topological entities (patches and faces) of the model.

        elif key.startswith("PRESSURE"):
            n_pres = keyword_argument(keyword, "PRESSURE").next_int("number of pressures")
            logger.info(f"Number of pressures: {n_pres}")
            for i in range(n_pres):
                line = read_line(stream)
                if line is None:
                    break
                if not self._parse_pressure_line(LineTokenizer(line), 1 + i):
                    return False

        elif key.startswith("MATERIAL"):
            n_mat = keyword_argument(keyword, "MATERIAL").next_int("number of materials")
            logger.info(f"Number of materials: {n_mat}")
            integrand = self._linear_elasticity()
            for _ in range(n_mat):
                line = read_line(stream)
                if line is None:
                    break
                tokens = LineTokenizer(line)
                logger.info("\tMaterial data:")
                self.materials.append(integrand.parse_mat_prop(tokens, self.plane_strain))
                if not self._parse_material_patches(tokens):
                    return False

        elif key.startswith("LOCAL_SYSTEM"):
            text = keyword[len("LOCAL_SYSTEM"):].strip()
            self._elasticity_input().parse_local_system(text)

        else:
            return super().parse(keyword, stream)

        n_pres = n_const_press + n_linear_press
        if n_pres > 0:
            logger.info(f"Number of pressures: {n_pres}")
            for _ in range(n_pres):
                line = read_line(stream)
                if line is None:
                    break
                tokens = LineTokenizer(line)
                code = tokens.next_int("pressure code")
                pdir = tokens.next_int("pressure direction")
                p = tokens.next_float("pressure")
                logger.info(f"\tPressure code {code} direction {pdir}: {p}")

                self.set_property_type(code, PropertyKind.NEUMANN)

                if n_linear_press:
                    self.tractions[code] = PressureField(ConstTimeFunc(LinearFunc(p)), pdir)
                else:
                    self.tractions[code] = PressureField(p, pdir)

        return True

    def _parse_pressure_line(self, tokens: LineTokenizer, index: int) -> bool:
        """
        Parse one '<patch> <face> <dir> <p> [<function>]' line of PRESSURE.

        With an analytical stress solution, the traction is derived from it
        and the direction and value tokens are not read.
        """
        patch = tokens.next_int("patch")
        pid = self.get_local_patch_index(patch)
        if pid < 0:
            logger.error(f"Invalid patch number {patch}")
            return False
        if pid == 0:
            return True

        face = tokens.next_int("face index")
        if face < 1 or face > 2 * self.dimension:
            logger.error(f"SIMElasticity.parse: Invalid face index {face}")
            return False

        entity = f"P{patch} {'F' if self.dimension == 3 else 'E'}{face}"
        stress_field = (self.analytical_solution.get_stress_sol()
                        if self.analytical_solution is not None else None)
        if stress_field is not None:
            logger.info(f"\tTraction on {entity}")
            self.tractions[index] = TractionField(stress_field)
        else:
            pdir = tokens.next_int("pressure direction")
            p = tokens.next_float("pressure")
            func_name = tokens.next_str()
            if func_name is not None:
                pf = parse_real_func(func_name, p)
                if pf is None:
                    raise InputError(f"Invalid pressure function \"{func_name}\"")
                logger.info(f"\tPressure on {entity} direction {pdir}: {p} {func_name}")
                self.tractions[index] = PressureField(pf, pdir)
            else:
                logger.info(f"\tPressure on {entity} direction {pdir}: {p}")
                self.tractions[index] = PressureField(p, pdir)

        self.properties.append(
            Property(PropertyKind.NEUMANN, index, pid, self.dimension - 1, face))
        return True

    def _parse_material_patches(self, tokens: LineTokenizer) -> bool:
        """Bind the last material to the patches listed on the rest of a line."""
        for token in tokens.remaining():
            if token.upper().startswith("ALL"):
                logger.info("\t(for all patches)")
                continue

            try:
                patch = int(token)
            except ValueError:
                raise InputError(f"Invalid patch \"{token}\" in \"{tokens.line}\"") from None

            pid = self.get_local_patch_index(patch)
            if pid < 0:
                logger.error(f"Invalid patch number {patch}")
                return False
            if pid == 0:
                continue

            logger.info(f"\t(for P{patch})")
            self.properties.append(
                Property(PropertyKind.MATERIAL, len(self.materials) - 1, pid, self.dimension))
        return True

    # ------------------------------------------------------------------
    # XML input
    # ------------------------------------------------------------------

    def parse_dim_specific_xml(self, elem: ElementTree.Element) -> bool:
        """Dimension-specific XML hook, tried before all other elements."""
        return False

    def parse_material_set(self, elem: ElementTree.Element, mat_index: int) -> int:
        """
        Bind a material position to the entities given by an element.

        The entities are given either by a topology set (attribute 'set')
        or by an existing property code (attribute 'code').

        Returns:
            The property code, or 0 if the material is not bound to any entity
        """
        code = self.get_unique_property_code(get_attribute(elem, "set", ""))
        if code == 0:
            code = get_attribute(elem, "code", 0)
        if code > 0:
            self.set_property_type(code, PropertyKind.MATERIAL, mat_index)
        return code

    def parse_xml(self, elem: ElementTree.Element) -> bool:
        """
        Parse a data section of XML input.

        Only the <elasticity> element is handled here, all others are
        passed to the base driver.

        Returns:
            False if a section delegated to the base driver failed
        """
        if not tag_is(elem, self.context):
            return super().parse_xml(elem)

        ok = True
        for child in elem:
            if not isinstance(child.tag, str):
                continue

            if self.parse_dim_specific_xml(child):
                continue

            elif tag_is(child, "isotropic"):
                integrand = self._linear_elasticity_xml()
                material = (integrand.parse_mat_prop_xml(child, self.plane_strain)
                            if integrand is not None else None)
                if material is None:
                    continue
                code = self.parse_material_set(child, len(self.materials))
                logger.info(f"\tMaterial code {code}")
                self.materials.append(material)

            elif tag_is(child, "bodyforce"):
                self._parse_body_force(child)

            elif not self.get_integrand().parse(child):
                ok = super().parse_xml(child) and ok

        return ok

    def _linear_elasticity_xml(self) -> Optional[LinearElasticity]:
        integrand = self.get_integrand()
        if isinstance(integrand, LinearElasticity):
            return integrand
        logger.warning(f"Integrand {type(integrand).__name__} cannot parse materials")
        return None

    def _parse_body_force(self, elem: ElementTree.Element):
        code = self.get_unique_property_code(get_attribute(elem, "set", ""),
                                             123 if self.dimension == 3 else 12)
        if code == 0:
            code = get_attribute(elem, "code", 0)

        text = get_text(elem)
        if text is None or code <= 0:
            return

        func_type = get_attribute(elem, "type", "", lower_case=True)
        logger.info(f"\tBodyforce code {code}" + (f" ({func_type})" if func_type else ""))
        func = parse_vec_func(text, func_type)
        if func is not None:
            self.set_vec_property(code, PropertyKind.BODYLOAD, func)

    # ------------------------------------------------------------------
    # Initialization callbacks
    # ------------------------------------------------------------------

    def init_material(self, prop_index: int) -> bool:
        """
        Bind a material into the integrand.

        Indices beyond the end of the material list select the last material.

        Parameters:
            prop_index: Material position (index of a MATERIAL record)
        """
        elasticity = self._elasticity()
        if elasticity is None:
            return False
        if not self.materials:
            logger.error("No materials defined")
            return False

        prop_index = min(prop_index, len(self.materials) - 1)
        elasticity.set_material(self.materials[prop_index])
        return True

    def init_body_load(self, patch: int) -> bool:
        """
        Bind the body force of a patch into the integrand.

        Parameters:
            patch: 1-based local patch index
        """
        elasticity = self._elasticity()
        if elasticity is None:
            return False

        elasticity.set_body_force(self.get_vec_func(patch, PropertyKind.BODYLOAD))
        return True

    def init_neumann(self, prop_index: int) -> bool:
        """
        Bind the traction of a Neumann property into the integrand.

        Vector functions take precedence over traction functions.

        Returns:
            False if no function is attached to the property index
        """
        elasticity = self._elasticity()
        if elasticity is None:
            return False

        if prop_index in self.vectors:
            elasticity.set_traction(self.vectors[prop_index])
        elif prop_index in self.tractions:
            elasticity.set_traction(self.tractions[prop_index])
        else:
            return False

        return True
