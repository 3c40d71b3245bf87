"""
Base simulation driver for IGA.

This module defines the driver that owns the model description of a
simulation and hands it to the physics integrand, patch by patch.

Design principles:
1. The driver owns all model data: property records, function maps,
   patch partition, topology sets and the analytical solution
2. Input is read section by section; every section parser returns a
   success flag, and reading stops at the first failure
3. Subclasses add physics-specific input sections and implement the
   initialization callbacks that bind model data into the integrand
4. The integrand is created on demand and only exposes what it supports

The life cycle of a driver is:
    sim.read("model.xinp")            # parse -> property records, functions
    sim.preprocess()                  # resolve analytical boundary conditions
    for patch in range(1, sim.n_patches + 1):
        sim.setup_patch(patch)        # material and body load of the patch
        ...                           # integrate interior terms
    for prop in sim.neumann_properties():
        sim.init_neumann(prop.index)  # traction of the boundary
        ...                           # integrate boundary terms

The initialization phase may be repeated (e.g. once per load step)
without re-reading the input.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, TextIO
from xml.etree import ElementTree

from ..functions.anasol import AnalyticalSolution
from ..functions.base import VecFunc, TractionFunc
from ..functions.vector import parse_vec_func
from ..io.config import SimulationConfig
from ..io.tokenizer import InputError, LineTokenizer, keyword_argument, read_line
from ..io.xmlutils import get_attribute, get_text, load_xml, tag_is
from ..model.property import Property, PropertyKind
from ..model.topology import PatchPartition, TopologyItem, TopologySet, entity_dimension
from ..physics.integrand import Integrand

logger = logging.getLogger(__name__)


@dataclass
class TimeStep:
    """
    Time integration parameters.

    Attributes:
        t: Current time
        dt: Current time step size
        dtn: Previous time step size
        step: Time step counter
    """
    t: float = 0.0
    dt: float = 1.0
    dtn: float = 1.0
    step: int = 0

    def increment(self):
        """Advance to the next time step with unchanged step size."""
        self.dtn = self.dt
        self.t += self.dt
        self.step += 1


class SIMbase(ABC):
    """
    Abstract base class for simulation drivers.

    Subclasses implement specific physics by overriding:
    - get_name, get_integrand
    - init_material, init_body_load, init_neumann
    - (optionally) parse, parse_xml and preprocess_a

    Attributes:
        dimension: Number of spatial dimensions
        config: Driver configuration
        partition: Global-to-local patch mapping of this process
        topology_sets: Named topology sets
        properties: Property records, in insertion order
        vectors: Vector functions by property index
        tractions: Traction functions by property index
        analytical_solution: Optional analytical solution
        problem: The integrand (created by get_integrand)
    """

    def __init__(self, dimension: int, config: Optional[SimulationConfig] = None):
        """
        Initialize driver.

        Parameters:
            dimension: Number of spatial dimensions (1, 2 or 3)
            config: Driver configuration, defaults to SimulationConfig()
        """
        if dimension not in (1, 2, 3):
            raise ValueError(f"Unsupported dimension: {dimension}")

        self.dimension = dimension
        self.config = config if config is not None else SimulationConfig()
        self.partition = PatchPartition(rank=self.config.rank)
        self.topology_sets: Dict[str, TopologySet] = {}

        # Property containers
        self.properties: List[Property] = []
        self.vectors: Dict[int, VecFunc] = {}
        self.tractions: Dict[int, TractionFunc] = {}

        self.analytical_solution: Optional[AnalyticalSolution] = None
        self.problem: Optional[Integrand] = None

    @abstractmethod
    def get_name(self) -> str:
        """Name of this simulator."""
        pass

    @abstractmethod
    def get_integrand(self) -> Integrand:
        """Return the integrand, creating it if necessary."""
        pass

    @abstractmethod
    def init_material(self, prop_index: int) -> bool:
        """Bind the material with the given index into the integrand."""
        pass

    @abstractmethod
    def init_body_load(self, patch: int) -> bool:
        """Bind the body load of the given (1-based) patch into the integrand."""
        pass

    @abstractmethod
    def init_neumann(self, prop_index: int) -> bool:
        """Bind the Neumann data of the given property index into the integrand."""
        pass

    @property
    def n_patches(self) -> int:
        """Number of patches owned by this process."""
        return self.partition.n_local

    # ------------------------------------------------------------------
    # Property management
    # ------------------------------------------------------------------

    def get_local_patch_index(self, global_patch: int) -> int:
        """
        Local index of a global patch number.

        Returns:
            -1 for an invalid patch number, 0 if the patch is owned by
            another process, else the 1-based local index
        """
        return self.partition.local_index(global_patch)

    def set_property_type(self, code: int, kind: PropertyKind,
                          data_index: int = -1, dofs: int = 0) -> bool:
        """
        Assign a condition type to the entities carrying a property code.

        Every UNDEFINED record with |index| == code is typed. If data_index is
        non-negative, the record index is rebound to it (used for materials,
        whose index is a material position rather than a code).

        Parameters:
            code: Property code
            kind: Condition type to assign
            data_index: New record index, or -1 to keep the code
            dofs: Constrained components (Dirichlet conditions)

        Returns:
            True if at least one record was typed
        """
        if code < 0:
            logger.warning(f"Negative property code {code} (ignored)")
            return False

        found = False
        for prop in self.properties:
            if prop.code == code and prop.kind == PropertyKind.UNDEFINED:
                prop.kind = kind
                if data_index >= 0:
                    prop.index = data_index
                if dofs > 0:
                    prop.dofs = dofs
                found = True

        if not found:
            logger.debug(f"No entities with property code {code}")
        return found

    def set_vec_property(self, code: int, kind: PropertyKind,
                         func: VecFunc, dofs: int = 0) -> bool:
        """
        Type the entities of a property code and attach a vector function.

        Returns:
            True if the code matched any entity (the function is stored only then)
        """
        if not self.set_property_type(code, kind, dofs=dofs):
            return False
        self.vectors[code] = func
        return True

    def get_unique_property_code(self, set_name: str, comp: int = 0) -> int:
        """
        Attach a new, unique property code to the entities of a topology set.

        One UNDEFINED record is created for each entity of the set on a
        locally owned patch. The code starts at comp (at least 1) and is
        increased by 1000 until it is not used by any existing record or
        function.

        Parameters:
            set_name: Name of the topology set
            comp: Preferred code (often the constrained components)

        Returns:
            The code, or 0 if set_name is empty or unknown
        """
        if not set_name:
            return 0

        tset = self.topology_sets.get(set_name)
        if tset is None:
            logger.warning(f"Undefined topology set \"{set_name}\"")
            return 0

        used = {p.code for p in self.properties} | set(self.vectors) | set(self.tractions)
        code = max(comp, 1)
        while code in used:
            code += 1000

        for item in tset.items:
            pid = self.get_local_patch_index(item.patch)
            if pid > 0:
                self.properties.append(
                    Property(PropertyKind.UNDEFINED, code, pid, item.ldim, item.lindx))

        return code

    def get_vec_func(self, patch: int, kind: PropertyKind) -> Optional[VecFunc]:
        """
        Vector function of the given kind attached to a patch.

        Returns:
            The function of the first matching record, or None
        """
        for prop in self.properties:
            if prop.kind == kind and prop.patch == patch and prop.index in self.vectors:
                return self.vectors[prop.index]
        return None

    def clear_properties(self):
        """Remove all property records and function objects."""
        self.properties.clear()
        self.vectors.clear()
        self.tractions.clear()

    # ------------------------------------------------------------------
    # Keyword input
    # ------------------------------------------------------------------

    def parse(self, keyword: str, stream: TextIO) -> bool:
        """
        Parse a data section of keyword input.

        Handles PATCHES, PARTITIONING, CODES and DIRICHLET. Unknown
        keywords are reported and ignored.

        Parameters:
            keyword: The keyword line starting the section
            stream: The stream to read data lines from

        Returns:
            False on invalid input
        """
        try:
            return self._parse_keyword(keyword, stream)
        except InputError as e:
            logger.error(f"{type(self).__name__}.parse: {e}")
            return False

    def _parse_keyword(self, keyword: str, stream: TextIO) -> bool:
        key = keyword.upper()

        if key.startswith("PATCHES"):
            n_patch = keyword_argument(keyword, "PATCHES").next_int("number of patches")
            if n_patch < 1:
                raise InputError(f"Invalid number of patches {n_patch}")
            self.partition.n_patches = n_patch
            logger.info(f"Number of patches: {n_patch}")

        elif key.startswith("PARTITIONING"):
            n_part = keyword_argument(keyword, "PARTITIONING").next_int("number of partitions")
            logger.info(f"Number of partitions: {n_part}")
            for _ in range(n_part):
                line = read_line(stream)
                if line is None:
                    break
                tokens = LineTokenizer(line)
                proc = tokens.next_int("process")
                first = tokens.next_int("first patch")
                last = tokens.next_int("last patch")
                try:
                    self.partition.add_part(proc, first, last)
                except ValueError as e:
                    raise InputError(str(e)) from None

        elif key.startswith("CODES"):
            n_code = keyword_argument(keyword, "CODES").next_int("number of codes")
            logger.info(f"Number of property codes: {n_code}")
            for _ in range(n_code):
                line = read_line(stream)
                if line is None:
                    break
                if not self._parse_code_line(LineTokenizer(line)):
                    return False

        elif key.startswith("DIRICHLET"):
            n_dir = keyword_argument(keyword, "DIRICHLET").next_int("number of conditions")
            logger.info(f"Number of Dirichlet conditions: {n_dir}")
            for _ in range(n_dir):
                line = read_line(stream)
                if line is None:
                    break
                tokens = LineTokenizer(line)
                code = tokens.next_int("code")
                dofs = tokens.next_int("dofs")
                anasol = (tokens.next_str() or "").upper() == "ANASOL"
                kind = PropertyKind.DIRICHLET_ANASOL if anasol else PropertyKind.DIRICHLET
                logger.info(f"\tDirichlet code {code}: dofs {dofs}" + (" (analytical)" if anasol else ""))
                self.set_property_type(code, kind, dofs=dofs)

        else:
            logger.warning(f"Unknown keyword \"{keyword}\" (ignored)")

        return True

    def _parse_code_line(self, tokens: LineTokenizer) -> bool:
        """Parse one '<code> <patch> [<face>]' line of the CODES section."""
        code = tokens.next_int("code")
        patch = tokens.next_int("patch")
        face = tokens.next_int("face") if tokens.has_more else 0

        pid = self.get_local_patch_index(patch)
        if pid < 0:
            logger.error(f"Invalid patch number {patch}")
            return False
        if pid == 0:
            return True

        if face < 0 or face > 2 * self.dimension:
            logger.error(f"Invalid face index {face}")
            return False

        ldim = self.dimension if face == 0 else self.dimension - 1
        self.properties.append(Property(PropertyKind.UNDEFINED, code, pid, ldim, face))
        return True

    def read_text(self, stream: TextIO) -> bool:
        """
        Read a complete keyword input stream.

        Returns:
            False if any section failed to parse (reading stops there)
        """
        while True:
            line = read_line(stream)
            if line is None:
                return True
            if not self.parse(line, stream):
                logger.error(f"Failure parsing keyword \"{line}\"")
                return False

    # ------------------------------------------------------------------
    # XML input
    # ------------------------------------------------------------------

    def parse_xml(self, elem: ElementTree.Element) -> bool:
        """
        Parse a data section of XML input.

        Handles <geometry>, <boundaryconditions> and <anasol>. Unknown
        elements are reported and ignored.

        Returns:
            False on invalid input
        """
        if tag_is(elem, "geometry"):
            return self._parse_geometry(elem)

        if tag_is(elem, "boundaryconditions"):
            for child in elem:
                self._parse_boundary_condition(child)
            return True

        if tag_is(elem, "anasol"):
            logger.info("Analytical solution:")
            solution = AnalyticalSolution.from_xml(elem, self.dimension)
            if solution is not None:
                self.analytical_solution = solution
            return True

        logger.warning(f"Unknown element <{elem.tag}> (ignored)")
        return True

    def _parse_geometry(self, elem: ElementTree.Element) -> bool:
        for child in elem:
            if tag_is(child, "patches"):
                self.partition.n_patches = get_attribute(child, "count", 0)
                logger.info(f"Number of patches: {self.partition.n_patches}")

            elif tag_is(child, "partitioning"):
                for part in child:
                    if not tag_is(part, "part"):
                        continue
                    try:
                        self.partition.add_part(get_attribute(part, "proc", 0),
                                                get_attribute(part, "lower", 0),
                                                get_attribute(part, "upper", 0))
                    except ValueError as e:
                        logger.error(f"Invalid partitioning: {e}")
                        return False

            elif tag_is(child, "topologysets"):
                for set_elem in child:
                    if tag_is(set_elem, "set"):
                        self._parse_topology_set(set_elem)

        return True

    def _parse_topology_set(self, elem: ElementTree.Element):
        name = get_attribute(elem, "name", "")
        set_type = get_attribute(elem, "type", "", lower_case=True)
        ldim = entity_dimension(set_type, self.dimension)
        if not name or ldim is None:
            logger.warning(f"Ignoring topology set \"{name}\" of type \"{set_type}\"")
            return

        tset = self.topology_sets.setdefault(name, TopologySet(name))
        for item in elem:
            if not tag_is(item, "item"):
                continue
            patch = get_attribute(item, "patch", 0)
            text = get_text(item)
            try:
                indices = [int(i) for i in text.split()] if text else [0]
            except ValueError:
                logger.warning(f"Invalid entity indices \"{text}\" in topology set \"{name}\"")
                continue
            for lindx in indices:
                tset.items.append(TopologyItem(patch, lindx, ldim if lindx > 0 else self.dimension))

    def _parse_boundary_condition(self, elem: ElementTree.Element):
        is_dirichlet = tag_is(elem, "dirichlet")
        if not is_dirichlet and not tag_is(elem, "neumann"):
            logger.warning(f"Unknown boundary condition <{elem.tag}> (ignored)")
            return

        comp = get_attribute(elem, "comp", 0)
        code = self.get_unique_property_code(get_attribute(elem, "set", ""), comp)
        if code == 0:
            code = get_attribute(elem, "code", 0)
        if code <= 0:
            return

        bc_type = get_attribute(elem, "type", "", lower_case=True)
        text = get_text(elem)
        name = "Dirichlet" if is_dirichlet else "Neumann"
        logger.info(f"\t{name} code {code}" + (f" ({bc_type})" if bc_type else ""))

        if bc_type == "anasol":
            kind = PropertyKind.DIRICHLET_ANASOL if is_dirichlet else PropertyKind.NEUMANN_ANASOL
            self.set_property_type(code, kind, dofs=comp)
        elif text is not None:
            func = parse_vec_func(text, bc_type)
            if func is not None:
                kind = PropertyKind.DIRICHLET_INHOM if is_dirichlet else PropertyKind.NEUMANN
                self.set_vec_property(code, kind, func, dofs=comp)
        elif is_dirichlet:
            self.set_property_type(code, PropertyKind.DIRICHLET, dofs=comp)

    def read_xml(self, root: ElementTree.Element) -> bool:
        """
        Read all sections below the root element of an XML input.

        Returns:
            False if any section failed to parse (reading stops there)
        """
        for elem in root:
            if not isinstance(elem.tag, str):
                continue
            if not self.parse_xml(elem):
                logger.error(f"Failure parsing element <{elem.tag}>")
                return False
        return True

    def read(self, filename: str | Path) -> bool:
        """
        Read a model from an input file.

        Files with suffix .xinp or .xml are read as XML input, all other
        files as keyword input.

        Returns:
            False if the file could not be parsed
        """
        path = Path(filename)
        logger.info(f"Reading input file {path}")

        if path.suffix.lower() in (".xinp", ".xml"):
            try:
                root = load_xml(path)
            except ElementTree.ParseError as e:
                logger.error(f"Invalid XML in {path}: {e}")
                return False
            return self.read_xml(root)

        with open(path, "r") as f:
            return self.read_text(f)

    # ------------------------------------------------------------------
    # Pre-processing and initialization
    # ------------------------------------------------------------------

    def preprocess_a(self):
        """Model pre-processing hook, called first by preprocess()."""
        pass

    def preprocess(self) -> bool:
        """
        Pre-process the model after input has been read.

        Placeholder kinds (*_ANASOL) left unresolved by preprocess_a are
        dropped, and records whose data is missing are reported.

        Returns:
            True (reported problems do not prevent the analysis)
        """
        self.preprocess_a()

        for prop in self.properties:
            if prop.kind.is_anasol:
                logger.warning(f"No analytical solution for {prop.describe(self.dimension)}")
                prop.kind = PropertyKind.UNDEFINED
            elif prop.kind == PropertyKind.NEUMANN:
                if prop.index not in self.vectors and prop.index not in self.tractions:
                    logger.warning(f"No traction for {prop.describe(self.dimension)}")
            elif prop.kind in (PropertyKind.BODYLOAD, PropertyKind.DIRICHLET_INHOM):
                if prop.index not in self.vectors:
                    logger.warning(f"No function for {prop.describe(self.dimension)}")

        return True

    def print_problem(self):
        """Log the problem definition."""
        if self.problem is not None:
            logger.info(self.problem.describe())

    def setup_patch(self, patch: int) -> bool:
        """
        Initialize the integrand for the interior terms of a patch.

        Binds the material of the patch (material 0 if none is assigned
        explicitly) and its body load.

        Parameters:
            patch: 1-based local patch index
        """
        prop_index = 0
        for prop in self.properties:
            if prop.kind == PropertyKind.MATERIAL and prop.patch == patch:
                prop_index = prop.index
                break

        if not self.init_material(prop_index):
            return False
        return self.init_body_load(patch)

    def neumann_properties(self) -> Iterator[Property]:
        """Iterate over the Neumann property records."""
        for prop in self.properties:
            if prop.kind == PropertyKind.NEUMANN:
                yield prop

    def advance_step(self, time_step: TimeStep) -> bool:
        """Advance the time step one step forward."""
        return True

    def summary(self) -> List[str]:
        """One line per property record, for reporting."""
        return [prop.describe(self.dimension) for prop in self.properties]
