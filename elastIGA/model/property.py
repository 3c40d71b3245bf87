"""
Property records for isogeometric simulation drivers.

A property record is a typed binding between a topological entity of the
model (a patch, or a face/edge of a patch) and a physical condition:

    Property(kind, index, patch, ldim, lindx)

- kind:  what the condition is (material, Dirichlet, Neumann, body load, ...)
- index: key of the data attached to the condition. For MATERIAL records this
         is a position in the driver's material list; for all other kinds it
         is the key into the driver's function maps (vectors / tractions).
- patch: 1-based local patch index the record applies to
- ldim:  local dimension of the entity (dim = whole patch, dim-1 = face, ...)
- lindx: local entity index on the patch (face/edge number, 0 = whole patch)

Records are created UNDEFINED when a code is attached to an entity (through
topology sets or the CODES keyword) and are typed afterwards, when the input
section referring to that code is parsed.

Kinds ending in _ANASOL are placeholders: they mark conditions that are to be
derived from an analytical solution, and are resolved into concrete kinds
(or dropped) during pre-processing.
"""

from enum import Enum
from dataclasses import dataclass


class PropertyKind(Enum):
    """Physical condition attached to a property record."""
    UNDEFINED = 0
    MATERIAL = 1
    DIRICHLET = 2
    DIRICHLET_INHOM = 3
    DIRICHLET_ANASOL = 4
    NEUMANN = 5
    NEUMANN_ANASOL = 6
    BODYLOAD = 7

    @property
    def is_anasol(self) -> bool:
        """True for the placeholder kinds resolved from an analytical solution."""
        return self in (PropertyKind.DIRICHLET_ANASOL, PropertyKind.NEUMANN_ANASOL)


@dataclass
class Property:
    """
    One physical condition attached to one topological entity.

    Attributes:
        kind: Condition type
        index: Material position (MATERIAL) or function map key (other kinds)
        patch: 1-based local patch index
        ldim: Local dimension of the entity
        lindx: Local entity index on the patch (0 = whole patch)
        dofs: Constrained solution components, e.g. 12 for x and y (Dirichlet only)
    """
    kind: PropertyKind = PropertyKind.UNDEFINED
    index: int = 0
    patch: int = 0
    ldim: int = 0
    lindx: int = 0
    dofs: int = 0

    @property
    def code(self) -> int:
        """Property code this record is keyed on."""
        return abs(self.index)

    def describe(self, dimension: int) -> str:
        """Short human-readable description, e.g. 'NEUMANN 3 on P1 F2'."""
        text = f"{self.kind.name} {self.index} on P{self.patch}"
        if self.lindx > 0 and self.ldim < dimension:
            entity = {0: "V", 1: "E", 2: "F"}.get(self.ldim, "?")
            text += f" {entity}{self.lindx}"
        return text
