"""
Analytical solutions.

An analytical solution provides the exact displacement field and/or stress
field of a problem. Drivers use it to derive boundary conditions (Dirichlet
values from the displacement field, Neumann tractions from the stress field)
so that a model can be verified against the closed-form answer.

XML format:

    <anasol type="expression">
      <primary>x*y | 0</primary>
      <stress>y | 0 | x</stress>
    </anasol>
"""

import logging
from typing import Optional
from xml.etree import ElementTree

from .base import VecFunc, STensorFunc
from .vector import VecExpressionFunc, STensorExpressionFunc
from ..io.xmlutils import get_attribute, get_text, tag_is

logger = logging.getLogger(__name__)


class AnalyticalSolution:
    """
    Container of the analytical displacement and stress fields.

    The solution object owns both fields. Drivers may reference them from
    their own function maps, but must not treat those references as owned.
    """

    def __init__(self, vector: Optional[VecFunc] = None,
                 stress: Optional[STensorFunc] = None):
        self.vector = vector
        self.stress = stress

    def get_vector_sol(self) -> Optional[VecFunc]:
        """Exact displacement field, or None."""
        return self.vector

    def get_stress_sol(self) -> Optional[STensorFunc]:
        """Exact stress field, or None."""
        return self.stress

    @classmethod
    def from_xml(cls, elem: ElementTree.Element, dimension: int) -> Optional['AnalyticalSolution']:
        """
        Create an analytical solution from an <anasol> element.

        Returns:
            AnalyticalSolution, or None for an unsupported type or invalid
            expressions
        """
        sol_type = get_attribute(elem, "type", "expression", lower_case=True)
        if sol_type != "expression":
            logger.warning(f"Unsupported analytical solution type \"{sol_type}\"")
            return None

        vector = stress = None
        try:
            for child in elem:
                text = get_text(child)
                if text is None:
                    continue
                if tag_is(child, "primary"):
                    vector = VecExpressionFunc.from_string(text)
                    logger.info(f"\tPrimary solution: {text}")
                elif tag_is(child, "stress"):
                    stress = STensorExpressionFunc.from_string(text, dimension)
                    logger.info(f"\tStress solution: {text}")
        except ValueError as e:
            logger.error(f"Invalid analytical solution: {e}")
            return None

        return cls(vector, stress)
