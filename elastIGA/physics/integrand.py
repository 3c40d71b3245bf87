"""
Integrand interface.

An integrand represents the physics of a simulation: the data needed to
evaluate element contributions (material, loads) and its own input
sections. Drivers hold an abstract Integrand and query narrower
capabilities from it:

    elasticity = problem.as_elasticity()
    if elasticity is None:
        ...  # installed physics does not support elasticity operations

Capability queries return None instead of failing, so that a driver can
be combined with any integrand and degrade safely.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING
from xml.etree import ElementTree

if TYPE_CHECKING:
    from .elasticity import Elasticity


class Integrand(ABC):
    """
    Base class for problem integrands.

    Attributes:
        n_dim: Number of spatial dimensions
    """

    def __init__(self, n_dim: int):
        self.n_dim = n_dim

    def parse(self, elem: ElementTree.Element) -> bool:
        """
        Parse an integrand-specific XML element.

        Returns:
            True if the element was recognized and handled
        """
        return False

    def advance_step(self, dt: float, dtn: float):
        """Prepare for the next time step (dt: new size, dtn: previous size)."""
        pass

    def as_elasticity(self) -> Optional[Elasticity]:
        """The elasticity capability of this integrand, or None."""
        return None

    @abstractmethod
    def describe(self) -> str:
        """Multi-line description of the problem, for the log."""
        pass
