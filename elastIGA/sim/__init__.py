"""
Simulation drivers: the generic base driver and the elasticity driver.
"""

from .base import SIMbase, TimeStep
from .elasticity import SIMElasticity
