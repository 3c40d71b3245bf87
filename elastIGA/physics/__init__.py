"""
Physics of the simulation: integrands, materials and local systems.
"""

from .integrand import Integrand
from .material import LinIsotropic
from .local_system import LocalSystem, CylindricalSystem, parse_local_system
from .elasticity import Elasticity, LinearElasticity
