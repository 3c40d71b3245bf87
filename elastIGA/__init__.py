"""
elastIGA - Input handling for isogeometric elasticity analysis

Reads elasticity models from keyword-based or XML input files, and resolves
them into the data an isogeometric solver binds patch by patch:
property records, materials, body forces and boundary tractions, including
boundary conditions derived from analytical solutions.

Key modules:
- model: Property records, patch partitioning and topology sets
- functions: Load functions, expression parsing, analytical solutions
- physics: Materials and the linear elasticity integrand
- sim: Simulation drivers (base driver, elasticity driver)
- io: Keyword tokenizer, XML helpers and driver configuration

Quick start:
    from elastIGA.sim.elasticity import SIMElasticity
    from elastIGA.io.config import ElasticityConfig

    # Read and pre-process the model
    sim = SIMElasticity(dimension=2, config=ElasticityConfig(plane_strain=True))
    if sim.read("cantilever.xinp") and sim.preprocess():
        # Bind the data of each patch into the integrand
        for patch in range(1, sim.n_patches + 1):
            sim.setup_patch(patch)
            elasticity = sim.get_integrand().as_elasticity()
            f = elasticity.body_force([0.5, 0.5])

Command line:
    python -m elastIGA cantilever.inp --dim 2
"""

__version__ = "0.1.0"
__author__ = "Wataru Fukuda"

# Core imports for convenience
from .model.property import Property, PropertyKind
from .io.config import SimulationConfig, ElasticityConfig, load_config
from .functions.anasol import AnalyticalSolution
from .physics.elasticity import LinearElasticity
from .physics.material import LinIsotropic
from .sim.base import SIMbase, TimeStep
from .sim.elasticity import SIMElasticity
from .logging_config import setup_logging
