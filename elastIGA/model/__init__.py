"""
Model description: property records and topology.
"""

from .property import PropertyKind, Property
from .topology import PatchPartition, TopologyItem, TopologySet, entity_dimension
