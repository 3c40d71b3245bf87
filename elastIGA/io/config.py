"""
Configuration of simulation drivers.

Behaviour switches that must be fixed before a model is parsed are gathered
in immutable configuration objects passed to the driver constructor:

    config = ElasticityConfig(plane_strain=True)
    sim = SIMElasticity(dimension=2, config=config)

They can also be loaded from a YAML or JSON file:

    # elasticity.yaml
    rank: 0
    plane_strain: true
    axisymmetric: false
    gauss_points_vtf: false

    config = load_config("elasticity.yaml")

The 2D flags (plane_strain, axisymmetric, gauss_points_vtf) have no meaning
in 3D and are ignored there.
"""

from __future__ import annotations

import json
import yaml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Type, TypeVar

C = TypeVar("C", bound="SimulationConfig")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Settings shared by all simulation drivers.

    Attributes:
        rank: Rank of this process in a partitioned model
    """
    rank: int = 0

    @classmethod
    def from_dict(cls: Type[C], data: Dict[str, Any]) -> C:
        """
        Create a configuration from a dictionary.

        Raises:
            ValueError: If the dictionary contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


@dataclass(frozen=True)
class ElasticityConfig(SimulationConfig):
    """
    Settings of elasticity drivers.

    Attributes:
        plane_strain: Plane strain instead of plane stress (2D only)
        axisymmetric: Axisymmetric formulation (2D only)
        gauss_points_vtf: Export Gauss point results for visualization (2D only)
    """
    plane_strain: bool = False
    axisymmetric: bool = False
    gauss_points_vtf: bool = False

    @property
    def has_2d_options(self) -> bool:
        """True if any of the 2D-only flags is set."""
        return self.plane_strain or self.axisymmetric or self.gauss_points_vtf


def load_config(filename: str | Path, cls: Type[C] = ElasticityConfig) -> C:
    """
    Load a driver configuration from a YAML or JSON file.

    Parameters:
        filename: Path to a .yaml/.yml or .json file
        cls: Configuration class to instantiate

    Returns:
        Configuration object

    Raises:
        ValueError: For an unsupported file type, a non-mapping document,
                    or unknown keys
    """
    path = Path(filename)
    suffix = path.suffix.lower()

    with open(path, "r") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported configuration file type: {suffix}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    return cls.from_dict(data)
