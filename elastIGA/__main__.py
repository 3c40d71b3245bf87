"""
Command-line model checker.

Reads an elasticity model, pre-processes it and prints the resolved
property records, materials and function maps.

Usage:
    python -m elastIGA model.inp --dim 2
    python -m elastIGA model.xinp --dim 3 --config elasticity.yaml -v
"""

import argparse
import logging
import sys
from typing import List, Optional

from .io.config import ElasticityConfig, load_config
from .logging_config import setup_logging
from .sim.elasticity import SIMElasticity


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="elastIGA",
                                     description="Check an elasticity input file")
    parser.add_argument("input", help="Keyword (.inp) or XML (.xinp) input file")
    parser.add_argument("--dim", "-d", type=int, choices=(2, 3), default=3,
                        help="Spatial dimension (default: 3)")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="YAML or JSON driver configuration")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show the input echo")
    args = parser.parse_args(argv)

    setup_logging(logging.INFO if args.verbose else logging.WARNING)

    config = load_config(args.config) if args.config else ElasticityConfig()
    sim = SIMElasticity(args.dim, config)

    if not sim.read(args.input) or not sim.preprocess():
        print(f"Failed to read {args.input}", file=sys.stderr)
        return 1

    print("=" * 60)
    print(f"{sim.get_name()} model: {args.input}")
    print("=" * 60)
    print(f"Patches (local): {sim.n_patches}")
    print(f"Materials: {len(sim.materials)}")
    for i, material in enumerate(sim.materials):
        print(f"  [{i}] {material.describe()}")
    print(f"Properties: {len(sim.properties)}")
    for line in sim.summary():
        print(f"  {line}")
    print(f"Vector functions: {sorted(sim.vectors)}")
    print(f"Traction functions: {sorted(sim.tractions)}")
    if sim.a_code > 0:
        print(f"Analytical Dirichlet code: {sim.a_code}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
