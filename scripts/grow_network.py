#!/usr/bin/env python3
"""
Network Growth CLI
==================

Grow a road network over a heightmap and save it.

Usage Examples
--------------

Grow over a flat 200x100 domain with default parameters:
    python scripts/grow_network.py --output network.json

Grow over a saved heightmap:
    python scripts/grow_network.py \
        --terrain heights.npy --bounds 0 0 200 100 \
        --config network.yaml --seed 7 --output network.gpkg
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roadgrowth import ConstantTerrain, GridTerrain, TransportNetworkBuilder, save_network, save_network_summary
from roadgrowth.core.config import NetworkConfig, create_config_from_file

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Grow a road network over a terrain")
    parser.add_argument('--config', help="Network configuration (.json, .yaml or .yml)")
    parser.add_argument('--seed', type=int, help="Random seed (overrides the configuration)")
    parser.add_argument('--iterations', type=int, help="Iteration budget (overrides the configuration)")
    parser.add_argument('--terrain', help="Heightmap saved with numpy.save (.npy)")
    parser.add_argument(
        '--bounds', type=float, nargs=4, default=[0.0, 0.0, 200.0, 100.0],
        metavar=('MINX', 'MINY', 'MAXX', 'MAXY'),
        help="Terrain domain"
    )
    parser.add_argument('--output', required=True, help="Output file (.json, .gpkg or .geojson)")
    parser.add_argument('--summary', help="Optional JSON summary file")
    parser.add_argument('--debug', action='store_true', help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = create_config_from_file(args.config) if args.config else NetworkConfig()
    if args.iterations is not None:
        config = replace(config, iterations=args.iterations)

    level = logging.DEBUG if args.debug or config.logging.enable_debug_logging else config.logging.log_level.upper()
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    config.log_configuration_summary()

    minx, miny, maxx, maxy = args.bounds
    if args.terrain:
        terrain = GridTerrain.from_file(args.terrain, (minx, miny), (maxx, maxy))
        logger.info(f"Loaded heightmap {args.terrain} with shape {terrain.heights.shape}")
    else:
        terrain = ConstantTerrain(1.0, bounds=(minx, miny, maxx, maxy))
        logger.info("No heightmap given, using flat terrain")

    seed = args.seed if args.seed is not None else config.seed
    network = TransportNetworkBuilder.from_config(config).build(seed, terrain)

    save_network(network, args.output)
    logger.info(f"Saved {network!r} to {args.output}")

    if args.summary:
        save_network_summary(network, args.summary, metadata={'seed': seed, 'config': config.to_dict()})
        logger.info(f"Saved summary to {args.summary}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
