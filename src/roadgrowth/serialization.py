#!/usr/bin/env python3
"""
Network Serialization Utilities
Save and load grown networks for persistence and analysis.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from .contracts import PathAttr, PathRecord, Site
from .network import Network

PathLike = Union[str, Path]


def network_to_dict(network: Network) -> Dict[str, Any]:
    """Plain dictionary with nodes and edges of a network."""
    return {
        '_type': 'Network',
        'nodes': [[site.x, site.y] for site in network.sites],
        'edges': [
            {'u': u, 'v': v, 'is_highway': attrs.is_highway, 'is_even': attrs.is_even}
            for u, v, attrs in network.edges()
        ]
    }


def network_from_dict(data: Dict[str, Any]) -> Network:
    """Rebuild a network from network_to_dict output."""
    if data.get('_type') != 'Network':
        raise ValueError(f"Not a serialized network: _type={data.get('_type')!r}")

    sites = [Site(float(x), float(y)) for x, y in data['nodes']]
    paths = [
        PathRecord(
            path_id=i,
            start_index=edge['u'],
            end_index=edge['v'],
            site_start=sites[edge['u']],
            site_end=sites[edge['v']],
            attrs=PathAttr(is_highway=edge['is_highway'], is_even=edge['is_even'])
        )
        for i, edge in enumerate(data['edges'])
    ]
    return Network.from_paths(sites, paths)


def save_network(network: Network, path: PathLike, crs=None):
    """
    Save a network to disk.

    .json stores nodes and edges; .gpkg and .geojson store the edge
    GeoDataFrame through geopandas.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == '.json':
        with open(path, 'w') as f:
            json.dump(network_to_dict(network), f, indent=2)
    elif suffix == '.gpkg':
        network.to_geodataframe(crs=crs).to_file(path, layer='paths', driver='GPKG')
    elif suffix == '.geojson':
        network.to_geodataframe(crs=crs).to_file(path, driver='GeoJSON')
    else:
        raise ValueError("Network file must be .json, .gpkg or .geojson")


def load_network(path: PathLike) -> Network:
    """Load a network saved as .json."""
    path = Path(path)
    if path.suffix.lower() != '.json':
        raise ValueError("Only .json networks can be loaded")
    with open(path, 'r') as f:
        return network_from_dict(json.load(f))


def save_network_summary(network: Network, path: PathLike, metadata: Dict[str, Any] = None):
    """Save a human-readable summary of a network."""
    edges = network.edges()
    highway_count = sum(1 for _, _, attrs in edges if attrs.is_highway)
    even_count = sum(1 for _, _, attrs in edges if attrs.is_even)
    total_length = sum(network.site(u).distance_to(network.site(v)) for u, v, _ in edges)

    summary = {
        'node_count': network.node_count(),
        'edge_count': len(edges),
        'highway_edges': highway_count,
        'local_edges': len(edges) - highway_count,
        'even_edges': even_count,
        'total_length': total_length,
        'metadata': metadata or {}
    }
    with open(path, 'w') as f:
        json.dump(summary, f, indent=2)
    return summary
