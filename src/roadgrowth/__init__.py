# Procedural Road Network Growth
# Priority-driven branch expansion over a height-mapped terrain

from .contracts import Site, PathAttr, Candidate, PathRecord, Neighbor
from .core.config import NetworkConfig
from .builder import TransportNetworkBuilder
from .growth.growth_engine import GrowthEngine
from .network import Network, SiteRegistry
from .random_stream import RandomStream
from .spatial import PathIndex, IndexConsistencyError
from .terrain import Terrain, TerrainDomainError, ConstantTerrain, FunctionTerrain, GridTerrain
from .serialization import save_network, load_network, save_network_summary

__version__ = "0.1.0"

__all__ = [
    'Site',
    'PathAttr',
    'Candidate',
    'PathRecord',
    'Neighbor',
    'NetworkConfig',
    'TransportNetworkBuilder',
    'GrowthEngine',
    'Network',
    'SiteRegistry',
    'RandomStream',
    'PathIndex',
    'IndexConsistencyError',
    'Terrain',
    'TerrainDomainError',
    'ConstantTerrain',
    'FunctionTerrain',
    'GridTerrain',
    'save_network',
    'load_network',
    'save_network_summary',
]
