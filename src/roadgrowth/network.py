"""Site registry and the final road network snapshot.

The registry is the append-only list of placed sites used while growing.
The Network is built once from the path index when growth finishes and
is read-only afterwards.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import geopandas as gpd
import networkx as nx

from .contracts import Neighbor, PathAttr, PathRecord, Site
from .growth.geometry_utils import segment_to_linestring

logger = logging.getLogger(__name__)


class SiteRegistry:
    """Append-only list of (site, elevation); the index is the site identity."""

    def __init__(self):
        self._sites: List[Site] = []
        self._elevations: List[float] = []

    def __len__(self):
        return len(self._sites)

    def __iter__(self) -> Iterator[Tuple[Site, float]]:
        return iter(zip(self._sites, self._elevations))

    def register(self, site: Site, elevation: Optional[float]) -> int:
        """Append a site and return its index.

        Raises:
            ValueError: If the elevation is undefined
        """
        if elevation is None:
            raise ValueError(f"Cannot register site ({site.x:.3f}, {site.y:.3f}) without elevation")
        self._sites.append(site)
        self._elevations.append(elevation)
        return len(self._sites) - 1

    def site(self, index: int) -> Site:
        return self._sites[index]

    def elevation(self, index: int) -> float:
        return self._elevations[index]

    @property
    def sites(self) -> List[Site]:
        return list(self._sites)


class Network:
    """Immutable road network: sites plus an undirected attributed graph."""

    def __init__(self, sites: List[Site], graph: nx.Graph):
        self._sites = list(sites)
        self._graph = graph

    @classmethod
    def from_paths(cls, sites: List[Site], paths: Iterable[PathRecord]) -> 'Network':
        """Materialize a network, keeping the first path for each node pair."""
        graph = nx.Graph()
        graph.add_nodes_from(range(len(sites)))

        duplicates = 0
        for path in paths:
            if graph.has_edge(path.start_index, path.end_index):
                duplicates += 1
                continue
            graph.add_edge(path.start_index, path.end_index, attrs=path.attrs)

        if duplicates:
            logger.debug(f"Suppressed {duplicates} duplicate paths")
        return cls(sites, graph)

    def node_count(self) -> int:
        return len(self._sites)

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def site(self, index: int) -> Site:
        """Coordinates of a node.

        Raises:
            IndexError: For indices outside [0, node_count)
        """
        if index < 0 or index >= len(self._sites):
            raise IndexError(f"Site index {index} out of range for {len(self._sites)} nodes")
        return self._sites[index]

    @property
    def sites(self) -> List[Site]:
        return list(self._sites)

    def neighbors(self, index: int) -> List[Neighbor]:
        """Adjacent nodes with the attributes of the connecting edge."""
        self.site(index)
        return [
            Neighbor(neighbor, data['attrs'])
            for neighbor, data in self._graph.adj[index].items()
        ]

    def has_edge(self, a: int, b: int) -> bool:
        return self._graph.has_edge(a, b)

    def edge_attrs(self, a: int, b: int) -> PathAttr:
        return self._graph.edges[a, b]['attrs']

    def edges(self) -> List[Tuple[int, int, PathAttr]]:
        return [(u, v, data['attrs']) for u, v, data in self._graph.edges(data=True)]

    def to_networkx(self) -> nx.Graph:
        """Copy of the graph with node coordinates and flat edge attributes."""
        graph = nx.Graph()
        for i, site in enumerate(self._sites):
            graph.add_node(i, x=site.x, y=site.y)
        for u, v, attrs in self.edges():
            graph.add_edge(
                u, v,
                is_highway=attrs.is_highway,
                is_even=attrs.is_even,
                length=self._sites[u].distance_to(self._sites[v])
            )
        return graph

    def to_geodataframe(self, crs=None) -> gpd.GeoDataFrame:
        """Edges as a GeoDataFrame with LineString geometries."""
        rows = {
            'u': [],
            'v': [],
            'is_highway': [],
            'is_even': [],
            'length': [],
            'geometry': []
        }
        for u, v, attrs in self.edges():
            line = segment_to_linestring(self._sites[u], self._sites[v])
            rows['u'].append(u)
            rows['v'].append(v)
            rows['is_highway'].append(attrs.is_highway)
            rows['is_even'].append(attrs.is_even)
            rows['length'].append(line.length)
            rows['geometry'].append(line)
        return gpd.GeoDataFrame(rows, geometry='geometry', crs=crs)

    def __repr__(self):
        return f"Network(nodes={self.node_count()}, edges={self.edge_count()})"
