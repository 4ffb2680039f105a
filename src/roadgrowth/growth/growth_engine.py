"""Main orchestrator for procedural road network growth.

This module implements the GrowthEngine class that pops the cheapest
candidate, resolves it against the existing network, commits it and
proposes new branches around its heading.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..contracts import HIGHWAY, Candidate, PathAttr, PathHit, Site, SiteHit, site_along
from ..core.config import NetworkConfig
from ..network import Network, SiteRegistry
from ..random_stream import RandomStream
from ..spatial.spatial_index import PathIndex
from ..terrain import Terrain, TerrainDomainError
from .candidate_queue import CandidateQueue
from .cost_model import effective_length, evaluate_cost, is_above_sea_level
from .geometry_utils import segment_intersection

logger = logging.getLogger(__name__)

# Branch directions relative to the parent heading, in draw order
BRANCH_TURNS = (-1, 0, 1)


@dataclass
class GrowthState:
    """Mutable state owned by a single build call."""
    registry: SiteRegistry
    paths: PathIndex
    queue: CandidateQueue
    rng: RandomStream
    stats: Dict[str, int] = field(default_factory=lambda: {
        'iterations': 0,
        'committed': 0,
        'merged': 0,
        'split': 0,
        'pushed': 0,
        'skipped_directions': 0,
        'dead_ends': 0,
    })


class GrowthEngine:
    """Main API for procedural road network growth.

    Orchestrates the growth process by:
    1. Seeding two highway candidates in opposite directions from the start
    2. Popping the cheapest candidate each iteration
    3. Snapping it to a nearby node or splitting a crossed path
    4. Otherwise committing it and proposing up to three new branches
    """

    def __init__(self, config: NetworkConfig):
        """Initialize growth engine with a validated configuration.

        Args:
            config: Network configuration
        """
        self.config = config
        self.last_stats: Dict[str, int] = {}

    def build(self, seed: int, terrain: Terrain) -> Network:
        """Grow a network over the terrain.

        Args:
            seed: Random seed; equal seeds give identical networks
            terrain: Height field providing get_altitude(x, y)

        Returns:
            Network snapshot

        Raises:
            TerrainDomainError: If the start site is outside the terrain domain
            IndexConsistencyError: If the path index gets out of sync
        """
        state = GrowthState(
            registry=SiteRegistry(),
            paths=PathIndex(),
            queue=CandidateQueue(),
            rng=RandomStream(seed)
        )
        logger.info(
            f"Growing network from {self.config.start} with seed {seed} "
            f"for up to {self.config.iterations} iterations"
        )

        self.initialize(state, terrain)

        progress_interval = self.config.logging.progress_log_interval
        for iteration in range(self.config.iterations):
            if not self.grow_one_step(state, terrain):
                logger.info(f"Candidate queue exhausted after {iteration} iterations")
                break
            if progress_interval and (iteration + 1) % progress_interval == 0:
                logger.info(
                    f"Iteration {iteration + 1}: {len(state.registry)} sites, "
                    f"{len(state.paths)} paths, {len(state.queue)} pending"
                )

        network = Network.from_paths(state.registry.sites, state.paths)
        self.last_stats = dict(state.stats)
        logger.info(
            f"Built {network!r} in {state.stats['iterations']} iterations "
            f"({state.stats['committed']} committed, {state.stats['merged']} merged, "
            f"{state.stats['split']} split)"
        )
        return network

    def initialize(self, state: GrowthState, terrain: Terrain):
        """Register the start site and push the two initial highway candidates."""
        initial_angle = state.rng.uniform(0.0, math.pi)

        start = Site(*self.config.start)
        start_elevation = terrain.get_altitude(start.x, start.y)
        if start_elevation is None:
            raise TerrainDomainError(f"Start site ({start.x}, {start.y}) is outside the terrain domain")
        start_index = state.registry.register(start, start_elevation)

        for angle in (initial_angle, initial_angle + math.pi):
            end_site = site_along(start, angle, self.config.branch.length)
            elevation = terrain.get_altitude(end_site.x, end_site.y)
            if not is_above_sea_level(elevation):
                logger.debug(f"Discarding initial candidate at angle {angle:.4f}: elevation {elevation}")
                continue
            self._push(state, Candidate(
                start_index=start_index,
                end_site=end_site,
                end_elevation=elevation,
                heading_angle=angle,
                cost=0.0,
                attrs=HIGHWAY
            ))

    def grow_one_step(self, state: GrowthState, terrain: Terrain) -> bool:
        """Process one candidate.

        Returns:
            False if the queue was empty, True otherwise
        """
        candidate = state.queue.pop()
        if candidate is None:
            return False
        state.stats['iterations'] += 1

        if self.resolve_conflict(state, candidate, terrain):
            return True

        end_index = self.commit(state, candidate)
        self.propose_branches(state, candidate, end_index, terrain)
        return True

    def resolve_conflict(self, state: GrowthState, candidate: Candidate, terrain: Terrain) -> bool:
        """Merge the candidate into the existing network if it runs into it.

        Returns:
            True if the candidate was consumed by a merge or split
        """
        site_start = state.registry.site(candidate.start_index)
        hit = state.paths.find(
            site_start,
            candidate.end_site,
            self.config.snap_radius,
            (candidate.start_index,)
        )

        if isinstance(hit, SiteHit):
            state.paths.insert(
                candidate.start_index,
                hit.site_index,
                site_start,
                state.registry.site(hit.site_index),
                candidate.attrs
            )
            state.stats['merged'] += 1
            logger.debug(f"Merged candidate from {candidate.start_index} into node {hit.site_index}")
            return True

        if isinstance(hit, PathHit):
            return self._split_crossed_path(state, candidate, hit, site_start, terrain)

        return False

    def _split_crossed_path(
        self,
        state: GrowthState,
        candidate: Candidate,
        hit: PathHit,
        site_start: Site,
        terrain: Terrain
    ) -> bool:
        crossed = hit.path
        cross = segment_intersection(crossed.site_start, crossed.site_end, site_start, candidate.end_site)
        if cross is None or not cross[1]:
            return False

        cross_site = cross[0]
        elevation = terrain.get_altitude(cross_site.x, cross_site.y)
        if not is_above_sea_level(elevation):
            logger.debug(f"Crossing at ({cross_site.x:.3f}, {cross_site.y:.3f}) has no usable elevation")
            return False

        cross_index = state.registry.register(cross_site, elevation)
        state.paths.split(crossed, cross_site, cross_index)
        state.paths.insert(candidate.start_index, cross_index, site_start, cross_site, candidate.attrs)
        state.stats['split'] += 1
        logger.debug(f"Candidate from {candidate.start_index} split path {crossed.path_id} at node {cross_index}")
        return True

    def commit(self, state: GrowthState, candidate: Candidate) -> int:
        """Register the candidate endpoint and store its path.

        Returns:
            Index of the new end site
        """
        end_index = state.registry.register(candidate.end_site, candidate.end_elevation)
        state.paths.insert(
            candidate.start_index,
            end_index,
            state.registry.site(candidate.start_index),
            candidate.end_site,
            candidate.attrs
        )
        state.stats['committed'] += 1
        return end_index

    def branch_attrs(self, state: GrowthState, parent: PathAttr, turn: int) -> Optional[PathAttr]:
        """Attributes for a branch turning left (-1), straight (0) or right (1).

        Lateral branches flip is_even and draw once from the random stream.
        Returns None when the direction is skipped.
        """
        if turn == 0:
            return parent

        is_even = not parent.is_even
        if parent.is_highway:
            is_highway = state.rng.gen_bool(self.config.rotation.highway_rotation_probability)
        else:
            if not state.rng.gen_bool(self.config.rotation.normal_rotation_probability):
                return None
            is_highway = False

        return PathAttr(is_highway=is_highway, is_even=is_even)

    def propose_branches(self, state: GrowthState, parent: Candidate, origin_index: int, terrain: Terrain):
        """Push the best candidate for each attempted direction around the parent heading."""
        for turn in BRANCH_TURNS:
            attrs = self.branch_attrs(state, parent.attrs, turn)
            if attrs is None:
                state.stats['skipped_directions'] += 1
                continue

            base_angle = parent.heading_angle + turn * math.pi * 0.5
            best = self.sweep(state, parent, origin_index, base_angle, attrs, terrain)
            if best is None:
                state.stats['dead_ends'] += 1
                continue
            self._push(state, best)

    def sweep(
        self,
        state: GrowthState,
        parent: Candidate,
        origin_index: int,
        base_angle: float,
        attrs: PathAttr,
        terrain: Terrain
    ) -> Optional[Candidate]:
        """Try angles base +- k * deviation and return the cheapest valid candidate."""
        origin = state.registry.site(origin_index)
        elevation_from = state.registry.elevation(parent.start_index)
        length = effective_length(self.config.branch.length, attrs, self.config.weights)
        deviation = self.config.branch.angle_deviation

        best: Optional[Tuple[float, float, Site, float]] = None
        for k in range(self.config.branch.sweep_steps + 1):
            angles = (base_angle,) if k == 0 else (base_angle + deviation * k, base_angle - deviation * k)
            for angle in angles:
                end_site = site_along(origin, angle, length)
                elevation = terrain.get_altitude(end_site.x, end_site.y)
                if elevation is None:
                    continue
                cost = evaluate_cost(elevation_from, elevation, attrs, self.config.weights)
                if cost is None:
                    continue
                if best is None or cost < best[0]:
                    best = (cost, angle, end_site, elevation)

        if best is None:
            return None

        cost, angle, end_site, elevation = best
        return Candidate(
            start_index=origin_index,
            end_site=end_site,
            end_elevation=elevation,
            heading_angle=angle,
            cost=cost,
            attrs=attrs
        )

    def _push(self, state: GrowthState, candidate: Candidate):
        state.queue.push(candidate)
        state.stats['pushed'] += 1
