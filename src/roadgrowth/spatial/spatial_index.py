#!/usr/bin/env python3
"""
Spatial Path Index Module

R-tree based index over committed road segments. Answers the
"does this candidate run into the existing network?" query and supports
splitting a segment where a new branch crosses it.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, Tuple

from rtree import index

from ..contracts import NO_HIT, PathAttr, PathHit, PathQuery, PathRecord, Site, SiteHit
from ..growth.geometry_utils import midpoint, point_to_line_distance

logger = logging.getLogger(__name__)


class IndexConsistencyError(RuntimeError):
    """Raised when the index is asked to modify a path it does not hold."""


class PathIndex:
    """
    R-tree based index of committed paths.

    Paths are keyed by a monotonically increasing path id. Records keep
    their endpoints by site index so the index never holds references into
    the site registry.
    """

    def __init__(self):
        self.path_index = index.Index()
        self.path_data: Dict[int, PathRecord] = {}
        self.next_path_id = 0

    def __len__(self):
        return len(self.path_data)

    def __contains__(self, record):
        if not isinstance(record, PathRecord):
            return False
        return self.path_data.get(record.path_id) == record

    def __iter__(self) -> Iterator[PathRecord]:
        for path_id in sorted(self.path_data):
            yield self.path_data[path_id]

    def insert(
        self,
        start_index: int,
        end_index: int,
        site_start: Site,
        site_end: Site,
        attrs: PathAttr
    ) -> PathRecord:
        """Insert a path - O(log n)"""
        record = PathRecord(
            path_id=self.next_path_id,
            start_index=start_index,
            end_index=end_index,
            site_start=site_start,
            site_end=site_end,
            attrs=attrs
        )
        self.next_path_id += 1

        self.path_index.insert(record.path_id, record.bounds)
        self.path_data[record.path_id] = record
        return record

    def find(
        self,
        query_start: Site,
        query_end: Site,
        radius: float,
        excluded_indices: Iterable[int] = ()
    ) -> PathQuery:
        """
        Find the existing path a proposed segment should merge into.

        Candidates come from the R-tree envelope query_end +- radius. Paths
        touching any of excluded_indices are skipped. The closest path by
        perpendicular distance from the query midpoint to its line wins, if
        that distance is below radius.

        Args:
            query_start: Start of the proposed segment
            query_end: End of the proposed segment
            radius: Snap radius
            excluded_indices: Site indices whose paths are ignored

        Returns:
            SiteHit when query_end is within radius of one of the winner's
            endpoints, PathHit for the winner otherwise, NO_HIT when nothing
            qualifies.
        """
        excluded = set(excluded_indices)
        bbox = (
            query_end.x - radius,
            query_end.y - radius,
            query_end.x + radius,
            query_end.y + radius
        )
        probe = midpoint(query_start, query_end)

        min_distance = radius
        min_path = None
        for path_id in sorted(self.path_index.intersection(bbox)):
            record = self.path_data[path_id]
            if record.start_index in excluded or record.end_index in excluded:
                continue

            distance = point_to_line_distance(probe, record.site_start, record.site_end)
            if distance < min_distance:
                min_distance = distance
                min_path = record

        if min_path is None:
            return NO_HIT

        squared_radius = radius * radius
        if query_end.squared_distance_to(min_path.site_start) < squared_radius:
            return SiteHit(min_path.start_index)
        if query_end.squared_distance_to(min_path.site_end) < squared_radius:
            return SiteHit(min_path.end_index)
        return PathHit(min_path)

    def remove(self, record: PathRecord):
        """Remove a single path - O(log n)"""
        if record not in self:
            raise IndexConsistencyError(
                f"Path {record.path_id} ({record.start_index} -> {record.end_index}) is not in the index"
            )
        self.path_index.delete(record.path_id, record.bounds)
        del self.path_data[record.path_id]

    def split(
        self,
        record: PathRecord,
        new_point: Site,
        new_node_index: int
    ) -> Tuple[PathRecord, PathRecord]:
        """Replace a path by two paths meeting at new_point.

        Both halves keep the original attributes.

        Raises:
            IndexConsistencyError: If the path is not present
        """
        self.remove(record)
        first = self.insert(record.start_index, new_node_index, record.site_start, new_point, record.attrs)
        second = self.insert(new_node_index, record.end_index, new_point, record.site_end, record.attrs)
        logger.debug(
            f"Split path {record.path_id} at node {new_node_index} "
            f"into {first.path_id} and {second.path_id}"
        )
        return first, second

    def for_each(self, callback: Callable[[PathRecord], None]):
        """Call callback for every stored path in path id order."""
        for record in self:
            callback(record)
