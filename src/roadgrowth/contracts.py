#!/usr/bin/env python3
"""
Transport Network Contracts - Immutable Data Contracts

This module defines the data structures shared by the growth engine,
the spatial path index and the final network snapshot.
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Union


class Site(NamedTuple):
    """Immutable 2D coordinate."""
    x: float
    y: float

    def distance_to(self, other: 'Site') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def squared_distance_to(self, other: 'Site') -> float:
        return (self.x - other.x) ** 2 + (self.y - other.y) ** 2


@dataclass(frozen=True)
class PathAttr:
    """Edge attributes.

    is_highway marks an arterial edge. is_even alternates every time a
    lateral branch is taken so secondary streets keep regular spacing.
    """
    is_highway: bool = False
    is_even: bool = False


HIGHWAY = PathAttr(is_highway=True, is_even=False)


@dataclass(frozen=True)
class Candidate:
    """A proposed branch waiting in the candidate queue."""
    start_index: int
    end_site: Site
    end_elevation: float
    heading_angle: float
    cost: float
    attrs: PathAttr

    def __post_init__(self):
        """Validate contract invariants."""
        if self.start_index < 0:
            raise ValueError(f"Candidate: start_index must be non-negative, got {self.start_index}")
        if math.isnan(self.cost):
            raise ValueError("Candidate: cost must not be NaN")


@dataclass(frozen=True)
class PathRecord:
    """A committed edge as stored in the spatial path index."""
    path_id: int
    start_index: int
    end_index: int
    site_start: Site
    site_end: Site
    attrs: PathAttr = field(default_factory=PathAttr)

    @property
    def bounds(self):
        """(minx, miny, maxx, maxy) of the segment."""
        return (
            min(self.site_start.x, self.site_end.x),
            min(self.site_start.y, self.site_end.y),
            max(self.site_start.x, self.site_end.x),
            max(self.site_start.y, self.site_end.y),
        )


@dataclass(frozen=True)
class SiteHit:
    """Query result: the candidate should connect to an existing node."""
    site_index: int


@dataclass(frozen=True)
class PathHit:
    """Query result: the candidate runs into an existing edge."""
    path: PathRecord


@dataclass(frozen=True)
class NoHit:
    """Query result: nothing nearby."""


NO_HIT = NoHit()

PathQuery = Union[SiteHit, PathHit, NoHit]


class Neighbor(NamedTuple):
    """Adjacent node as seen from a network node."""
    index: int
    attrs: PathAttr

    @property
    def is_highway(self) -> bool:
        return self.attrs.is_highway

    @property
    def is_even(self) -> bool:
        return self.attrs.is_even


def site_along(origin: Site, angle: float, length: float) -> Site:
    """Site reached by walking `length` from `origin` at `angle` radians."""
    return Site(origin.x + length * math.cos(angle), origin.y + length * math.sin(angle))


def optional_float(value) -> Optional[float]:
    return None if value is None else float(value)
