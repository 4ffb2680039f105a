"""Cost model for candidate branches.

Costs are ranked ascending by the candidate queue, so anything cheap is
built first. Highways get a lower multiplier which makes arterial routes
extend before local streets.
"""

from typing import Optional

from ..contracts import PathAttr
from ..core.config import WeightConfig

# Elevations below this are water; no road may end there
SEA_LEVEL = 1e-3


def evaluate_cost(
    elevation_from: float,
    elevation_to: float,
    attrs: PathAttr,
    weights: WeightConfig
) -> Optional[float]:
    """Cost of building a path from elevation_from to elevation_to.

    Args:
        elevation_from: Elevation at the reference site
        elevation_to: Elevation at the proposed endpoint
        attrs: Attributes of the proposed path
        weights: Weight configuration

    Returns:
        Non-negative cost, or None when the endpoint is below sea level
    """
    if elevation_to < SEA_LEVEL:
        return None

    diff = elevation_to - elevation_from
    if attrs.is_even:
        diff *= weights.even_path_length_weight
    if attrs.is_highway:
        diff *= weights.highway_path_length_weight

    local_penalty = 0.0 if attrs.is_highway else 1.0
    return abs(diff) * elevation_to * (1.0 / weights.highway_construction_priority + local_penalty)


def effective_length(branch_length: float, attrs: PathAttr, weights: WeightConfig) -> float:
    """Step length for a branch with the given attributes."""
    length = branch_length
    if attrs.is_even:
        length *= weights.even_path_length_weight
    if attrs.is_highway:
        length *= weights.highway_path_length_weight
    return length


def is_above_sea_level(elevation: Optional[float]) -> bool:
    return elevation is not None and elevation >= SEA_LEVEL
