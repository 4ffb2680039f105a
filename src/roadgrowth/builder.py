"""Builder-style entry point for growing a transport network."""

from dataclasses import replace
from typing import Optional

from .core.config import NetworkConfig
from .growth.growth_engine import GrowthEngine
from .network import Network
from .terrain import Terrain


class TransportNetworkBuilder:
    """Immutable builder; every setter returns a new, validated builder.

    Example:
        network = (
            TransportNetworkBuilder()
            .set_start(100.0, 50.0)
            .set_branch_length(0.5)
            .set_iterations(5000)
            .build(0, terrain)
        )
    """

    def __init__(self, config: Optional[NetworkConfig] = None):
        self.config = config if config is not None else NetworkConfig()

    @classmethod
    def from_config(cls, config: NetworkConfig) -> 'TransportNetworkBuilder':
        return cls(config)

    def _with(self, **changes) -> 'TransportNetworkBuilder':
        return TransportNetworkBuilder(replace(self.config, **changes))

    def set_start(self, start_x: float, start_y: float) -> 'TransportNetworkBuilder':
        return self._with(start=(start_x, start_y))

    def set_branch_length(self, branch_length: float) -> 'TransportNetworkBuilder':
        return self._with(branch=replace(self.config.branch, length=branch_length))

    def set_branch_angle_deviation(self, angle_deviation: float) -> 'TransportNetworkBuilder':
        return self._with(branch=replace(self.config.branch, angle_deviation=angle_deviation))

    def set_branch_max_angle(self, max_angle: float) -> 'TransportNetworkBuilder':
        return self._with(branch=replace(self.config.branch, max_angle=max_angle))

    def set_highway_rotation_probability(self, probability: float) -> 'TransportNetworkBuilder':
        return self._with(rotation=replace(self.config.rotation, highway_rotation_probability=probability))

    def set_normal_rotation_probability(self, probability: float) -> 'TransportNetworkBuilder':
        return self._with(rotation=replace(self.config.rotation, normal_rotation_probability=probability))

    def set_highway_construction_priority(self, priority: float) -> 'TransportNetworkBuilder':
        return self._with(weights=replace(self.config.weights, highway_construction_priority=priority))

    def set_even_path_length_weight(self, weight: float) -> 'TransportNetworkBuilder':
        return self._with(weights=replace(self.config.weights, even_path_length_weight=weight))

    def set_highway_path_length_weight(self, weight: float) -> 'TransportNetworkBuilder':
        return self._with(weights=replace(self.config.weights, highway_path_length_weight=weight))

    def set_iterations(self, iterations: int) -> 'TransportNetworkBuilder':
        return self._with(iterations=iterations)

    def set_seed(self, seed: int) -> 'TransportNetworkBuilder':
        return self._with(seed=seed)

    def build(self, seed: Optional[int], terrain: Terrain) -> Network:
        """Grow the network. A seed of None uses the configured seed."""
        if seed is None:
            seed = self.config.seed
        return GrowthEngine(self.config).build(seed, terrain)
