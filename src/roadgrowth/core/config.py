#!/usr/bin/env python3
"""
Configuration System for Road Network Growth

Centralized configuration management for the growth engine.
Provides type-safe configuration with validation and defaults.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

# Upper bound on angles tried per branch direction and side
MAX_SWEEP_STEPS = 10_000


@dataclass(frozen=True)
class BranchConfig:
    """Configuration for branch geometry."""
    length: float = 0.5
    angle_deviation: float = math.pi / 40.0  # radians
    max_angle: float = math.pi / 40.0  # radians

    @property
    def sweep_steps(self) -> int:
        """Number of deviation steps tried on each side of a base angle."""
        return int(math.floor(self.max_angle / self.angle_deviation))


@dataclass(frozen=True)
class RotationConfig:
    """Configuration for lateral branching probabilities."""
    highway_rotation_probability: float = 0.02
    normal_rotation_probability: float = 0.8


@dataclass(frozen=True)
class WeightConfig:
    """Configuration for cost and length weights."""
    highway_construction_priority: float = 30.0
    even_path_length_weight: float = 1.5
    highway_path_length_weight: float = 1.5


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging and debugging."""
    log_level: str = "INFO"
    enable_debug_logging: bool = False
    progress_log_interval: int = 0


@dataclass(frozen=True)
class NetworkConfig:
    """
    Master configuration class for road network growth.

    Validation runs on construction so a bad parameter is rejected before
    any growth loop starts.
    """
    start: Tuple[float, float] = (100.0, 50.0)
    branch: BranchConfig = field(default_factory=BranchConfig)
    rotation: RotationConfig = field(default_factory=RotationConfig)
    weights: WeightConfig = field(default_factory=WeightConfig)
    iterations: int = 1000
    seed: int = 0
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        object.__setattr__(self, 'start', (float(self.start[0]), float(self.start[1])))
        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        if not all(math.isfinite(v) for v in self.start):
            raise ValueError("start must have finite coordinates")

        # Validate branch geometry
        for name in ('length', 'angle_deviation', 'max_angle'):
            if not math.isfinite(getattr(self.branch, name)):
                raise ValueError(f"branch {name} must be finite")
        if not self.branch.length > 0:
            raise ValueError("branch length must be positive")
        if not self.branch.angle_deviation > 0:
            raise ValueError("branch angle_deviation must be positive")
        if not self.branch.max_angle >= 0:
            raise ValueError("branch max_angle must be non-negative")
        sweep_ratio = self.branch.max_angle / self.branch.angle_deviation
        if not sweep_ratio < MAX_SWEEP_STEPS + 1:
            raise ValueError(
                f"max_angle / angle_deviation gives {sweep_ratio} sweep steps, "
                f"limit is {MAX_SWEEP_STEPS}"
            )

        # Validate probabilities
        for name in ('highway_rotation_probability', 'normal_rotation_probability'):
            value = getattr(self.rotation, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0 and 1")

        # Validate weights
        for name in ('highway_construction_priority', 'even_path_length_weight', 'highway_path_length_weight'):
            if not math.isfinite(getattr(self.weights, name)):
                raise ValueError(f"{name} must be finite")
        if not self.weights.highway_construction_priority > 0:
            raise ValueError("highway_construction_priority must be positive")
        if not self.weights.even_path_length_weight > 0:
            raise ValueError("even_path_length_weight must be positive")
        if not self.weights.highway_path_length_weight > 0:
            raise ValueError("highway_path_length_weight must be positive")

        if self.iterations < 0:
            raise ValueError("iterations must be non-negative")

        # Validate logging level
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")
        if self.logging.progress_log_interval < 0:
            raise ValueError("progress_log_interval must be non-negative")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'NetworkConfig':
        """
        Create configuration from dictionary.

        Supports nested dictionary structures; missing sections use defaults.
        """
        start = config_dict.get('start', cls.start)
        if isinstance(start, dict):
            start = (start['x'], start['y'])

        return cls(
            start=tuple(start),
            branch=BranchConfig(**config_dict.get('branch', {})),
            rotation=RotationConfig(**config_dict.get('rotation', {})),
            weights=WeightConfig(**config_dict.get('weights', {})),
            iterations=config_dict.get('iterations', 1000),
            seed=config_dict.get('seed', 0),
            logging=LoggingConfig(**config_dict.get('logging', {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'start': list(self.start),
            'branch': {
                'length': self.branch.length,
                'angle_deviation': self.branch.angle_deviation,
                'max_angle': self.branch.max_angle
            },
            'rotation': {
                'highway_rotation_probability': self.rotation.highway_rotation_probability,
                'normal_rotation_probability': self.rotation.normal_rotation_probability
            },
            'weights': {
                'highway_construction_priority': self.weights.highway_construction_priority,
                'even_path_length_weight': self.weights.even_path_length_weight,
                'highway_path_length_weight': self.weights.highway_path_length_weight
            },
            'iterations': self.iterations,
            'seed': self.seed,
            'logging': {
                'log_level': self.logging.log_level,
                'enable_debug_logging': self.logging.enable_debug_logging,
                'progress_log_interval': self.logging.progress_log_interval
            }
        }

    @property
    def snap_radius(self) -> float:
        """Radius within which a candidate merges into existing paths."""
        return self.branch.length * 0.8

    def validate_compatibility(self) -> List[str]:
        """
        Validate parameter combinations and return warnings.

        Returns list of warning messages for settings that are legal but
        likely to produce degenerate networks.
        """
        warnings = []

        if self.rotation.normal_rotation_probability == 0.0 and self.rotation.highway_rotation_probability == 0.0:
            warnings.append("Both rotation probabilities are zero - the network will not branch sideways")

        if self.branch.max_angle >= math.pi / 2:
            warnings.append("max_angle of 90 degrees or more lets lateral branches overlap straight ones")

        effective = self.branch.length * min(
            1.0,
            self.weights.even_path_length_weight,
            self.weights.highway_path_length_weight
        )
        if effective < self.snap_radius:
            warnings.append("Length weights below 1 make branches shorter than the snap radius")

        if self.iterations > 1_000_000:
            warnings.append("Very high iteration counts may take a long time")

        return warnings

    def log_configuration_summary(self):
        """Log a summary of the current configuration."""
        logger.info("=== NETWORK CONFIGURATION SUMMARY ===")
        logger.info(f"Start: {self.start}, iterations={self.iterations}, seed={self.seed}")
        logger.info(
            f"Branch: length={self.branch.length}, angle_deviation={self.branch.angle_deviation:.4f}, "
            f"max_angle={self.branch.max_angle:.4f}"
        )
        logger.info(
            f"Rotation: highway={self.rotation.highway_rotation_probability}, "
            f"normal={self.rotation.normal_rotation_probability}"
        )
        logger.info(
            f"Weights: priority={self.weights.highway_construction_priority}, "
            f"even={self.weights.even_path_length_weight}, highway={self.weights.highway_path_length_weight}"
        )

        warnings = self.validate_compatibility()
        if warnings:
            logger.warning("Configuration warnings:")
            for warning in warnings:
                logger.warning(f"  - {warning}")


# Global default configuration instance
DEFAULT_CONFIG = NetworkConfig()


def get_default_config() -> NetworkConfig:
    """Get default configuration instance."""
    return DEFAULT_CONFIG


def create_config_from_file(config_path: str) -> NetworkConfig:
    """
    Create configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        NetworkConfig instance
    """
    import os
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")

    return NetworkConfig.from_dict(config_dict)


def save_config_to_file(config: NetworkConfig, config_path: str):
    """
    Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save configuration
    """
    config_dict = config.to_dict()

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")
