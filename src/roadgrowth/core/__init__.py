"""
Core Configuration Module

This module provides the configuration for the road network growth engine.
"""

from .config import (
    NetworkConfig,
    BranchConfig,
    RotationConfig,
    WeightConfig,
    LoggingConfig,
    get_default_config,
    create_config_from_file,
    save_config_to_file,
)

__all__ = [
    'NetworkConfig',
    'BranchConfig',
    'RotationConfig',
    'WeightConfig',
    'LoggingConfig',
    'get_default_config',
    'create_config_from_file',
    'save_config_to_file',
]
