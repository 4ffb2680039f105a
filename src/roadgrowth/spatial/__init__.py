"""
Spatial Operations Module

This module provides the R-tree backed index of committed paths
used by the growth engine.
"""

from .spatial_index import PathIndex, IndexConsistencyError

__all__ = [
    'PathIndex',
    'IndexConsistencyError',
]
