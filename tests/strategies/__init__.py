"""Hypothesis strategies for dotlex property-based testing.

Usage:
    from tests.strategies import key_segments, translation_trees
"""

from .translations import (
    dotted_keys,
    key_segments,
    param_maps,
    param_values,
    translation_trees,
    tree_with_key,
)

__all__ = [
    "dotted_keys",
    "key_segments",
    "param_maps",
    "param_values",
    "translation_trees",
    "tree_with_key",
]
