"""Deep merge of translation data with dangerous-key filtering.

Loaded data is merged into a locale's existing tree in place. Keys in
DANGEROUS_KEYS are skipped at every depth: they are neither assigned nor
descended into. Subtrees taken from the source are rebuilt through the same
filter, so no source dict is ever aliased into the target.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from dotlex.constants import DANGEROUS_KEYS

if TYPE_CHECKING:
    from dotlex.localization.types import TranslationTree

__all__ = ["safe_merge"]

logger = logging.getLogger(__name__)


def safe_merge(target: TranslationTree, source: Mapping[str, object]) -> TranslationTree:
    """Merge source into target in place and return target.

    Rules per key of source:
        - dangerous key: skipped
        - both values are mappings: merged recursively
        - otherwise: the source value replaces the target value

    Args:
        target: Tree receiving the data (mutated)
        source: Tree fragment to merge

    Returns:
        The mutated target

    Example:
        >>> tree = {"nav": {"home": "Home"}}
        >>> safe_merge(tree, {"nav": {"about": "About"}, "__proto__": {"x": "y"}})
        {'nav': {'home': 'Home', 'about': 'About'}}
    """
    for key, source_value in source.items():
        if key in DANGEROUS_KEYS:
            logger.debug("Dropped dangerous translation key: %r", key)
            continue

        if isinstance(source_value, Mapping):
            target_value = target.get(key)
            if not isinstance(target_value, dict):
                target_value = {}
                target[key] = target_value
            safe_merge(target_value, source_value)
        else:
            target[key] = source_value  # type: ignore[assignment]
    return target
