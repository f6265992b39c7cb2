"""
Qualifier Resolver
==================
Picks the effective base value of a spec for the current screen.

Why is this file needed?
------------------------
1. Priority: A designer may attach three kinds of overrides to one dimension.
   They are evaluated strictly in the order
   Intersection > UI mode > Qualifier > spec default.
2. Determinism: When several qualifier entries hold at once, the winner is
   chosen by a total order (kind priority, then the largest threshold), so the
   outcome never depends on declaration order.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from responsivedimens.model.metrics import ScreenMetrics
from responsivedimens.model.qualifiers import IntersectionEntry, QualifierEntry, ScreenOverrides

logger = logging.getLogger(__name__)


def best_qualifier(entries: Iterable[QualifierEntry], metrics: ScreenMetrics) -> Optional[QualifierEntry]:
    """
    Return the most specific entry whose condition holds, or None.

    Ordering: smallest width > height > width; within a kind the largest
    threshold wins. On a full tie the first declared entry is kept.
    """
    best: Optional[QualifierEntry] = None
    for entry in entries:
        if not entry.matches(metrics):
            continue
        if best is None or entry.specificity > best.specificity:
            best = entry
    return best


def best_intersection(
    entries: Iterable[IntersectionEntry], metrics: ScreenMetrics
) -> Optional[IntersectionEntry]:
    """Among entries for the current UI mode whose qualifier holds, the largest threshold wins."""
    best: Optional[IntersectionEntry] = None
    for entry in entries:
        if not entry.matches(metrics):
            continue
        if best is None:
            best = entry
            continue
        candidate = (entry.qualifier.threshold, entry.qualifier.kind.priority)
        current = (best.qualifier.threshold, best.qualifier.kind.priority)
        if candidate > current:
            best = entry
    return best


def resolve_base_value(overrides: ScreenOverrides, base_value: float, metrics: ScreenMetrics) -> float:
    """
    Resolve the base value that applies on the given screen.

    Args:
        overrides: The spec's override collections.
        base_value: Spec default, returned when nothing matches.
        metrics: Current screen snapshot.

    Returns:
        The effective base value.
    """
    if overrides.is_empty:
        return base_value

    intersection = best_intersection(overrides.intersection, metrics)
    if intersection is not None:
        logger.debug(
            f"Intersection override {intersection.ui_mode}/{intersection.qualifier.kind}"
            f">={intersection.qualifier.threshold} -> {intersection.value}"
        )
        return intersection.value

    ui_value = overrides.ui_mode_value(metrics.ui_mode)
    if ui_value is not None:
        logger.debug(f"UI mode override {metrics.ui_mode} -> {ui_value}")
        return ui_value

    qualifier = best_qualifier(overrides.qualifier, metrics)
    if qualifier is not None:
        logger.debug(f"Qualifier override {qualifier.kind}>={qualifier.threshold} -> {qualifier.value}")
        return qualifier.value

    return base_value
