"""
Metrics for activated paths and for the store as a whole.

Path metrics:
- Coherence: mean |w| over consecutive path edges that exist
- Resonance: mean potential, clamped to 1
- Stability: fraction of nodes that fired within the last second

Store metrics are the same resonance/stability ideas taken over every node.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from activagraph.memory import Node, NodeStore

NARRATIVE_SEPARATOR = " → "
EMPTY_NARRATIVE = "No semantic content available"
PATH_STABILITY_WINDOW = 1.0
GLOBAL_STABILITY_WINDOW = 5.0


@dataclass
class ActivationPattern:
    """Metrics and narrative extracted from an activated path."""
    nodes: List[Node]
    coherence: float
    resonance: float
    stability: float
    narrative: str


@dataclass
class NetworkMetrics:
    """Store-wide monitoring metrics."""
    coherence: float
    resonance: float
    stability: float


def path_coherence(path: List[Node]) -> float:
    """
    Mean absolute weight of the consecutive edges that exist along path.

    Returns:
        float: 1.0 for paths shorter than 2, 0.0 if no consecutive edge exists
    """
    if len(path) < 2:
        return 1.0

    weights = []
    for current, following in zip(path[:-1], path[1:]):
        connection = current.connection_to(following.id)
        if connection is not None:
            weights.append(abs(connection.weight))

    return float(np.mean(weights)) if weights else 0.0


def path_resonance(path: List[Node]) -> float:
    """Mean potential across path nodes, at most 1.0."""
    if not path:
        return 0.0
    mean_potential = float(np.mean([node.potential for node in path]))
    return min(mean_potential, 1.0)


def path_stability(path: List[Node], now: float,
                   window: float = PATH_STABILITY_WINDOW) -> float:
    """Fraction of path nodes whose last firing is within window seconds of now."""
    if not path:
        return 0.0
    recent = sum(1 for node in path if now - node.last_fired < window)
    return recent / len(path)


def build_narrative(path: List[Node]) -> str:
    parts = [node.semantic_content for node in path if node.semantic_content]
    return NARRATIVE_SEPARATOR.join(parts) if parts else EMPTY_NARRATIVE


def extract_pattern(path: List[Node], now: float) -> ActivationPattern:
    """
    Extract the activation pattern of a path.

    Pure function of the path and the evaluation time.

    Args:
        path: Activated nodes, seeds first
        now: Evaluation time in epoch seconds

    Returns:
        ActivationPattern
    """
    return ActivationPattern(
        nodes=list(path),
        coherence=path_coherence(path),
        resonance=path_resonance(path),
        stability=path_stability(path, now),
        narrative=build_narrative(path),
    )


def global_resonance(store: NodeStore) -> float:
    """Mean potential over every node in the store, at most 1.0."""
    if len(store) == 0:
        return 0.0
    total = sum(node.potential for node in store)
    return min(total / len(store), 1.0)


def global_stability(store: NodeStore, now: float,
                     window: float = GLOBAL_STABILITY_WINDOW) -> float:
    """Fraction of all nodes that fired within window seconds of now."""
    if len(store) == 0:
        return 0.0
    recent = sum(1 for node in store if now - node.last_fired < window)
    return recent / len(store)
