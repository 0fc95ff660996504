"""
Propagation Engine: breadth-first spreading activation.

For each node popped from the wavefront:

    p_current ← decay · p_current
    a = p_current · w · spread (+ α tanh(a) at the edge of chaos)
    p_neighbor ← p_neighbor + a

A neighbor whose potential crosses the threshold fires, joins the path and
the wavefront. Each node fires at most once per call.

The engine also tracks a running coherence score (exponential moving average
over every path it grows) and tames its chaos gain when coherence stays low.
"""

import time
import logging
import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Callable, List

from activagraph.memory import Node, NodeStore
from activagraph.metrics import path_coherence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationParams:
    """
    Propagation regime.

    Attributes:
        spread: Fraction of a node's potential passed along each edge
        threshold: Potential a neighbor must exceed to fire
        decay: Multiplier applied to a node's potential when it is expanded
    """
    spread: float
    threshold: float
    decay: float


# System 1: broad, intuitive leaps through many weak associations
BROAD = ActivationParams(spread=0.8, threshold=0.3, decay=0.9)

# System 2: focused, only strong connections fire
FOCUSED = ActivationParams(spread=0.2, threshold=0.7, decay=0.1)

COHERENCE_MOMENTUM = 0.9
CHAOS_LOWER = 1.0
CHAOS_UPPER = 1.5
LOW_COHERENCE = 0.5
CHAOS_TAMING = 0.99


class PropagationEngine:
    """
    Spreading-activation simulator over a node store.

    Attributes:
        store: Node store to propagate over
        clock: Callable returning epoch seconds
        alpha: Scale of the alignment bonus
        chaos_threshold: Chaos gain; the bonus is active while in (1.0, 1.5)
        coherence_score: Running EMA of path coherence
    """

    def __init__(self, store: NodeStore, clock: Callable[[], float] = time.time,
                 alpha: float = 1.0, chaos_threshold: float = 1.2):
        self.store = store
        self.clock = clock
        self.alpha = alpha
        self.chaos_threshold = chaos_threshold
        self.coherence_score = 0.0

    @property
    def edge_of_chaos(self) -> bool:
        """Whether the alignment bonus is currently applied."""
        return CHAOS_LOWER < self.chaos_threshold < CHAOS_UPPER

    def _alignment_bonus(self, activation: float) -> float:
        if not self.edge_of_chaos:
            return 0.0
        return self.alpha * float(np.tanh(activation))

    def _update_coherence(self, path: List[Node]):
        if len(path) < 2:
            return

        instant = path_coherence(path)
        self.coherence_score = (COHERENCE_MOMENTUM * self.coherence_score
                                + (1 - COHERENCE_MOMENTUM) * instant)

        if self.coherence_score < LOW_COHERENCE and self.chaos_threshold > CHAOS_LOWER:
            self.chaos_threshold *= CHAOS_TAMING

    def propagate(self, seeds: List[Node], params: ActivationParams) -> List[Node]:
        """
        Spread activation outward from seeds.

        Args:
            seeds: Starting nodes (they open the path in the given order)
            params: Propagation regime

        Returns:
            Activated path: seeds first, then fired nodes in firing order
        """
        path = list(seeds)
        visited = {node.id for node in seeds}
        wavefront = deque(seeds)

        while wavefront:
            current = wavefront.popleft()
            current.potential *= params.decay

            now = self.clock()
            if now - current.last_fired < current.refractory_period:
                continue

            for neighbor, connection in self.store.neighbors(current):
                if neighbor.id in visited:
                    continue

                activation = current.potential * connection.weight * params.spread
                activation += self._alignment_bonus(activation)
                neighbor.potential += activation

                if neighbor.potential > params.threshold:
                    neighbor.last_fired = now
                    wavefront.append(neighbor)
                    path.append(neighbor)
                    visited.add(neighbor.id)
                    self._update_coherence(path)

        logger.debug("Propagated %d seeds to %d nodes (spread=%.2f, threshold=%.2f)",
                     len(seeds), len(path), params.spread, params.threshold)
        return path

    def __repr__(self):
        return (f"PropagationEngine(coherence={self.coherence_score:.3f}, "
                f"chaos={self.chaos_threshold:.3f})")
