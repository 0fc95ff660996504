"""
Plasticity updates for the activation graph.

Hebbian reinforcement along an activated path (fire together, wire together):

Forward edge a→b:
Δ = η_ab · p_a · p_b
w_ab ← tanh(w_ab + Δ)

Reverse edge b→a (weaker):
w_ba ← tanh(w_ba + 0.7 Δ)

Anti-Hebbian decay of every edge leaving the path:
w ← 0.99 w
"""

import time
import numpy as np
from typing import Iterable, List, Optional

from activagraph.memory import Connection, Node, NodeStore

REVERSE_GAIN = 0.7
UNUSED_DECAY = 0.99


def hebbian_delta(connection: Connection, pre: Node, post: Node) -> float:
    """Hebbian increment Δ = η · pre · post."""
    return connection.plasticity_rate * pre.potential * post.potential


def squash(weight: float) -> float:
    """Keep a weight bounded in (-1, 1)."""
    return float(np.tanh(weight))


def reinforce_pair(store: NodeStore, pre: Node, post: Node, now: float) -> float:
    """
    Strengthen pre→post and, more weakly, post→pre.

    Both connections are created with default weight and rate if missing.

    Returns:
        float: The forward Hebbian increment Δ
    """
    forward = store.get_or_create_connection(pre, post, now)
    delta = hebbian_delta(forward, pre, post)
    forward.weight = squash(forward.weight + delta)
    forward.last_fired = now

    reverse = store.get_or_create_connection(post, pre, now)
    reverse.weight = squash(reverse.weight + delta * REVERSE_GAIN)

    return delta


def decay_unused(path: List[Node], factor: float = UNUSED_DECAY):
    """
    Weaken every connection leaving the path.

    Connections whose target is itself on the path are left untouched.
    """
    on_path = {node.id for node in path}

    for node in path:
        for target_id, connection in node.connections.items():
            if target_id not in on_path:
                connection.weight *= factor


def strengthen_path(store: NodeStore, path: Iterable[Node], now: Optional[float] = None):
    """
    Apply one Hebbian + anti-Hebbian pass over an activated path.

    Args:
        store: Store owning the path nodes
        path: Activated nodes in activation order
        now: Epoch seconds to stamp on strengthened edges (defaults to time.time())
    """
    if now is None:
        now = time.time()

    path = list(path)

    for pre, post in zip(path[:-1], path[1:]):
        # No self-loops
        if pre.id == post.id:
            continue
        reinforce_pair(store, pre, post, now)

    decay_unused(path)
