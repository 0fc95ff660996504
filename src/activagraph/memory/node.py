"""
Node and connection records for the activation graph.

Nodes live in a NodeStore arena and refer to each other only by id, so a
connection is a plain directed record keyed by its target id.
"""

import numpy as np
from typing import Dict, Optional
from dataclasses import dataclass, field

DEFAULT_WEIGHT = 0.1
DEFAULT_PLASTICITY_RATE = 0.1


@dataclass
class Connection:
    """
    Directed weighted edge to another node.

    Attributes:
        weight: Edge strength, kept in (-1, 1) by tanh squashing
        plasticity_rate: Hebbian learning rate, fixed at creation
        last_fired: Epoch seconds of the last strengthening event
    """
    weight: float = DEFAULT_WEIGHT
    plasticity_rate: float = DEFAULT_PLASTICITY_RATE
    last_fired: float = 0.0


@dataclass(eq=False)
class Node:
    """
    A concept in the activation graph.

    Attributes:
        id: Unique identifier assigned by the store
        embedding: Semantic fingerprint (fixed-length float vector)
        semantic_content: Text the node was created from
        potential: Current activation level
        decay: Per-node decay rate
        threshold: Per-node firing threshold
        refractory_period: Minimum seconds between firings
        last_fired: Epoch seconds of the last threshold crossing
        connections: Target node id -> Connection
    """
    id: str
    embedding: Optional[np.ndarray] = None
    semantic_content: Optional[str] = None
    potential: float = 1.0
    decay: float = 0.9
    threshold: float = 0.5
    refractory_period: float = 0.1
    last_fired: float = 0.0
    connections: Dict[str, Connection] = field(default_factory=dict)

    def __post_init__(self):
        if self.embedding is not None:
            self.embedding = np.asarray(self.embedding, dtype=np.float32)

    def connection_to(self, target_id: str) -> Optional[Connection]:
        """Get the outgoing connection to target_id, if any."""
        return self.connections.get(target_id)

    def __repr__(self):
        dim = None if self.embedding is None else len(self.embedding)
        return (f"Node(id={self.id!r}, potential={self.potential:.3f}, "
                f"dim={dim}, connections={len(self.connections)})")
