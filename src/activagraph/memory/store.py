"""
Node Store: the arena that owns every node and its outgoing connections.

Nodes are never deleted and ids are never reused. Connections are only created
between two nodes that already exist in the store.
"""

import uuid
import numpy as np
from typing import Dict, Iterator, List, Optional

from .node import Connection, Node, DEFAULT_PLASTICITY_RATE, DEFAULT_WEIGHT


class NodeStore:
    """
    Mapping from node id to Node, in creation order.

    Attributes:
        nodes (Dict[str, Node]): id -> Node
    """

    def __init__(self):
        self.nodes: Dict[str, Node] = {}

    def _new_id(self) -> str:
        node_id = f"node_{uuid.uuid4().hex}"
        while node_id in self.nodes:
            node_id = f"node_{uuid.uuid4().hex}"
        return node_id

    def create_node(self, embedding: Optional[np.ndarray],
                    semantic_content: Optional[str] = None,
                    potential: float = 1.0) -> Node:
        """
        Create and register a new node.

        Args:
            embedding: Semantic vector for the node
            semantic_content: Text the node represents
            potential: Initial activation (new nodes start fully active)

        Returns:
            The new Node
        """
        node = Node(
            id=self._new_id(),
            embedding=embedding,
            semantic_content=semantic_content,
            potential=potential,
        )
        self.nodes[node.id] = node
        return node

    def add(self, node: Node) -> Node:
        """
        Register an already-built node (used when restoring a snapshot).

        Raises:
            ValueError: If the id is already taken
        """
        if node.id in self.nodes:
            raise ValueError(f"Duplicate node id: {node.id}")
        self.nodes[node.id] = node
        return node

    def get(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def get_or_create_connection(self, source: Node, target: Node,
                                 now: float) -> Connection:
        """
        Get the directed connection source -> target, creating it if needed.

        New connections start at weight 0.1 with plasticity rate 0.1.

        Raises:
            KeyError: If either node is not owned by this store
            ValueError: On a self-connection
        """
        if source.id not in self.nodes or target.id not in self.nodes:
            raise KeyError(f"Unknown node in connection {source.id} -> {target.id}")
        if source.id == target.id:
            raise ValueError(f"Self-connection not allowed: {source.id}")

        connection = source.connections.get(target.id)
        if connection is None:
            connection = Connection(
                weight=DEFAULT_WEIGHT,
                plasticity_rate=DEFAULT_PLASTICITY_RATE,
                last_fired=now,
            )
            source.connections[target.id] = connection
        return connection

    def neighbors(self, node: Node) -> Iterator[tuple]:
        """Yield (neighbor Node, Connection) for node's outgoing edges that resolve."""
        for target_id, connection in node.connections.items():
            target = self.nodes.get(target_id)
            if target is not None:
                yield target, connection

    def reset_potentials(self, baseline: float = 0.0):
        """Set every node's potential to baseline."""
        for node in self.nodes.values():
            node.potential = baseline

    def connection_count(self) -> int:
        """Number of directed connections in the store."""
        return sum(len(node.connections) for node in self.nodes.values())

    def all_nodes(self) -> List[Node]:
        return list(self.nodes.values())

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self):
        return f"NodeStore(nodes={len(self.nodes)}, connections={self.connection_count()})"
