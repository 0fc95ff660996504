"""Node records and the store that owns them."""

from activagraph.memory.node import Connection, Node
from activagraph.memory.store import NodeStore

__all__ = ["Connection", "Node", "NodeStore"]
