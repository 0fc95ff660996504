"""
activagraph: An Activation-Based Memory Network with Hebbian Learning

Knowledge is held as a graph of concept nodes, each carrying an embedding and
the text it was created from. Connections between nodes are strengthened when
they activate together (Hebbian learning) and slowly weaken when unused.

Queries are answered by spreading activation outward from the nodes that
resonate with the query embedding, under one of two regimes:
- System 1: broad, fast propagation through many weak associations
- System 2: focused, deliberative propagation through strong associations only

The coherence of the System 1 path decides whether System 2 is needed.
"""

__version__ = "0.1.0"

from activagraph.config import NetworkConfig
from activagraph.errors import (
    ActivationNetworkError,
    InvalidInput,
    PersistenceCorruption,
    ServiceFailure
)
from activagraph.network import ActivationNetwork, Thought

__all__ = [
    "ActivationNetwork",
    "Thought",
    "NetworkConfig",
    "ActivationNetworkError",
    "ServiceFailure",
    "PersistenceCorruption",
    "InvalidInput",
]
