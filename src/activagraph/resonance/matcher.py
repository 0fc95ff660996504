"""
Resonance Matcher: map a query vector onto the node store.

Every node whose embedding resonates with the query (cosine similarity above
the threshold) is returned with its potential set to that similarity. When
nothing resonates a new node is created for the query and becomes the only
seed.
"""

import logging
import numpy as np
from typing import List, Optional

from activagraph.memory import Node, NodeStore
from activagraph.resonance.similarity import cosine_similarity_to_many

logger = logging.getLogger(__name__)


class ResonanceMatcher:
    """
    Find or create the nodes a vector activates.

    Attributes:
        store: Node store to search and extend
        threshold: Similarity a node must strictly exceed to resonate
    """

    def __init__(self, store: NodeStore, threshold: float = 0.7):
        self.store = store
        self.threshold = threshold

    def similarities(self, vector: np.ndarray) -> List[tuple]:
        """
        Score every comparable node against vector.

        Nodes without an embedding or with a different dimensionality are
        skipped.

        Returns:
            List of (Node, similarity) in store order
        """
        query = np.asarray(vector, dtype=np.float32)
        candidates = [
            node for node in self.store
            if node.embedding is not None and node.embedding.shape == query.shape
        ]

        if not candidates:
            return []

        matrix = np.stack([node.embedding for node in candidates])
        scores = cosine_similarity_to_many(query, matrix)

        return list(zip(candidates, (float(s) for s in scores)))

    def match(self, vector: np.ndarray, raw_text: Optional[str] = None) -> List[Node]:
        """
        Get the resonant nodes for vector, creating one on a miss.

        Args:
            vector: Query embedding
            raw_text: Text stored on the node if one has to be created

        Returns:
            Non-empty list of nodes in store order
        """
        resonant = []

        for node, similarity in self.similarities(vector):
            if similarity > self.threshold:
                node.potential = similarity
                resonant.append(node)

        if not resonant:
            node = self.store.create_node(
                np.asarray(vector, dtype=np.float32),
                semantic_content=raw_text,
                potential=1.0,
            )
            logger.debug("No resonant nodes, created %s", node.id)
            resonant.append(node)
        else:
            logger.debug("%d resonant nodes above %.2f", len(resonant), self.threshold)

        return resonant
