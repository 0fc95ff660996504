"""
JSON persistence for the node store.

The whole store is written as a single versioned document keyed by node id.
A missing or corrupt document loads as an empty store so the network can
always start.
"""

import os
import json
import logging
import tempfile
import numpy as np
from pathlib import Path
from typing import Dict, Union

from pydantic import ValidationError

from activagraph.errors import PersistenceCorruption
from activagraph.memory import Connection, Node, NodeStore
from activagraph.storage.schema import (
    ConnectionRecord,
    NetworkSnapshot,
    NodeRecord,
    SCHEMA_VERSION
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def encode_node(node: Node) -> NodeRecord:
    return NodeRecord(
        potential=float(node.potential),
        decay=float(node.decay),
        threshold=float(node.threshold),
        refractory_period=float(node.refractory_period),
        last_fired=float(node.last_fired),
        connections=[
            (target_id, ConnectionRecord(
                weight=float(connection.weight),
                plasticity_rate=float(connection.plasticity_rate),
                last_fired=float(connection.last_fired),
            ))
            for target_id, connection in node.connections.items()
        ],
        embedding=None if node.embedding is None else node.embedding.tolist(),
        semantic_content=node.semantic_content,
    )


def decode_node(node_id: str, record: NodeRecord) -> Node:
    return Node(
        id=node_id,
        embedding=None if record.embedding is None else np.array(record.embedding, dtype=np.float32),
        semantic_content=record.semantic_content,
        potential=record.potential,
        decay=record.decay,
        threshold=record.threshold,
        refractory_period=record.refractory_period,
        last_fired=record.last_fired,
        connections={
            target_id: Connection(
                weight=edge.weight,
                plasticity_rate=edge.plasticity_rate,
                last_fired=edge.last_fired,
            )
            for target_id, edge in record.connections
        },
    )


def encode_store(store: NodeStore) -> Dict:
    """
    Serialize a store into a JSON-compatible document.

    Args:
        store: Node store to serialize

    Returns:
        dict: {'version': 1, 'nodes': {node_id: node_record}}

    Raises:
        PersistenceCorruption: If the store would produce an invalid document
            (e.g. a connection to a node the store does not hold)
    """
    try:
        snapshot = NetworkSnapshot(
            version=SCHEMA_VERSION,
            nodes={node.id: encode_node(node) for node in store},
        )
    except ValidationError as e:
        raise PersistenceCorruption(f"Network cannot be serialized: {e}") from e
    return snapshot.model_dump(mode="json")


def decode_store(data: Dict) -> NodeStore:
    """
    Rebuild a store from a document produced by encode_store.

    Raises:
        PersistenceCorruption: If the document does not validate
    """
    try:
        snapshot = NetworkSnapshot.model_validate(data)
    except ValidationError as e:
        raise PersistenceCorruption(f"Invalid network document: {e}") from e

    store = NodeStore()
    for node_id, record in snapshot.nodes.items():
        store.add(decode_node(node_id, record))
    return store


def save_store(store: NodeStore, path: PathLike):
    """
    Write the store to path atomically.

    The document is written to a temporary file in the same directory and
    moved into place, so readers never see a partial file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = encode_store(store)

    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.info("Saved network with %d nodes to %s", len(store), path)


def read_store(path: PathLike) -> NodeStore:
    """
    Read a store from path without recovery.

    Raises:
        FileNotFoundError: If path does not exist
        PersistenceCorruption: If the file is not a valid network document
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PersistenceCorruption(f"Unreadable network document {path}: {e}") from e
    return decode_store(data)


def load_store(path: PathLike) -> NodeStore:
    """
    Load a store from path, starting empty if it is missing or corrupt.

    Args:
        path: Network document location

    Returns:
        NodeStore (empty on a missing, unreadable or corrupt file)
    """
    try:
        store = read_store(path)
    except FileNotFoundError:
        logger.info("No existing network at %s, starting fresh", path)
        return NodeStore()
    except OSError as e:
        logger.warning("Cannot read network at %s, starting fresh: %s", path, e)
        return NodeStore()
    except PersistenceCorruption as e:
        logger.warning("Discarding corrupt network at %s: %s", path, e)
        return NodeStore()

    logger.info("Loaded existing network with %d nodes from %s", len(store), path)
    return store
