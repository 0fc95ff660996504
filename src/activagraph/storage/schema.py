"""Pydantic schemas for the persisted network document.

One record type per persisted entity:
- ConnectionRecord: a directed edge
- NodeRecord: a node with its outgoing edges as (target id, edge) pairs
- NetworkSnapshot: the versioned document keyed by node id
"""

from __future__ import annotations

import math
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SCHEMA_VERSION = 1


class ConnectionRecord(BaseModel):
    """A persisted directed connection."""
    model_config = ConfigDict(extra="forbid")

    weight: float = Field(ge=-1.0, le=1.0)
    plasticity_rate: float
    last_fired: float


class NodeRecord(BaseModel):
    """A persisted node; connections keep their insertion order."""
    model_config = ConfigDict(extra="forbid")

    potential: float
    decay: float
    threshold: float
    refractory_period: float
    last_fired: float
    connections: List[Tuple[str, ConnectionRecord]]
    embedding: Optional[List[float]]
    semantic_content: Optional[str]

    @field_validator("potential", "decay", "threshold", "refractory_period", "last_fired")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be finite")
        return value


class NetworkSnapshot(BaseModel):
    """Versioned document holding every node of a store."""
    model_config = ConfigDict(extra="forbid")

    version: Literal[1]
    nodes: Dict[str, NodeRecord]

    @model_validator(mode="after")
    def _connections_resolve(self) -> "NetworkSnapshot":
        for node_id, record in self.nodes.items():
            targets = [target for target, _ in record.connections]
            if len(set(targets)) != len(targets):
                raise ValueError(f"duplicate connection on {node_id}")
            for target in targets:
                if target == node_id:
                    raise ValueError(f"self-connection on {node_id}")
                if target not in self.nodes:
                    raise ValueError(f"{node_id} connects to unknown node {target}")
        return self
