"""Spreading activation and plasticity dynamics."""

from activagraph.dynamics.plasticity import (
    decay_unused,
    hebbian_delta,
    reinforce_pair,
    strengthen_path
)
from activagraph.dynamics.propagation import (
    ActivationParams,
    BROAD,
    FOCUSED,
    PropagationEngine
)

__all__ = [
    "ActivationParams",
    "BROAD",
    "FOCUSED",
    "PropagationEngine",
    "strengthen_path",
    "reinforce_pair",
    "hebbian_delta",
    "decay_unused"
]
