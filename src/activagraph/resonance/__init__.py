"""Similarity scoring and resonance matching."""

from activagraph.resonance.matcher import ResonanceMatcher
from activagraph.resonance.similarity import cosine_similarity_to_many

__all__ = [
    "ResonanceMatcher",
    "cosine_similarity_to_many",
]
