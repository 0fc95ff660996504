"""Shared fixtures: a controllable clock and in-memory fake services."""

import zlib
import numpy as np
import pytest

from activagraph.errors import ServiceFailure


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeService:
    """
    Embedding + completion service backed by a lookup table.

    Texts missing from the table get a deterministic random unit vector.
    """

    def __init__(self, vectors=None, dim: int = 8, response: str = "ok"):
        self.vectors = dict(vectors or {})
        self.dim = dim
        self.response = response
        self.embed_calls = []
        self.prompts = []
        self.fail_embed = False
        self.fail_respond = False

    async def embed(self, text, task="think"):
        self.embed_calls.append((text, task))
        if self.fail_embed:
            raise ServiceFailure("embedding backend down")
        if text not in self.vectors:
            rng = np.random.RandomState(zlib.crc32(text.encode("utf-8")))
            self.vectors[text] = rng.randn(self.dim)
        return np.asarray(self.vectors[text], dtype=np.float32)

    async def respond(self, prompt, model):
        self.prompts.append((prompt, model))
        if self.fail_respond:
            raise ServiceFailure(f"Model {model} returned empty response")
        return self.response


def unit(index: int, dim: int = 8) -> np.ndarray:
    """Standard basis vector; distinct indices are orthogonal."""
    v = np.zeros(dim, dtype=np.float32)
    v[index] = 1.0
    return v


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service():
    return FakeService()
