"""
Activation Network: orchestrator for learning and thinking over the node store.

learn(text):  embed as document → match/create → strengthen
think(query): embed as query → match → broad propagation → metrics →
              (focused propagation if incoherent) → respond → strengthen broad path

Broad propagation is System 1 (fast, intuitive); focused propagation is
System 2 (slow, deliberative). The coherence of the broad path decides which
system answers.
"""

import time
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from activagraph.config import NetworkConfig
from activagraph.dynamics import BROAD, FOCUSED, PropagationEngine, strengthen_path
from activagraph.errors import InvalidInput
from activagraph.ingestion import CompletionService, EmbeddingService, LMStudioService, build_prompt
from activagraph.memory import NodeStore
from activagraph.metrics import (
    ActivationPattern,
    NetworkMetrics,
    extract_pattern,
    global_resonance,
    global_stability
)
from activagraph.resonance import ResonanceMatcher
from activagraph.storage import load_store, save_store

logger = logging.getLogger(__name__)

SYSTEM_FAST = "fast"
SYSTEM_REASON = "reason"


@dataclass
class Thought:
    """
    Result of a think call.

    Attributes:
        response: Text returned by the completion service
        system: 'fast' (System 1) or 'reason' (System 2)
        model: Completion model that produced the response
        broad: Pattern of the broad propagation
        focused: Pattern of the focused propagation (System 2 only)
    """
    response: str
    system: str
    model: str
    broad: ActivationPattern
    focused: Optional[ActivationPattern] = None

    @property
    def pattern(self) -> ActivationPattern:
        """Pattern whose narrative the response was generated from."""
        return self.focused if self.focused is not None else self.broad


def _validate_text(text, name: str) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInput(f"{name} is required and must be a non-empty string")
    return text


class ActivationNetwork:
    """
    Activation-based memory with Hebbian learning.

    Owns one NodeStore and the matcher/engine that operate on it. Calls to
    learn/think/persist are serialized by a per-network lock.

    Attributes:
        store: Node store
        config: Network configuration
        matcher: Resonance matcher over store
        engine: Propagation engine over store
        embedder: Embedding service
        completer: Completion service
        clock: Callable returning epoch seconds
    """

    def __init__(self, embedder: EmbeddingService,
                 completer: Optional[CompletionService] = None,
                 store: Optional[NodeStore] = None,
                 config: Optional[NetworkConfig] = None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize the network.

        Args:
            embedder: Embedding service
            completer: Completion service (defaults to embedder when it can respond)
            store: Existing node store (defaults to an empty one)
            config: Network configuration (defaults to NetworkConfig())
            clock: Time source in epoch seconds
        """
        self.config = config or NetworkConfig()
        self.store = store if store is not None else NodeStore()
        self.embedder = embedder
        self.completer = completer if completer is not None else embedder
        self.clock = clock

        self.matcher = ResonanceMatcher(self.store, threshold=self.config.match_threshold)
        self.engine = PropagationEngine(
            self.store,
            clock=clock,
            alpha=self.config.alpha,
            chaos_threshold=self.config.chaos_threshold
        )

        self._lock = asyncio.Lock()

    @classmethod
    def open(cls, config: Optional[NetworkConfig] = None,
             service: Optional[LMStudioService] = None,
             clock: Callable[[], float] = time.time) -> "ActivationNetwork":
        """
        Load the store from config.network_path and wire up the services.

        A missing or corrupt network file yields an empty store.
        """
        config = config or NetworkConfig()
        store = load_store(config.network_path)
        service = service or LMStudioService.from_config(config)
        return cls(service, service, store=store, config=config, clock=clock)

    def _prime(self):
        if self.config.reset_potentials:
            self.store.reset_potentials(self.config.baseline_potential)

    async def learn(self, experience: str) -> None:
        """
        Learn a piece of text.

        Args:
            experience: Text to learn

        Raises:
            InvalidInput: If experience is empty or not a string
            ServiceFailure: If embedding fails
        """
        _validate_text(experience, "Text")

        async with self._lock:
            embedding = await self.embedder.embed(experience, "learn")

            self._prime()
            resonant = self.matcher.match(embedding, experience)
            strengthen_path(self.store, resonant, self.clock())

            logger.info('Learned: "%s..."', experience[:50])

            interval = self.config.save_interval
            if interval and len(self.store) % interval == 0:
                self.save()

    async def think_detailed(self, query: str) -> Thought:
        """
        Answer a query through activation cascades.

        Args:
            query: Question or prompt

        Returns:
            Thought with the response and the patterns it came from

        Raises:
            InvalidInput: If query is empty or not a string
            ServiceFailure: If embedding or completion fails
        """
        _validate_text(query, "Query")

        async with self._lock:
            embedding = await self.embedder.embed(query, "think")

            self._prime()
            resonant = self.matcher.match(embedding, query)

            broad_path = self.engine.propagate(resonant, BROAD)
            broad = extract_pattern(broad_path, self.clock())

            focused = None
            if broad.coherence > self.config.coherence_threshold:
                logger.info("Using System 1 (fast/intuitive), coherence=%.3f", broad.coherence)
                system, model = SYSTEM_FAST, self.config.fast_model
                narrative = broad.narrative
            else:
                logger.info("Using System 2 (slow/deliberative), coherence=%.3f", broad.coherence)
                focused_path = self.engine.propagate(resonant, FOCUSED)
                focused = extract_pattern(focused_path, self.clock())
                system, model = SYSTEM_REASON, self.config.reason_model
                narrative = focused.narrative

            response = await self.completer.respond(build_prompt(narrative), model)

            strengthen_path(self.store, broad_path, self.clock())

        return Thought(response=response, system=system, model=model,
                       broad=broad, focused=focused)

    async def think(self, query: str) -> str:
        """Answer a query; see think_detailed."""
        thought = await self.think_detailed(query)
        return thought.response

    def get_metrics(self) -> NetworkMetrics:
        """
        Get store-wide monitoring metrics.

        Returns:
            NetworkMetrics: running coherence, mean resonance, recent-firing stability
        """
        return NetworkMetrics(
            coherence=self.engine.coherence_score,
            resonance=global_resonance(self.store),
            stability=global_stability(self.store, self.clock())
        )

    @property
    def size(self) -> int:
        return len(self.store)

    def save(self):
        """Write the store to config.network_path."""
        save_store(self.store, self.config.network_path)

    async def persist(self):
        """Save with exclusive access to the store."""
        async with self._lock:
            self.save()

    async def close(self):
        services = [self.embedder]
        if self.completer is not self.embedder:
            services.append(self.completer)

        for service in services:
            close = getattr(service, "close", None)
            if close is not None:
                await close()

    def __len__(self):
        return len(self.store)

    def __repr__(self):
        return (f"ActivationNetwork(nodes={len(self.store)}, "
                f"connections={self.store.connection_count()}, "
                f"coherence={self.engine.coherence_score:.3f})")
