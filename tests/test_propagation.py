"""
Unit tests for spreading-activation propagation.

Verifies the breadth-first firing rules, refractory handling, the two
regimes and the running coherence / chaos state of the engine.
"""

import numpy as np
import pytest
from activagraph.dynamics import BROAD, FOCUSED, PropagationEngine, strengthen_path
from activagraph.memory import Connection, NodeStore

from conftest import FakeClock


class TickingClock:
    """Clock that moves forward by a fixed step on every read."""

    def __init__(self, start: float = 1_000_000.0, step: float = 1.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


def make_store(n: int, potential: float = 0.0):
    store = NodeStore()
    nodes = [store.create_node(np.eye(n)[i], f"concept {i}", potential=potential)
             for i in range(n)]
    return store, nodes


def connect(a, b, weight):
    a.connections[b.id] = Connection(weight=weight, plasticity_rate=0.1, last_fired=0.0)


class TestRegimes:
    """Test the regime presets."""

    def test_broad(self):
        """Test broad regime constants."""
        assert (BROAD.spread, BROAD.threshold, BROAD.decay) == (0.8, 0.3, 0.9)

    def test_focused(self):
        """Test focused regime constants."""
        assert (FOCUSED.spread, FOCUSED.threshold, FOCUSED.decay) == (0.2, 0.7, 0.1)

    def test_params_frozen(self):
        """Test that regimes cannot be mutated."""
        with pytest.raises(Exception):
            BROAD.spread = 0.1


class TestPropagation:
    """Test PropagationEngine.propagate."""

    def test_isolated_seed(self):
        """Test that a seed with no connections yields only itself."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a], BROAD)

        assert path == [a]
        assert np.isclose(a.potential, 0.9)
        assert b.potential == 0.0

    def test_seed_decay_applied(self):
        """Test that every popped seed is decayed by the regime."""
        store, (a, b) = make_store(2, potential=1.0)
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a, b], FOCUSED)

        assert path == [a, b]
        assert np.isclose(a.potential, 0.1)
        assert np.isclose(b.potential, 0.1)

    def test_fires_neighbor_without_chaos(self):
        """Test the plain activation rule p·w·spread."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.5)
        clock = FakeClock()
        engine = PropagationEngine(store, clock=clock, chaos_threshold=1.0)

        path = engine.propagate([a], BROAD)

        assert not engine.edge_of_chaos
        assert path == [a, b]
        # b is decayed once when expanded, then skipped as refractory
        assert np.isclose(b.potential, 0.9 * 0.5 * 0.8 * 0.9)
        assert b.last_fired == clock.now

    def test_alignment_bonus_at_edge_of_chaos(self):
        """Test that the tanh alignment bonus is added at the edge of chaos."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.5)
        engine = PropagationEngine(store, clock=FakeClock(), alpha=1.0, chaos_threshold=1.2)

        engine.propagate([a], BROAD)

        base = 0.9 * 0.5 * 0.8
        assert engine.edge_of_chaos
        assert np.isclose(b.potential, (base + np.tanh(base)) * 0.9)

    def test_below_threshold_accumulates_but_does_not_fire(self):
        """Test that a neighbor below threshold gains potential but stays off the path."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.5)
        engine = PropagationEngine(store, clock=FakeClock(), chaos_threshold=1.0)

        path = engine.propagate([a], FOCUSED)

        assert path == [a]
        assert np.isclose(b.potential, 0.1 * 0.5 * 0.2)
        assert b.last_fired == 0.0

    def test_refractory_seed_skipped(self):
        """Test that a recently fired seed does not propagate but stays on the path."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.9)
        clock = FakeClock()
        a.last_fired = clock.now - 0.05
        engine = PropagationEngine(store, clock=clock)

        path = engine.propagate([a], BROAD)

        assert path == [a]
        assert np.isclose(a.potential, 0.9)
        assert b.potential == 0.0

    def test_frozen_clock_reaches_one_hop(self):
        """Test that a node fired this instant is refractory when expanded."""
        store, (a, b, c) = make_store(3)
        a.potential = 1.0
        connect(a, b, 0.9)
        connect(b, c, 0.9)
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a], BROAD)

        assert path == [a, b]
        assert c.potential == 0.0

    def test_moving_clock_reaches_further(self):
        """Test breadth-first cascade once refractory periods elapse."""
        store, (a, b, c) = make_store(3)
        a.potential = 1.0
        connect(a, b, 0.9)
        connect(b, c, 0.9)
        engine = PropagationEngine(store, clock=TickingClock())

        path = engine.propagate([a], BROAD)

        assert path == [a, b, c]

    def test_breadth_first_order(self):
        """Test that nodes fire in breadth-first order."""
        store, (a, b, c, d) = make_store(4)
        a.potential = 1.0
        connect(a, b, 0.9)
        connect(a, c, 0.9)
        connect(b, d, 0.9)
        engine = PropagationEngine(store, clock=TickingClock())

        path = engine.propagate([a], BROAD)

        assert path == [a, b, c, d]

    def test_each_node_fires_once(self):
        """Test that a node reachable twice appears once on the path."""
        store, (a, b, c, d) = make_store(4)
        a.potential = 1.0
        connect(a, b, 0.9)
        connect(a, c, 0.9)
        connect(b, d, 0.9)
        connect(c, d, 0.9)
        connect(d, a, 0.9)
        engine = PropagationEngine(store, clock=TickingClock())

        path = engine.propagate([a], BROAD)

        assert [n.id for n in path].count(d.id) == 1
        assert [n.id for n in path].count(a.id) == 1
        assert len(path) == 4

    def test_seeds_do_not_activate_each_other(self):
        """Test that seeds are visited from the start."""
        store, (a, b) = make_store(2, potential=1.0)
        connect(a, b, 0.9)
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a, b], BROAD)

        assert path == [a, b]
        assert np.isclose(b.potential, 0.9)

    def test_dangling_connection_ignored(self):
        """Test that connections to unknown ids are skipped."""
        store, (a,) = make_store(1, potential=1.0)
        a.connections["ghost"] = Connection(weight=0.9)
        engine = PropagationEngine(store, clock=FakeClock())

        assert engine.propagate([a], BROAD) == [a]

    def test_negative_weight_inhibits(self):
        """Test that a negative weight lowers the neighbor's potential."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        b.potential = 0.2
        connect(a, b, -0.5)
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a], BROAD)

        assert path == [a]
        assert b.potential < 0.2


class TestCoherenceTracking:
    """Test the running coherence score and chaos taming."""

    def test_initial_state(self):
        """Test a fresh engine."""
        engine = PropagationEngine(NodeStore())

        assert engine.coherence_score == 0.0
        assert engine.chaos_threshold == 1.2
        assert engine.edge_of_chaos

    def test_ema_update_on_firing(self):
        """Test the 0.9/0.1 moving average after one firing."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.6)
        engine = PropagationEngine(store, clock=FakeClock())

        engine.propagate([a], BROAD)

        assert np.isclose(engine.coherence_score, 0.1 * 0.6)

    def test_chaos_tamed_when_incoherent(self):
        """Test that low coherence shrinks the chaos gain by 1%."""
        store, (a, b) = make_store(2)
        a.potential = 1.0
        connect(a, b, 0.6)
        engine = PropagationEngine(store, clock=FakeClock())

        engine.propagate([a], BROAD)

        assert np.isclose(engine.chaos_threshold, 1.2 * 0.99)

    def test_chaos_disabled_after_repeated_taming(self):
        """Test that enough incoherent firings leave the edge of chaos."""
        store, (a, b) = make_store(2)
        engine = PropagationEngine(store, chaos_threshold=1.2)
        connect(a, b, 0.05)

        for _ in range(30):
            engine._update_coherence([a, b])

        assert engine.chaos_threshold <= 1.0
        assert not engine.edge_of_chaos

    def test_no_update_without_firing(self):
        """Test that an isolated seed leaves the score unchanged."""
        store, (a,) = make_store(1, potential=1.0)
        engine = PropagationEngine(store, clock=FakeClock())

        engine.propagate([a], BROAD)

        assert engine.coherence_score == 0.0
        assert engine.chaos_threshold == 1.2


class TestEndToEnd:
    """Propagation scenarios across learning."""

    def test_unconnected_nodes_not_reached(self):
        """Test that without a prior connection propagation stays at the seed."""
        store, (a, b) = make_store(2, potential=1.0)
        engine = PropagationEngine(store, clock=FakeClock())

        path = engine.propagate([a], BROAD)

        assert b not in path
        assert path == [a]

    def test_strengthened_pair_activates(self):
        """Test that after strengthening, propagation raises B by at least p_A·w_AB·0.8."""
        store, (a, b) = make_store(2, potential=1.0)
        clock = FakeClock()
        strengthen_path(store, [a, b], clock.now)
        clock.advance(1.0)

        weight = a.connections[b.id].weight
        before = b.potential
        engine = PropagationEngine(store, clock=clock)

        path = engine.propagate([a], BROAD)

        assert b in path
        assert b.potential - before >= a.potential * weight * 0.8


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
