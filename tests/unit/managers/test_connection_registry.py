"""
Tests for the connection registry.

This module tests registry membership, the bruteforcing flag, count
snapshots and consistency under concurrent access from many threads.
"""

import random
import threading
from concurrent.futures import ThreadPoolExecutor

from bruteforce_hub.managers.connection_registry import (
    ConnectionRegistry,
    RegistryCounts,
)
from tests.mocks.websocket_mocks import create_mock_websocket


class TestConnectionRegistry:
    """Tests for ConnectionRegistry membership and flags."""

    def test_init(self, registry):
        """Test a new registry is empty."""
        assert registry.watching_count() == 0
        assert registry.bruteforcing_count() == 0
        assert registry.send_handles() == []
        assert len(registry) == 0

    def test_insert(self, registry):
        """Test inserting a connection returns counts after the insert."""
        mock_ws = create_mock_websocket()

        counts = registry.insert("c1", mock_ws)

        assert counts == RegistryCounts(watching=1, bruteforcing=0)
        assert "c1" in registry
        assert registry.is_bruteforcing("c1") is False
        assert registry.send_handles() == [("c1", mock_ws)]

    def test_insert_existing_id_overwrites(self, registry):
        """Test inserting an existing id replaces the entry and its flag."""
        first_ws = create_mock_websocket()
        second_ws = create_mock_websocket()
        registry.insert("c1", first_ws)
        registry.set_bruteforcing("c1", True)

        counts = registry.insert("c1", second_ws)

        assert counts == RegistryCounts(watching=1, bruteforcing=0)
        assert registry.send_handles() == [("c1", second_ws)]

    def test_remove(self, registry):
        """Test removing a connection returns counts after the removal."""
        registry.insert("c1", create_mock_websocket())
        registry.insert("c2", create_mock_websocket())
        registry.set_bruteforcing("c2", True)

        counts = registry.remove("c2")

        assert counts == RegistryCounts(watching=1, bruteforcing=0)
        assert "c2" not in registry

    def test_remove_nonexistent(self, registry):
        """Test removing an unknown id does nothing."""
        registry.insert("c1", create_mock_websocket())

        counts = registry.remove("missing")

        assert counts == RegistryCounts(watching=1, bruteforcing=0)
        assert "c1" in registry

    def test_remove_twice_is_idempotent(self, registry):
        """Test error followed by close for the same id counts once."""
        registry.insert("c1", create_mock_websocket())
        registry.insert("c2", create_mock_websocket())

        registry.remove("c1")
        counts = registry.remove("c1")

        assert counts.watching == 1
        assert registry.watching_count() == 1

    def test_pop_returns_removed_entry(self, registry):
        """Test pop hands back the removed entry once."""
        mock_ws = create_mock_websocket()
        registry.insert("c1", mock_ws)

        connection, counts = registry.pop("c1")
        again, _ = registry.pop("c1")

        assert connection.id == "c1"
        assert connection.websocket is mock_ws
        assert counts.watching == 0
        assert again is None

    def test_set_bruteforcing(self, registry):
        """Test the flag toggles and counts follow it."""
        registry.insert("c1", create_mock_websocket())
        registry.insert("c2", create_mock_websocket())

        assert registry.set_bruteforcing("c1", True) == RegistryCounts(2, 1)
        assert registry.set_bruteforcing("c2", True) == RegistryCounts(2, 2)
        assert registry.set_bruteforcing("c1", False) == RegistryCounts(2, 1)
        assert registry.is_bruteforcing("c1") is False
        assert registry.is_bruteforcing("c2") is True

    def test_set_bruteforcing_is_idempotent(self, registry):
        """Test setting the same value twice keeps the same counts."""
        registry.insert("c1", create_mock_websocket())

        first = registry.set_bruteforcing("c1", True)
        second = registry.set_bruteforcing("c1", True)

        assert first == second == RegistryCounts(1, 1)

    def test_set_bruteforcing_unknown_id(self, registry):
        """Test flag changes for unregistered ids are ignored."""
        registry.insert("c1", create_mock_websocket())

        assert registry.set_bruteforcing("missing", True) is None
        assert registry.bruteforcing_count() == 0
        assert registry.is_bruteforcing("missing") is None

    def test_counts_snapshot(self, registry):
        """Test counts() matches the individual counters."""
        for connection_id in ("c1", "c2", "c3"):
            registry.insert(connection_id, object())
        registry.set_bruteforcing("c3", True)

        assert registry.counts() == RegistryCounts(
            watching=registry.watching_count(),
            bruteforcing=registry.bruteforcing_count(),
        )

    def test_send_handles_is_a_snapshot(self, registry):
        """Test later mutations do not change an earlier snapshot."""
        registry.insert("c1", create_mock_websocket())
        snapshot = registry.send_handles()

        registry.insert("c2", create_mock_websocket())
        registry.remove("c1")

        assert [key for key, _ in snapshot] == ["c1"]
        assert [key for key, _ in registry.send_handles()] == ["c2"]


class TestConnectionRegistryProperties:
    """Counting properties over operation sequences."""

    def test_watching_count_matches_connects_minus_disconnects(self):
        """Test repeated and unknown disconnects never skew the count."""
        rng = random.Random(1234)
        registry = ConnectionRegistry()
        open_ids: set[str] = set()

        for step in range(500):
            action = rng.choice(["connect", "disconnect", "repeat", "flag"])
            if action == "connect":
                connection_id = f"c{step}"
                registry.insert(connection_id, object())
                open_ids.add(connection_id)
            elif action == "disconnect" and open_ids:
                connection_id = rng.choice(sorted(open_ids))
                registry.remove(connection_id)
                open_ids.discard(connection_id)
            elif action == "repeat":
                registry.remove(f"c{rng.randrange(step + 1)}")
                open_ids = {
                    key for key in open_ids if key in registry
                }
            elif action == "flag" and open_ids:
                registry.set_bruteforcing(
                    rng.choice(sorted(open_ids)), rng.random() < 0.5
                )

            counts = registry.counts()
            assert counts.watching == len(open_ids)
            assert 0 <= counts.bruteforcing <= counts.watching

    def test_concurrent_access_from_threads(self):
        """
        Test many threads mutating the registry leave it consistent.

        Each worker owns its ids, like a connection owns its entry, and
        every count it reads must be a coherent snapshot.
        """
        registry = ConnectionRegistry()
        workers = 16
        rounds = 200
        errors: list[str] = []
        barrier = threading.Barrier(workers)

        def worker(worker_id: int) -> None:
            barrier.wait()
            for n in range(rounds):
                connection_id = f"w{worker_id}-{n}"
                counts = registry.insert(connection_id, object())
                if not 0 <= counts.bruteforcing <= counts.watching:
                    errors.append(f"bad counts after insert: {counts}")
                flagged = registry.set_bruteforcing(connection_id, n % 2 == 0)
                if flagged is None or flagged.bruteforcing > flagged.watching:
                    errors.append(f"bad counts after flag: {flagged}")
                if n % 3:
                    registry.remove(connection_id)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            list(executor.map(worker, range(workers)))

        assert errors == []

        survivors = [
            f"w{worker_id}-{n}"
            for worker_id in range(workers)
            for n in range(rounds)
            if n % 3 == 0
        ]
        assert registry.watching_count() == len(survivors)
        assert registry.bruteforcing_count() == sum(
            1 for key in survivors if int(key.rsplit("-", 1)[1]) % 2 == 0
        )
