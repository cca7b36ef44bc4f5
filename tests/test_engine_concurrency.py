"""Tests for independent, concurrent executions of the sync engine."""

import threading
from concurrent.futures import ThreadPoolExecutor

from nanoretry import Backoff, Retrier, RetryEngine, RetryPolicy


class TestConcurrentExecutions:
    """Test that executions share no state."""

    def test_shared_engine_runs_concurrent_executions(self):
        """Eight executions in flight at once each keep their own attempt count."""
        engine = RetryEngine(RetryPolicy(max_attempts=5, backoff=Backoff.fixed(0.01)))
        barrier = threading.Barrier(8)

        def run(worker_id: int) -> tuple[int, int]:
            calls = {"count": 0}

            def operation() -> int:
                calls["count"] += 1
                if calls["count"] == 1:
                    # Every execution is mid-attempt before any of them moves on
                    barrier.wait(timeout=5.0)
                if calls["count"] <= worker_id % 3:
                    raise OSError(f"worker {worker_id}")
                return worker_id

            return engine.execute(operation), calls["count"]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(run, range(8)))

        assert results == [(worker_id, worker_id % 3 + 1) for worker_id in range(8)]

    def test_shared_retrier_runs_concurrent_executions(self):
        """One configured Retrier can be executed from several threads at once."""
        lock = threading.Lock()
        calls = {"count": 0}

        def operation() -> str:
            with lock:
                calls["count"] += 1
            return "ok"

        retrier = Retrier.of(operation).with_max_attempts(3)

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: retrier.execute(), range(16)))

        assert results == ["ok"] * 16
        assert calls["count"] == 16

    def test_execute_from_worker_thread(self):
        """The engine runs unchanged when called from a non-main thread."""
        calls = {"count": 0}
        outcome = {}

        def operation() -> str:
            calls["count"] += 1
            return "Done"

        def caller():
            outcome["result"] = Retrier.of(operation).execute()

        thread = threading.Thread(target=caller)
        thread.start()
        thread.join(timeout=5.0)

        assert outcome["result"] == "Done"
        assert calls["count"] == 1
