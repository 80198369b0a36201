"""
Tests for the worker pool, serving real requests over a socket.
"""

import httpx
import pytest

from webtour.core.config import load_settings
from webtour.services.worker_pool import WorkerPool


@pytest.fixture
def pool():
    """A two-worker pool on a free port."""
    settings = load_settings()
    settings["server"]["port"] = 0
    settings["server"]["workers"] = 2
    worker_pool = WorkerPool(settings)
    worker_pool.start()
    try:
        assert worker_pool.wait_until_started(timeout=10.0)
        yield worker_pool
    finally:
        worker_pool.stop()


class TestWorkerPool:
    """Tests for WorkerPool."""

    def test_port_requires_start(self):
        with pytest.raises(RuntimeError):
            WorkerPool(load_settings()).port

    def test_each_worker_has_its_own_replica(self, pool):
        apps = [worker.app for worker in pool.workers]
        assert len(apps) == 2
        assert apps[0] is not apps[1]
        assert apps[0].state.shared is pool.shared
        assert apps[1].state.shared is pool.shared
        assert apps[0].state.worker_state.count is not apps[1].state.worker_state.count

    def test_worker_threads_are_named(self, pool):
        assert [worker.name for worker in pool.workers] == ["worker-0", "worker-1"]

    def test_counts_over_http(self, pool):
        base_url = f"http://127.0.0.1:{pool.port}"
        requests = 20
        for i in range(requests):
            # a fresh connection per request lets either worker accept it
            with httpx.Client(base_url=base_url) as client:
                assert client.get("/mutableState").text == f"Request number: {i + 1}"
                response = client.get("/clone/add")
                assert response.status_code == 200
                assert response.headers["X-Worker-Id"] in ("0", "1")

        assert pool.shared.exclusive.get() == requests
        assert pool.shared.global_count.load() == requests
        local_total = sum(
            worker.app.state.worker_state.combined.local_count.get()
            for worker in pool.workers
        )
        assert local_total == requests

    def test_start_twice_fails(self, pool):
        with pytest.raises(RuntimeError):
            pool.start()
