"""
Tests for the shared-state endpoints.
"""


class TestMutableState:
    """Tests for /mutableState."""

    def test_first_request(self, client):
        response = client.get("/mutableState")
        assert response.status_code == 200
        assert response.text == "Request number: 1"
        assert response.headers["content-type"].startswith("text/plain")

    def test_increments_per_request(self, client):
        client.get("/mutableState")
        client.get("/mutableState")
        assert client.get("/mutableState").text == "Request number: 3"

    def test_shared_by_all_workers(self, worker_clients, shared):
        client_a, client_b = worker_clients
        assert client_a.get("/mutableState").text == "Request number: 1"
        assert client_b.get("/mutableState").text == "Request number: 2"
        assert shared.exclusive.get() == 2

    def test_poisoned_counter_returns_500(self, client, shared):
        try:
            with shared.exclusive.lock():
                raise RuntimeError("holder crashed")
        except RuntimeError:
            pass

        response = client.get("/mutableState")
        assert response.status_code == 500
        assert response.text == "Internal Server Error"

        # no automatic recovery
        assert client.get("/mutableState").status_code == 500

        shared.exclusive.clear_poison()
        assert client.get("/mutableState").text == "Request number: 1"


class TestLocalCount:
    """Tests for /count and /count/add."""

    def test_initial_count(self, client):
        assert client.get("/count").text == "count: 0"

    def test_add(self, client):
        assert client.get("/count/add").text == "count: 1"
        assert client.post("/count/add").text == "count: 2"
        assert client.get("/count").text == "count: 2"

    def test_workers_are_independent(self, worker_clients):
        client_a, client_b = worker_clients
        client_a.get("/count/add")
        client_a.get("/count/add")
        assert client_b.get("/count").text == "count: 0"
        assert client_a.get("/count").text == "count: 2"


class TestCloneCount:
    """Tests for /clone and /clone/add."""

    def test_initial(self, client):
        assert client.get("/clone").text == "global_count: 0\nlocal_count: 0"

    def test_one_increment(self, client):
        assert client.get("/clone/add").text == "global_count: 1\nlocal_count: 1"
        assert client.get("/clone").text == "global_count: 1\nlocal_count: 1"

    def test_two_increments_same_worker(self, client):
        client.get("/clone/add")
        assert client.get("/clone/add").text == "global_count: 2\nlocal_count: 2"

    def test_one_increment_on_each_worker(self, worker_clients, shared):
        client_a, client_b = worker_clients
        client_a.get("/clone/add")
        client_b.get("/clone/add")

        assert shared.global_count.load() == 2
        assert client_a.get("/clone").text == "global_count: 2\nlocal_count: 1"
        assert client_b.get("/clone").text == "global_count: 2\nlocal_count: 1"

    def test_clone_is_separate_from_count(self, client):
        client.get("/count/add")
        assert client.get("/clone").text == "global_count: 0\nlocal_count: 0"

    def test_worker_header(self, worker_clients):
        client_a, client_b = worker_clients
        assert client_a.get("/clone").headers["X-Worker-Id"] == "0"
        assert client_b.get("/clone").headers["X-Worker-Id"] == "1"
