import threading

import pytest

from microcluster.member_cluster import Cluster


def test_select_random_returns_a_member():
    cluster = Cluster(["a", "b", "c"])
    for _ in range(20):
        assert cluster.select_random() in {"a", "b", "c"}


def test_select_random_on_empty_cluster_raises():
    with pytest.raises(IndexError):
        Cluster().select_random()


def test_sequential_query_visits_members_in_order():
    seen = []
    Cluster(["a", "b", "c"]).query(seen.append, concurrent=False)
    assert seen == ["a", "b", "c"]


def test_sequential_query_stops_at_first_error():
    seen = []

    def query(client):
        seen.append(client)
        if client == "b":
            raise RuntimeError("failed on b")

    with pytest.raises(RuntimeError, match="failed on b"):
        Cluster(["a", "b", "c"]).query(query, concurrent=False)
    assert seen == ["a", "b"]


def test_concurrent_query_runs_all_and_raises_error():
    seen = []
    lock = threading.Lock()

    def query(client):
        with lock:
            seen.append(client)
        if client == "a":
            raise ValueError("failed on a")

    with pytest.raises(ValueError, match="failed on a"):
        Cluster(["a", "b", "c"]).query(query, concurrent=True)
    assert sorted(seen) == ["a", "b", "c"]


def test_concurrent_query_on_empty_cluster_calls_nothing():
    seen = []
    Cluster().query(seen.append, concurrent=True)
    assert seen == []