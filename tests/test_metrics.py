"""Tests for repository metrics."""

import threading

from dataprotection_secrets.metrics import RepositoryMetrics, get_metrics, reset_metrics


def test_record_load():
    metrics = RepositoryMetrics()

    metrics.record_load(loaded=3, skipped=1)
    metrics.record_load(loaded=2, skipped=0)

    snapshot = metrics.get_snapshot()
    assert snapshot["keys_loaded"] == 5
    assert snapshot["keys_skipped"] == 1


def test_record_store():
    metrics = RepositoryMetrics()

    metrics.record_store(success=True)
    metrics.record_store(success=True)
    metrics.record_store(success=False)

    snapshot = metrics.get_snapshot()
    assert snapshot["keys_stored"] == 2
    assert snapshot["store_failures"] == 1


def test_reset():
    metrics = RepositoryMetrics()
    metrics.record_load(1, 1)
    metrics.record_list_failure()

    metrics.reset()

    assert all(value == 0 for value in metrics.get_snapshot().values())


def test_global_instance():
    """Test that get_metrics returns one shared instance."""
    assert get_metrics() is get_metrics()

    get_metrics().record_list_failure()
    assert get_metrics().list_failures == 1

    reset_metrics()
    assert get_metrics().list_failures == 0


def test_concurrent_updates():
    metrics = RepositoryMetrics()

    def worker():
        for _ in range(1000):
            metrics.record_store(success=True)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert metrics.keys_stored == 4000
