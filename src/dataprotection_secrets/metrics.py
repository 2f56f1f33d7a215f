"""Lightweight in-process metrics for key persistence.

Metrics are best-effort in multi-worker environments (each worker has its own state).
"""

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RepositoryMetrics:
    """In-memory counters for repository operations.

    Thread-safe; repositories in the same process share one instance.
    """

    keys_loaded: int = 0
    keys_skipped: int = 0
    keys_stored: int = 0
    store_failures: int = 0
    list_failures: int = 0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_load(self, loaded: int, skipped: int) -> None:
        """Record the outcome of one full listing.

        Args:
            loaded: Number of keys parsed successfully
            skipped: Number of entries dropped after a fetch or parse failure
        """
        with self._lock:
            self.keys_loaded += loaded
            self.keys_skipped += skipped

    def record_list_failure(self) -> None:
        with self._lock:
            self.list_failures += 1

    def record_store(self, success: bool) -> None:
        """Record the outcome of one store call."""
        with self._lock:
            if success:
                self.keys_stored += 1
            else:
                self.store_failures += 1

    def get_snapshot(self) -> dict[str, Any]:
        """Get a snapshot of current metrics.

        Returns:
            Dictionary with all counters.
        """
        with self._lock:
            return {
                "keys_loaded": self.keys_loaded,
                "keys_skipped": self.keys_skipped,
                "keys_stored": self.keys_stored,
                "store_failures": self.store_failures,
                "list_failures": self.list_failures,
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self.keys_loaded = 0
            self.keys_skipped = 0
            self.keys_stored = 0
            self.store_failures = 0
            self.list_failures = 0


# Global metrics instance
_metrics: RepositoryMetrics | None = None
_metrics_lock = threading.Lock()


def get_metrics() -> RepositoryMetrics:
    """Get or create the global metrics instance."""
    global _metrics
    with _metrics_lock:
        if _metrics is None:
            _metrics = RepositoryMetrics()
        return _metrics


def reset_metrics() -> None:
    """Reset the global metrics counters."""
    get_metrics().reset()
