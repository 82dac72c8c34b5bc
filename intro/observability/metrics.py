from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, Summary, generate_latest

from intro.config import get_settings

# Seconds. Upper bound kept near 4x the target latency for apdex style queries.
REQUEST_DURATION_BUCKETS = (0.1, 0.15, 0.2, 0.25, 0.3)


class DeviceMetrics:
    """Collectors for the devices service, held in their own (non-global) registry."""

    def __init__(self, namespace: str, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        self.devices = Gauge(
            "connected_devices",
            "Number of currently connected devices",
            namespace=namespace,
            registry=self.registry,
        )
        self.info = Gauge(
            "info",
            "Information about the Intro App environment.",
            ["version"],
            namespace=namespace,
            registry=self.registry,
        )
        self.upgrades = Counter(
            "device_upgrade",
            "Number of upgrade devices.",
            ["type"],
            namespace=namespace,
            registry=self.registry,
        )
        self.duration = Histogram(
            "request_duration_seconds",
            "Duration of the request.",
            ["status", "method"],
            namespace=namespace,
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        # prometheus_client summaries expose _count and _sum only (no quantiles).
        self.login_duration = Summary(
            "login_request_duration_seconds",
            "Duration of the login request.",
            namespace=namespace,
            registry=self.registry,
        )

    def publish_info(self, version: str) -> None:
        self.info.labels(version=version).set(1)

    def set_device_count(self, count: int) -> None:
        self.devices.set(count)

    def observe_request(self, status: int | str, method: str, seconds: float) -> None:
        self.duration.labels(status=str(status), method=method).observe(seconds)

    def record_upgrade(self, device_type: str) -> None:
        self.upgrades.labels(type=device_type).inc()

    @contextmanager
    def time_login(self) -> Iterator[None]:
        with self.login_duration.time():
            yield

    def render(self) -> bytes:
        return generate_latest(self.registry)


_METRICS: DeviceMetrics | None = None


def get_metrics() -> DeviceMetrics:
    global _METRICS
    if _METRICS is None:
        _METRICS = DeviceMetrics(namespace=get_settings().metrics_namespace)
    return _METRICS


def reset_metrics() -> None:
    """Replace the metrics with a fresh registry (used by tests)."""

    global _METRICS
    _METRICS = None
