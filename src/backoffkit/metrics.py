r"""Prometheus metrics for retry controllers.

A ``RetryControllerCollector`` reads the counters of the controllers
registered on it each time the registry is scraped. Each registry gets a
single collector, so every metric family is exposed once with one sample
per controller name. Controllers are registered explicitly on a
caller-owned ``CollectorRegistry``; nothing is added to the process-wide
default registry unless the caller passes it.

Example:
    ```pycon
    >>> from prometheus_client import CollectorRegistry
    >>> from backoffkit import RetryController
    >>> from backoffkit.metrics import register
    >>> registry = CollectorRegistry()
    >>> retry = RetryController(max_retries=5)
    >>> collector = register(retry, "billing-sync", registry)
    >>> registry.get_sample_value("backoff_retry_max", {"name": "billing-sync"})
    5.0
    >>> registry.get_sample_value("backoff_num_retries", {"name": "billing-sync"})
    0.0

    ```
"""

from __future__ import annotations

__all__ = ["RetryControllerCollector", "register", "unregister"]

import logging
import threading
import weakref
from typing import TYPE_CHECKING

from prometheus_client.core import GaugeMetricFamily

if TYPE_CHECKING:
    from collections.abc import Iterator

    from prometheus_client.registry import CollectorRegistry

    from backoffkit.core.controller_logic import BaseRetryController

logger: logging.Logger = logging.getLogger(__name__)

RETRY_MAX_METRIC = "backoff_retry_max"
NUM_RETRIES_METRIC = "backoff_num_retries"

_collectors: weakref.WeakKeyDictionary[CollectorRegistry, RetryControllerCollector] = (
    weakref.WeakKeyDictionary()
)
_collectors_lock = threading.Lock()


class RetryControllerCollector:
    """Expose the counters of named retry controllers as Prometheus
    gauges.

    Collecting never mutates the controllers. Controllers may be added and
    removed while the registry is scraped from another thread.
    """

    def __init__(self) -> None:
        self._controllers: dict[str, BaseRetryController] = {}
        self._lock = threading.Lock()

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._controllers)

    def add(self, controller: BaseRetryController, name: str) -> None:
        """Start exposing a controller under the ``name`` label.

        Raises:
            ValueError: If a controller is already exposed under ``name``.
        """
        with self._lock:
            if name in self._controllers:
                msg = f"a retry controller is already registered as {name!r}"
                raise ValueError(msg)
            self._controllers[name] = controller

    def remove(self, name: str) -> None:
        """Stop exposing the controller registered under ``name``.

        Raises:
            KeyError: If no controller is registered under ``name``.
        """
        with self._lock:
            del self._controllers[name]

    def collect(self) -> Iterator[GaugeMetricFamily]:
        with self._lock:
            controllers = sorted(self._controllers.items())

        retry_max = GaugeMetricFamily(
            RETRY_MAX_METRIC, "Maximum number of retries for backoff", labels=["name"]
        )
        num_retries = GaugeMetricFamily(
            NUM_RETRIES_METRIC, "Number of retries in a backoff", labels=["name"]
        )
        for name, controller in controllers:
            retry_max.add_metric([name], controller.max_retries)
            num_retries.add_metric([name], controller.num_retries)
        yield retry_max
        yield num_retries


def register(
    controller: BaseRetryController, name: str, registry: CollectorRegistry
) -> RetryControllerCollector:
    """Register a controller so it will be scraped by Prometheus.

    Args:
        controller: The controller to observe.
        name: The value of the ``name`` label, identifying the controller.
            Must be unique within the registry.
        registry: The registry to expose the controller on.

    Returns:
        The collector of the registry, shared by all the controllers
        registered on it.

    Raises:
        ValueError: If a controller is already registered as ``name`` on
            this registry.
    """
    with _collectors_lock:
        collector = _collectors.get(registry)
        if collector is None:
            collector = RetryControllerCollector()
            registry.register(collector)
            _collectors[registry] = collector
        collector.add(controller, name)
    logger.debug(f"Registered retry controller metrics for {name!r}")
    return collector


def unregister(name: str, registry: CollectorRegistry) -> None:
    """Stop exposing the controller registered as ``name``.

    The collector is removed from the registry with its last controller.

    Raises:
        KeyError: If no controller is registered as ``name`` on this
            registry.
    """
    with _collectors_lock:
        collector = _collectors.get(registry)
        if collector is None:
            raise KeyError(name)
        collector.remove(name)
        if not collector.names():
            registry.unregister(collector)
            del _collectors[registry]
    logger.debug(f"Unregistered retry controller metrics for {name!r}")
