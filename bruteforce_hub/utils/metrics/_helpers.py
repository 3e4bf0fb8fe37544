"""Idempotent Prometheus metric registration."""

from typing import Any, TypeVar

from prometheus_client import REGISTRY
from prometheus_client.metrics import MetricWrapperBase

MetricT = TypeVar("MetricT", bound=MetricWrapperBase)


def _get_or_create(
    metric_cls: type[MetricT],
    name: str,
    doc: str,
    labels: tuple[str, ...] = (),
    **kwargs: Any,
) -> MetricT:
    """
    Register a metric, or return the one already registered under `name`.

    Importing the metrics module twice (uvicorn --reload, test re-imports)
    would otherwise fail with a duplicate timeseries error.

    Example:
        >>> _get_or_create(Gauge, "ws_users_watching", "Users watching")
    """
    try:
        return metric_cls(name, doc, labels, **kwargs)
    except ValueError:
        # Counters register under the name and its _total/_created series
        return REGISTRY._names_to_collectors[name]
