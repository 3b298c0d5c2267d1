"""Render an observation set in the Prometheus / OpenMetrics text formats."""

from typing import Iterable, List, Optional, Sequence, Tuple

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.exposition import choose_encoder

from ..utils.metrics import ObservationSet, WatchObservation


class RenderingError(Exception):
    """The observation set could not be encoded."""


class ObservationCollector:
    """
    prometheus_client collector yielding the gauges of one scrape.

    Every family shares the label names ``name`` plus the extra label keys,
    so watches lacking a key get an empty value for it. Count and timestamp
    samples are only emitted for successful walks.
    """

    def __init__(self, observations: ObservationSet, label_names: Sequence[str] = ()):
        self.observations = observations
        self.label_names = list(label_names)

    def collect(self) -> Iterable[GaugeMetricFamily]:
        labels = ['name'] + self.label_names

        success = GaugeMetricFamily(
            'watcher_success', 'Whether the watcher succeeded', labels=labels)
        file_count = GaugeMetricFamily(
            'watcher_file_count', 'Number of files visited by the watcher', labels=labels)
        upload_time = GaugeMetricFamily(
            'watcher_upload_time', 'Latest file change timestamp', labels=labels)
        duration = GaugeMetricFamily(
            'watcher_duration', 'How long the watcher walk took in seconds', labels=labels)

        for observation in self.observations:
            values = self._label_values(observation)
            success.add_metric(values, observation.status.to_gauge())
            if observation.success:
                file_count.add_metric(values, observation.files_visited)
                upload_time.add_metric(values, observation.max_modification_time)
            duration.add_metric(values, observation.duration_seconds)

        yield success
        yield file_count
        yield upload_time
        yield duration

    def _label_values(self, observation: WatchObservation) -> List[str]:
        return [observation.name] + [observation.labels.get(k, '') for k in self.label_names]


def collect_label_names(observations: ObservationSet) -> List[str]:
    """Sorted union of the extra label keys present in an observation set."""
    keys = set()
    for observation in observations:
        keys.update(observation.labels)
    return sorted(keys)


def build_registry(
    observations: ObservationSet,
    label_names: Optional[Sequence[str]] = None
) -> CollectorRegistry:
    """
    Build a fresh registry holding only this scrape's observations.

    Args:
        observations: Observations of one scrape
        label_names: Extra label keys; derived from the observations if omitted

    Returns:
        CollectorRegistry: Registry ready for encoding
    """
    if label_names is None:
        label_names = collect_label_names(observations)

    registry = CollectorRegistry(auto_describe=False)
    registry.register(ObservationCollector(observations, label_names))
    return registry


def render(
    observations: ObservationSet,
    accept_header: Optional[str] = None,
    label_names: Optional[Sequence[str]] = None
) -> Tuple[bytes, str]:
    """
    Encode observations in the format negotiated from an Accept header.

    Args:
        observations: Observations of one scrape
        accept_header: HTTP Accept header of the scrape request, if any
        label_names: Extra label keys shared by all families

    Returns:
        Tuple of (encoded body, content type)

    Raises:
        RenderingError: If the observations cannot be encoded
    """
    encoder, content_type = choose_encoder(accept_header or '')
    try:
        registry = build_registry(observations, label_names)
        return encoder(registry), content_type
    except Exception as e:
        raise RenderingError(f"Failed to encode metrics: {e}") from e
