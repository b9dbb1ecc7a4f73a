"""In-memory store of recent samples for each tracked series."""

import threading
from collections import deque
from typing import Deque, Dict, List, Mapping, Optional, Sequence

from gcgraph.core.config import settings
from gcgraph.models.sample import Sample

DEFAULT_SERIES = ("used", "total")


class SampleStore:
    """Fixed-capacity, append-only buffers of timestamped samples."""

    def __init__(
        self,
        series_names: Sequence[str] = DEFAULT_SERIES,
        capacity: Optional[int] = None,
    ) -> None:
        """
        Initialize the sample store.

        Args:
            series_names: Names of the tracked series, in drawing order.
            capacity: Maximum samples kept per series; oldest are evicted first.
        """
        self.capacity = capacity or settings.store_capacity
        self.series_names = tuple(series_names)
        self._series: Dict[str, Deque[Sample]] = {
            name: deque(maxlen=self.capacity) for name in self.series_names
        }
        self._lock = threading.Lock()

    def append(self, t: float, values: Mapping[str, float]) -> None:
        """
        Append one sample per tracked series at time ``t``.

        Args:
            t: Sample time shared by all series.
            values: Current value of each series. Names that are not tracked
                are ignored, and a tracked name missing from ``values`` gets
                no sample for this tick.
        """
        samples = {
            name: Sample(t=t, v=values[name])
            for name in self.series_names
            if name in values
        }
        with self._lock:
            for name, sample in samples.items():
                self._series[name].append(sample)

    def snapshot(self, count: Optional[int] = None) -> Dict[str, List[Sample]]:
        """
        Copy the most recent samples of every series.

        Args:
            count: Number of samples to return per series, all if omitted.

        Returns:
            Mapping of series name to its samples, oldest first.
        """
        with self._lock:
            copied = {name: list(series) for name, series in self._series.items()}
        if count is None:
            return copied
        return {name: samples[-count:] if count > 0 else [] for name, samples in copied.items()}

    def sizes(self) -> Dict[str, int]:
        """Number of stored samples per series."""
        with self._lock:
            return {name: len(series) for name, series in self._series.items()}

    def __len__(self) -> int:
        with self._lock:
            return max((len(series) for series in self._series.values()), default=0)

    def clear(self) -> None:
        with self._lock:
            for series in self._series.values():
                series.clear()
