"""Periodic sampler appending metric values into the sample store."""

import asyncio
import logging
import time
from typing import Optional

from gcgraph.core.config import settings
from gcgraph.core.exceptions import MetricSourceError
from gcgraph.monitoring.metrics import sample_errors_total, samples_total
from gcgraph.services.metric_source import Clock, MetricSource, read_values
from gcgraph.services.sample_store import SampleStore

logger = logging.getLogger(__name__)


class Sampler:
    """Samples a metric source on a fixed interval. Sole writer of the store."""

    def __init__(
        self,
        store: SampleStore,
        source: MetricSource,
        clock: Clock,
        interval: Optional[float] = None,
    ) -> None:
        """
        Initialize the sampler.

        Args:
            store: Store receiving the samples.
            source: Callable returning the current value of each series.
            clock: Callable returning the sample time.
            interval: Seconds between ticks.
        """
        self.store = store
        self.source = source
        self.clock = clock
        self.interval = interval or settings.sample_interval_seconds
        self.samples_taken = 0
        self.errors = 0
        self.last_sample_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None
        self._stopping: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sample_once(self) -> None:
        """
        Take one sample of every series.

        Raises:
            MetricSourceError: If the metric source fails.
        """
        values = read_values(self.source)
        t = self.clock()
        self.store.append(t, values)
        self.samples_taken += 1
        self.last_sample_at = time.time()
        samples_total.inc()

    def tick(self) -> bool:
        """Take one sample, logging instead of raising on source failure."""
        try:
            self.sample_once()
            return True
        except MetricSourceError as e:
            self.errors += 1
            sample_errors_total.inc()
            if self.errors == 1 or self.errors % 100 == 0:
                logger.error(f"Sampling failed ({self.errors} failures so far): {str(e)}")
            return False

    async def run(self) -> None:
        """
        Sample at the configured interval until stopped.

        Each tick runs in a worker thread, off the event loop.
        """
        stopping = self._stopping or asyncio.Event()
        self._stopping = stopping
        logger.info(f"Sampler started with interval {self.interval}s")
        try:
            while not stopping.is_set():
                await asyncio.to_thread(self.tick)
                try:
                    await asyncio.wait_for(stopping.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            logger.info(f"Sampler stopped after {self.samples_taken} samples")

    def start(self) -> None:
        """Schedule the sampling loop on the running event loop."""
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Signal the sampling loop and wait for its current tick to finish."""
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None
        self._stopping = None
