"""Dashboard state shared by the sampler and the request handlers."""

import logging
import threading
from typing import Optional

from gcgraph.core.config import Settings, settings as default_settings
from gcgraph.core.exceptions import ConfigurationError
from gcgraph.models.sample import CanvasGeometry
from gcgraph.services.axis_mapper import AxisMapper
from gcgraph.services.metric_source import Clock, MetricSource, get_clock, get_metric_source
from gcgraph.services.render_engine import RenderEngine
from gcgraph.services.sample_store import SampleStore
from gcgraph.services.sampler import Sampler

logger = logging.getLogger(__name__)


class DashboardContext:
    """Owns the sample store, the sampler and the lazily built render engine."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        source: Optional[MetricSource] = None,
        clock: Optional[Clock] = None,
        store: Optional[SampleStore] = None,
    ) -> None:
        """
        Initialize the dashboard context.

        Args:
            config: Settings to use, the process settings if omitted.
            source: Metric source, looked up from ``config.metric_source`` if omitted.
            clock: Sample clock, looked up from ``config.sample_clock`` if omitted.
            store: Sample store, a fresh one if omitted.

        Raises:
            ConfigurationError: If the settings cannot produce a dashboard.
        """
        self.settings = config or default_settings
        if self.settings.render_window <= 0:
            raise ConfigurationError("render_window must be positive")
        if self.settings.initial_scale <= 0:
            raise ConfigurationError("initial_scale must be positive")
        if self.settings.sample_interval_seconds <= 0:
            raise ConfigurationError("sample_interval_seconds must be positive")
        try:
            self.geometry = CanvasGeometry(
                width=self.settings.canvas_width, height=self.settings.canvas_height)
        except ValueError as e:
            raise ConfigurationError(f"Invalid canvas size: {str(e)}") from e

        self.store = store or SampleStore(capacity=self.settings.store_capacity)
        self.sampler = Sampler(
            store=self.store,
            source=source or get_metric_source(self.settings.metric_source),
            clock=clock or get_clock(self.settings.sample_clock),
            interval=self.settings.sample_interval_seconds,
        )
        self._engine: Optional[RenderEngine] = None
        self._engine_lock = threading.Lock()

    @property
    def engine(self) -> RenderEngine:
        """The render engine, built on first use and reused afterwards."""
        with self._engine_lock:
            if self._engine is None:
                mapper = AxisMapper(self.geometry, scale=self.settings.initial_scale)
                self._engine = RenderEngine(
                    self.geometry, mapper=mapper, window=self.settings.render_window)
                logger.info(
                    f"Render engine created for {self.geometry.width}x{self.geometry.height} canvas")
            return self._engine

    def latest_samples(self) -> dict:
        """Copy of the samples a render considers."""
        return self.store.snapshot(self.settings.render_window)

    async def initialize(self) -> None:
        """Take a first sample and start the sampler."""
        self.sampler.tick()
        self.sampler.start()

    async def shutdown(self) -> None:
        """Stop the sampler."""
        await self.sampler.stop()
