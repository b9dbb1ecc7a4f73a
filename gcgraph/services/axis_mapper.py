"""Sliding-window transform from data space onto the chart canvas."""

import threading
from typing import Optional, Tuple

from gcgraph.core.config import settings
from gcgraph.models.sample import CanvasGeometry, DataRange, ViewWindow

Point = Tuple[float, float]


class AxisMapper:
    """
    Maps (time, value) points onto a fixed pixel canvas.

    The visible time range is clipped to the most recent ``scale`` time units
    whenever the data spans more than that. The data range is replaced on every
    render while ``scale`` persists until changed.
    """

    def __init__(self, geometry: CanvasGeometry, scale: Optional[float] = None) -> None:
        """
        Initialize the mapper.

        Args:
            geometry: Canvas size in pixels.
            scale: Initial window width in time units.
        """
        self.geometry = geometry
        self._scale = float(scale if scale is not None else settings.initial_scale)
        self._data_range: Optional[DataRange] = None
        self._window: Optional[ViewWindow] = None
        self._lock = threading.Lock()

    @property
    def scale(self) -> float:
        with self._lock:
            return self._scale

    @property
    def data_range(self) -> Optional[DataRange]:
        with self._lock:
            return self._data_range

    @property
    def window(self) -> Optional[ViewWindow]:
        """Current visible window, None until a data range is set."""
        with self._lock:
            return self._window

    def set_data_range(self, minx: float, maxx: float, miny: float, maxy: float) -> ViewWindow:
        """
        Store the full data extent and recompute the visible window.

        Args:
            minx: Earliest sample time.
            maxx: Latest sample time.
            miny: Lowest value.
            maxy: Highest value.

        Returns:
            The new visible window.
        """
        data_range = DataRange(
            xmin=float(minx), xmax=float(maxx), ymin=float(miny), ymax=float(maxy))
        with self._lock:
            self._data_range = data_range
            self._window = ViewWindow.from_range(data_range, self._scale)
            return self._window

    def set_scale(self, scale: float) -> Optional[ViewWindow]:
        """
        Change the window width and re-clip the last stored data range.

        Args:
            scale: New window width in time units.

        Returns:
            The new visible window, None if no data range was stored yet.
        """
        with self._lock:
            self._scale = float(scale)
            if self._data_range is not None:
                self._window = ViewWindow.from_range(self._data_range, self._scale)
            return self._window

    def project(
        self, x: float, y: float, window: Optional[ViewWindow] = None
    ) -> Optional[Point]:
        """
        Map a data-space point to pixel coordinates.

        Args:
            x: Sample time.
            y: Sample value.
            window: Window to project into, the current one if omitted.

        Returns:
            ``(px, py)`` with ``py`` growing upward from 0, or None when the
            point is out of view. A degenerate window reports every point
            out of view.
        """
        if window is None:
            window = self.window
        if window is None or window.is_degenerate or not window.contains(x, y):
            return None
        px = (x - window.minx) / window.width * self.geometry.width
        py = (y - window.miny) / window.height * self.geometry.height
        return px, py

    def project_to_canvas(
        self, x: float, y: float, window: Optional[ViewWindow] = None
    ) -> Optional[Point]:
        """Like :meth:`project` but with the y axis flipped for canvas drawing."""
        point = self.project(x, y, window)
        if point is None:
            return None
        px, py = point
        return px, self.geometry.height - py
