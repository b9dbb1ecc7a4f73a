"""Renders the chart page and its incremental drawing scripts."""

import math
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from gcgraph.core.config import settings
from gcgraph.models.sample import CanvasGeometry, Sample, ViewWindow
from gcgraph.services.axis_mapper import AxisMapper

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

template_env = Environment(
    loader=FileSystemLoader(searchpath=str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    keep_trailing_newline=True,
)

# Re-issues the poll once the client has applied a payload.
UPDATE_TRAILER = "poll();\n"


class RenderEngine:
    """Turns windowed samples into chart markup and drawing instructions."""

    NUM_VLABEL = 10
    NUM_HLABEL = 5
    SERIES_COLORS = ("Red", "Blue")
    LINE_WIDTH = 3
    GRID_STEP = 40
    LABEL_MARGIN = 40
    RETRY_MS = 1000

    def __init__(
        self,
        geometry: CanvasGeometry,
        mapper: Optional[AxisMapper] = None,
        window: Optional[int] = None,
    ) -> None:
        """
        Initialize the render engine.

        Args:
            geometry: Canvas size in pixels.
            mapper: Coordinate transform, a fresh one if omitted.
            window: Maximum samples per series considered by one render.
        """
        self.geometry = geometry
        self.mapper = mapper or AxisMapper(geometry)
        self.window = window or settings.render_window
        self._series: Dict[str, List[Sample]] = {}
        self._lock = threading.Lock()

    def load_samples(self, series: Mapping[str, Sequence[Sample]]) -> ViewWindow:
        """
        Load the latest samples and recompute the data range.

        Only the most recent ``window`` samples of each series are kept, and
        samples with a non-finite time or value are dropped.
        With no samples at all the range collapses to the origin and the
        chart renders empty.

        Args:
            series: Samples per series name, oldest first, in drawing order.

        Returns:
            The visible window after loading.
        """
        self._series = {
            name: [sample for sample in list(samples)[-self.window:] if _is_finite(sample)]
            for name, samples in series.items()
        }
        points = [sample for samples in self._series.values() for sample in samples]
        if not points:
            return self.mapper.set_data_range(0.0, 0.0, 0.0, 0.0)

        times = [sample.t for sample in points]
        values = [sample.v for sample in points]
        return self.mapper.set_data_range(
            min(times), max(times), min(0.0, min(values)), max(values))

    def render_full(self, title: Optional[str] = None) -> str:
        """Render the complete dashboard page for the loaded samples."""
        window = self.mapper.window
        template = template_env.get_template("graph.html")
        return template.render(
            title=title or settings.service_name,
            width=self.geometry.width,
            height=self.geometry.height,
            grid_step=self.GRID_STEP,
            graph_css=self.graph_css(window),
            vlabels=self.vertical_label_layout(window),
            hlabels=self.horizontal_label_layout(window),
            scale_choices=settings.scale_choices,
            scale=self.mapper.scale,
            retry_ms=self.RETRY_MS,
        )

    def render_incremental(self) -> str:
        """
        Render the drawing script for the loaded samples.

        The script clears the chart, strokes every series as a polyline in
        loading order and refreshes both axes' labels. Points outside the
        visible window break the line instead of being joined across.
        """
        window = self.mapper.window
        width, height = self.geometry.width, self.geometry.height
        lines = [
            "var canctx = document.getElementById('graph').getContext('2d');",
            f"canctx.clearRect(0, 0, {width}, {height});",
        ]
        for index, samples in enumerate(self._series.values()):
            color = self.SERIES_COLORS[index % len(self.SERIES_COLORS)]
            lines.append(f"canctx.strokeStyle = '{color}';")
            lines.append(f"canctx.lineWidth = {self.LINE_WIDTH};")
            lines.append("canctx.beginPath();")
            pen_down = False
            for sample in samples:
                point = self.mapper.project_to_canvas(sample.t, sample.v, window)
                if point is None:
                    pen_down = False
                    continue
                x, y = point
                op = "lineTo" if pen_down else "moveTo"
                lines.append(f"canctx.{op}({x:.2f}, {y:.2f});")
                pen_down = True
            lines.append("canctx.stroke();")

        for index, text in enumerate(self.vertical_labels(window)):
            lines.append(f'document.getElementById("vlabel{index}").innerHTML = "{text}";')
        for index, text in enumerate(self.horizontal_labels(window)):
            lines.append(f'document.getElementById("hlabel{index}").innerHTML = "{text}";')
        return "\n".join(lines) + "\n"

    def render_page(self, series: Mapping[str, Sequence[Sample]], title: Optional[str] = None) -> str:
        """Load samples and render the full page as one step."""
        with self._lock:
            self.load_samples(series)
            return self.render_full(title)

    def render_update(self, series: Mapping[str, Sequence[Sample]]) -> str:
        """Load samples and render the poll response, trailer included, as one step."""
        with self._lock:
            self.load_samples(series)
            return self.render_incremental() + UPDATE_TRAILER

    def vertical_labels(self, window: Optional[ViewWindow]) -> List[str]:
        """Value labels from the bottom (``miny``) to the top of the chart."""
        if window is None:
            return [_format_label(0.0)] * (self.NUM_VLABEL + 1)
        step = window.height / self.NUM_VLABEL
        return [_format_label(window.miny + step * i) for i in range(self.NUM_VLABEL + 1)]

    def horizontal_labels(self, window: Optional[ViewWindow]) -> List[str]:
        """Time labels from the left (``minx``) to the right of the chart."""
        if window is None:
            return [_format_label(0.0)] * (self.NUM_HLABEL + 1)
        step = window.width / self.NUM_HLABEL
        return [_format_label(window.minx + step * i) for i in range(self.NUM_HLABEL + 1)]

    def vertical_label_layout(self, window: Optional[ViewWindow]) -> List[dict]:
        bottom = self.geometry.height + self.LABEL_MARGIN
        step = self.geometry.height // self.NUM_VLABEL
        return [
            {"index": i, "left": 0, "top": bottom - step * i, "text": text}
            for i, text in enumerate(self.vertical_labels(window))
        ]

    def horizontal_label_layout(self, window: Optional[ViewWindow]) -> List[dict]:
        step = self.geometry.width // self.NUM_HLABEL
        top = self.geometry.height + self.LABEL_MARGIN + 10
        return [
            {"index": i, "left": step * i + self.LABEL_MARGIN, "top": top, "text": text}
            for i, text in enumerate(self.horizontal_labels(window))
        ]

    def graph_css(self, window: Optional[ViewWindow]) -> str:
        """Canvas placement leaving room on the left for the widest value label."""
        maxy = window.maxy if window is not None else 0.0
        return f"left: {len(str(maxy)) * 12}px; top: 50px"


def _format_label(value: float) -> str:
    return f"{value:.2f}"


def _is_finite(sample: Sample) -> bool:
    return math.isfinite(sample.t) and math.isfinite(sample.v)
