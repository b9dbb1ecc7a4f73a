"""Data models for samples and chart coordinate spaces."""

from pydantic import BaseModel, ConfigDict, Field


class Sample(BaseModel):
    """A single (time, value) observation of a tracked counter."""

    model_config = ConfigDict(frozen=True)

    t: float
    v: float


class DataRange(BaseModel):
    """Full extent of the loaded data across all series."""

    model_config = ConfigDict(frozen=True)

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def is_degenerate(self) -> bool:
        """Whether either axis collapses to a single value."""
        return self.xmax == self.xmin or self.ymax == self.ymin


class ViewWindow(BaseModel):
    """Visible sub-range of a DataRange for a given time scale."""

    model_config = ConfigDict(frozen=True)

    minx: float
    maxx: float
    miny: float
    maxy: float
    scale: float

    @classmethod
    def from_range(cls, data_range: DataRange, scale: float) -> "ViewWindow":
        """
        Clip a data range to the most recent ``scale`` time units.

        Args:
            data_range: Full data extent.
            scale: Width of the visible time slice.

        Returns:
            The visible window.
        """
        if data_range.xmin + scale < data_range.xmax:
            minx = data_range.xmax - scale
        else:
            minx = data_range.xmin
        return cls(
            minx=minx,
            maxx=data_range.xmax,
            miny=data_range.ymin,
            maxy=data_range.ymax,
            scale=scale,
        )

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny

    @property
    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, x: float, y: float) -> bool:
        """Whether a data-space point lies inside the window, bounds included."""
        return self.minx <= x <= self.maxx and self.miny <= y <= self.maxy


class CanvasGeometry(BaseModel):
    """Fixed pixel size of the chart canvas."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=600, gt=0)
    height: int = Field(default=400, gt=0)
