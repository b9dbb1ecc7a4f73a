"""Response models for dashboard status endpoints."""

from typing import Optional

from pydantic import BaseModel


class WindowStatus(BaseModel):
    """Current visible window of the chart."""

    scale: float
    minx: Optional[float] = None
    maxx: Optional[float] = None
    miny: Optional[float] = None
    maxy: Optional[float] = None


class SamplerStatus(BaseModel):
    """Sampler progress summary."""

    running: bool
    samples_taken: int
    last_sample_at: Optional[float] = None
    series: list[str]
    stored: dict[str, int]
