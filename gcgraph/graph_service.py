"""Graph Service: serves the live chart page and its long-poll updates."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from gcgraph.api.health import check_all_components, check_readiness
from gcgraph.core.config import settings
from gcgraph.core.dependencies import DashboardContext
from gcgraph.core.exceptions import InvalidScaleError
from gcgraph.models.status import SamplerStatus, WindowStatus
from gcgraph.monitoring.metrics import (
    polls_total,
    render_duration_seconds,
    scale_changes_total,
    scale_requests_ignored_total,
)

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


def parse_scale(raw: Optional[str]) -> int:
    """
    Parse a window scale request parameter.

    Args:
        raw: Query parameter value.

    Returns:
        The requested scale.

    Raises:
        InvalidScaleError: If the value is missing, not an integer, or not positive.
    """
    if raw is None:
        raise InvalidScaleError("No scale given")
    try:
        scale = int(raw.strip())
    except ValueError:
        raise InvalidScaleError(f"Scale is not an integer: {raw!r}") from None
    # A negative width puts minx past maxx, leaving a window that draws nothing.
    if scale <= 0:
        raise InvalidScaleError(f"Scale must be positive: {scale}")
    return scale


def get_context(request: Request) -> DashboardContext:
    return request.app.state.context


def create_app(context: Optional[DashboardContext] = None) -> FastAPI:
    """
    Build the graph service application.

    Args:
        context: Dashboard state, built from the process settings if omitted.

    Returns:
        The FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        await app.state.context.initialize()
        logger.info("Graph Service started")
        yield
        await app.state.context.shutdown()
        logger.info("Graph Service stopped")

    app = FastAPI(title="Graph Service", lifespan=lifespan)
    app.state.context = context or DashboardContext()

    @app.get("/graph", response_class=HTMLResponse)
    async def graph(ctx: DashboardContext = Depends(get_context)) -> HTMLResponse:
        """
        Initial page with the chart, its labels and the poll loop bootstrap.

        Returns:
            Full HTML page.
        """
        try:
            page = ctx.engine.render_page(ctx.latest_samples())
        except Exception as e:
            logger.error(f"Failed to render page: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to render page: {str(e)}")
        return HTMLResponse(content=page)

    @app.get("/update.js")
    async def update(ctx: DashboardContext = Depends(get_context)) -> Response:
        """
        Long-poll update: wait for the pacing delay, then ship a fresh drawing script.

        Returns:
            JavaScript payload that redraws the chart and re-issues the poll.
        """
        await asyncio.sleep(ctx.settings.poll_delay_seconds)
        start_time = time.time()
        try:
            script = ctx.engine.render_update(ctx.latest_samples())
        except Exception as e:
            logger.error(f"Failed to render update: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to render update: {str(e)}")
        render_duration_seconds.observe(time.time() - start_time)
        polls_total.inc()
        return Response(content=script, media_type="text/javascript")

    @app.get("/setscale")
    async def setscale(
        scale: Optional[str] = Query(None, alias="SCALE"),
        ctx: DashboardContext = Depends(get_context),
    ) -> Response:
        """
        Change the visible time window. Invalid requests are ignored.

        Args:
            scale: Requested window width in time units.
        """
        try:
            value = parse_scale(scale)
        except InvalidScaleError as e:
            logger.debug(f"Ignoring scale request: {str(e)}")
            scale_requests_ignored_total.inc()
            return Response(status_code=200)

        ctx.engine.mapper.set_scale(value)
        scale_changes_total.inc()
        logger.info(f"Window scale set to {value}")
        return Response(status_code=200)

    @app.get("/api/window", response_model=WindowStatus)
    async def window(ctx: DashboardContext = Depends(get_context)) -> WindowStatus:
        """
        Current visible window.

        Returns:
            Window bounds, null until data has been rendered.
        """
        mapper = ctx.engine.mapper
        current = mapper.window
        if current is None:
            return WindowStatus(scale=mapper.scale)
        return WindowStatus(**current.model_dump())

    @app.get("/health")
    async def health(ctx: DashboardContext = Depends(get_context)) -> dict:
        """
        Health check endpoint with component verification.

        Returns:
            Health status with component details.
        """
        result = check_all_components(ctx)
        return {"service": ctx.settings.service_name, **result}

    @app.get("/ready")
    async def readiness(ctx: DashboardContext = Depends(get_context)) -> dict:
        """
        Readiness check endpoint.

        Returns:
            Readiness status.
        """
        result = check_readiness(ctx)
        return {"service": ctx.settings.service_name, **result}

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/api/metrics")
    async def get_metrics_json(ctx: DashboardContext = Depends(get_context)) -> dict:
        """
        Get metrics in JSON format.

        Returns:
            Metrics summary.
        """
        sampler = ctx.sampler
        status = SamplerStatus(
            running=sampler.running,
            samples_taken=sampler.samples_taken,
            last_sample_at=sampler.last_sample_at,
            series=list(ctx.store.series_names),
            stored=ctx.store.sizes(),
        )
        return {
            "sampler": status.model_dump(),
            "polls": {"total": polls_total._value.get()},
            "scale": {
                "current": ctx.engine.mapper.scale,
                "changes": scale_changes_total._value.get(),
                "ignored": scale_requests_ignored_total._value.get(),
            },
        }

    return app


app = create_app()


def main() -> None:
    """Run the graph service with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.service_host,
        port=settings.service_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
