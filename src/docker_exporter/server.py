"""HTTP server exposing the exporter to Prometheus."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from docker_exporter import __version__
from docker_exporter.core.constants import EXPOSITION_CONTENT_TYPE
from docker_exporter.core.exceptions import DiscoveryError
from docker_exporter.exporter import DockerExporter

logger = logging.getLogger(__name__)


def create_app(exporter: DockerExporter) -> FastAPI:
    """Build the FastAPI app serving /metrics and /health.

    Args:
        exporter: Exporter whose cycle runs on every scrape
    """
    app = FastAPI(title="Docker Exporter", version=__version__)
    app.state.exporter = exporter

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.monotonic()
        client = request.client.host if request.client else "-"
        logger.info(f"{request.method} request on {request.url.path} from {client}")
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(f"Response {response.status_code} in {elapsed_ms:.0f}ms to {client}")
        return response

    @app.get("/metrics")
    def metrics() -> Response:
        """One full collection cycle per scrape."""
        try:
            body = exporter.scrape()
        except DiscoveryError as e:
            logger.error(f"Scrape failed: {e}")
            return PlainTextResponse(f"{e}\n", status_code=503)
        return Response(content=body, headers={"Content-Type": EXPOSITION_CONTENT_TYPE})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def run_server(exporter: DockerExporter, host: str, port: int) -> None:
    """Run the HTTP server (blocking)."""
    logger.info(f"Exporter started on {host}:{port}")
    uvicorn.run(create_app(exporter), host=host, port=port, log_level="warning")
