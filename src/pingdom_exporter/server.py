"""
Exporter HTTP Server

FastAPI application exposing the metric snapshot:
- GET /         empty 200, convenient as a liveness probe
- GET /metrics  Prometheus exposition of the shared MetricSink

The poller runs as a background task on the server's event loop, started
and cancelled by the application lifespan. uvicorn runs in its own thread
so the main thread stays free for signal handling.
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Response

from pingdom_exporter.poller import Poller
from pingdom_exporter.sinks import MetricSink

logger = logging.getLogger(__name__)


def create_app(sink: MetricSink, poller: Optional[Poller] = None) -> FastAPI:
    """
    Build the exporter application.

    Args:
        sink: Shared sink rendered on every scrape
        poller: Started as a background task for the app's lifetime, if given
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        poll_task = None
        if poller is not None:
            poll_task = asyncio.create_task(poller.run())
            logger.info("Background Pingdom polling started")

        yield  # Application runs here

        if poll_task is not None:
            poll_task.cancel()
            try:
                await poll_task
            except asyncio.CancelledError:
                pass
            logger.info("Background Pingdom polling stopped")

    app = FastAPI(
        title="Pingdom Exporter",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.sink = sink
    app.state.poller = poller

    @app.get("/")
    async def root() -> Response:
        return Response(status_code=200)

    # Sync route: rendering runs in the threadpool, off the poller's loop.
    @app.get("/metrics")
    def metrics() -> Response:
        return Response(
            content=sink.render_snapshot(),
            media_type=sink.content_type,
        )

    return app


class ExporterServer:
    """Runs uvicorn for the exporter app in a background thread."""

    def __init__(self, app: FastAPI, host: str = "0.0.0.0", port: int = 8000,
                 log_level: str = "info"):
        self.host = host
        self.port = port
        self.config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level=log_level.lower(),
            access_log=False,
            lifespan="on",
        )
        self.server = uvicorn.Server(self.config)
        self._thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        """Start serving; uvicorn skips signal handlers off the main thread."""
        self._thread = threading.Thread(
            target=self.server.run, name="exporter-http", daemon=True
        )
        self._thread.start()
        logger.info(f"Listening on port {self.port}")
        return self._thread

    def wait(self) -> None:
        """Block until the server thread exits."""
        if self._thread is not None:
            self._thread.join()

    @property
    def started(self) -> bool:
        return self.server.started
