"""Flask application serving the scrape endpoint."""

import asyncio
import logging
from typing import Optional, Sequence

from flask import Flask, Response, request

from ..collectors.base import BaseCollector
from .renderer import RenderingError, render


INDEX_PAGE = """<html>
<head><title>Watch Exporter</title></head>
<body>
<h1>Watch Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


def create_app(
    collector: BaseCollector,
    label_names: Optional[Sequence[str]] = None,
    scrape_timeout: Optional[float] = None,
    logger: Optional[logging.Logger] = None
) -> Flask:
    """
    Build the exporter's Flask application.

    Every request to /metrics runs one full collect pass; nothing is cached
    between requests. The collector offloads walks to worker threads, so a
    slow filesystem only delays the scrape that is waiting for it.

    Args:
        collector: Collector producing one ObservationSet per call
        label_names: Extra label keys shared by all metric families
        scrape_timeout: Seconds to wait for a collect pass, None to wait forever
        logger: Optional logger instance

    Returns:
        Flask: Configured application
    """
    app = Flask(__name__)
    log = (logger or logging.getLogger(__name__)).getChild("server")

    @app.get("/")
    def index():
        return Response(INDEX_PAGE, mimetype="text/html")

    @app.get("/healthz")
    def healthz():
        return Response("ok\n", mimetype="text/plain")

    @app.get("/metrics")
    async def metrics():
        try:
            observations = await asyncio.wait_for(collector.collect(), timeout=scrape_timeout)
        except asyncio.TimeoutError:
            # The walk keeps running on its worker; its result is dropped.
            log.warning(f"Scrape timed out after {scrape_timeout}s")
            return Response(
                f"Scrape timed out after {scrape_timeout}s\n",
                status=503,
                mimetype="text/plain"
            )
        except Exception as e:
            log.error(f"Failed to collect latest update: {e}", exc_info=True)
            return Response(f"Collection failed: {e}\n", status=500, mimetype="text/plain")

        try:
            body, content_type = render(
                observations,
                accept_header=request.headers.get("Accept"),
                label_names=label_names
            )
        except RenderingError as e:
            log.warning(f"Failed to encode registry: {e}")
            return Response(f"{e}\n", status=500, mimetype="text/plain")

        return Response(body, status=200, content_type=content_type)

    return app
