"""HTTP exposition of the ZTE ONU exporter."""

from __future__ import annotations

import asyncio
import logging
import sys

import voluptuous as vol
from aiohttp import web

from . import RuntimeData, async_setup_exporter, async_unload_exporter
from .config import ExporterConfig, load_config
from .const import METRICS_PATH, VERSION
from .metrics import CONTENT_TYPE

_LOGGER = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", ExporterConfig)
RUNTIME_DATA_KEY = web.AppKey("runtime_data", RuntimeData)
SCRAPE_LOCK_KEY = web.AppKey("scrape_lock", asyncio.Lock)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

LANDING_PAGE = f"""<html>
<head><title>ZTE ONU Exporter</title></head>
<body>
<h1>ZTE ONU Exporter {VERSION}</h1>
<p><a href="{METRICS_PATH}">Metrics</a></p>
</body>
</html>
"""


def configure_logging(level: str) -> None:
    """Send log records of the given level and above to stderr."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


async def handle_metrics(request: web.Request) -> web.Response:
    """Run one collection cycle and return the metrics."""
    runtime_data = request.app[RUNTIME_DATA_KEY]

    async with request.app[SCRAPE_LOCK_KEY]:
        result = await runtime_data.coordinator.async_collect()
        runtime_data.metrics.publish(result)
        body = runtime_data.metrics.render()

    return web.Response(body=body, headers={"Content-Type": CONTENT_TYPE})


async def handle_index(request: web.Request) -> web.Response:
    """Return the landing page."""
    return web.Response(text=LANDING_PAGE, content_type="text/html")


async def _on_startup(app: web.Application) -> None:
    app[RUNTIME_DATA_KEY] = await async_setup_exporter(app[CONFIG_KEY])


async def _on_cleanup(app: web.Application) -> None:
    if RUNTIME_DATA_KEY in app:
        await async_unload_exporter(app[RUNTIME_DATA_KEY])


def create_app(config: ExporterConfig, runtime_data: RuntimeData | None = None) -> web.Application:
    """Build the exporter web application.

    Args:
        config: Validated exporter configuration
        runtime_data: Already set up runtime objects; set up on startup if None

    """
    app = web.Application()
    app[CONFIG_KEY] = config
    app[SCRAPE_LOCK_KEY] = asyncio.Lock()

    if runtime_data is None:
        app.on_startup.append(_on_startup)
    else:
        app[RUNTIME_DATA_KEY] = runtime_data
    app.on_cleanup.append(_on_cleanup)

    app.router.add_get("/", handle_index)
    app.router.add_get(METRICS_PATH, handle_metrics)
    return app


def main() -> None:
    """Console entry point."""
    try:
        config = load_config()
    except vol.Invalid as err:
        configure_logging("ERROR")
        _LOGGER.error("Invalid configuration: %s", err)
        sys.exit(2)

    configure_logging(config.log_level)
    _LOGGER.info(
        "Listening on %s:%d, metrics at %s", config.listen_host, config.listen_port, METRICS_PATH
    )
    web.run_app(
        create_app(config),
        host=config.listen_host,
        port=config.listen_port,
        print=None,
    )


if __name__ == "__main__":
    main()
