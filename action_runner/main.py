"""Main entry point for the action runner."""

import asyncio
import signal
from typing import Optional

import structlog

from . import __version__
from .config import ConfigReader, RunnerSettings
from .scaffolder import ActionExecutor
from .server import ActionServer
from .utils import CatalogClient, LogStream, UrlReader, setup_logging


logger = structlog.get_logger(__name__)


def build_executor(
    settings: RunnerSettings,
    catalog_client: Optional[CatalogClient] = None,
    url_reader: Optional[UrlReader] = None,
) -> ActionExecutor:
    """Wire an executor and its collaborators from settings."""
    config = ConfigReader.from_settings(settings)

    if catalog_client is None:
        catalog_client = CatalogClient(
            base_url=settings.catalog.base_url,
            token=settings.catalog.token,
            timeout=settings.catalog.timeout,
        )
    if url_reader is None:
        url_reader = UrlReader(
            timeout=settings.reader.timeout,
            max_bytes=settings.reader.max_bytes,
        )

    return ActionExecutor(
        config=config,
        catalog_client=catalog_client,
        url_reader=url_reader,
        log_stream=LogStream(structlog.get_logger("action_runner.actions")),
    )


async def run(settings: RunnerSettings) -> None:
    """Serve the action runner until SIGINT or SIGTERM."""
    logger.info("Starting action runner", version=__version__)

    executor = build_executor(settings)
    executor.load_actions()

    server = ActionServer(
        executor,
        host=settings.server_host,
        port=settings.server_port,
        execution_timeout=settings.action_execution_timeout,
        metrics_enabled=settings.metrics_enabled,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await server.start()
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down action runner")

        await server.stop()

        if executor.catalog_client:
            await executor.catalog_client.close()
        if executor.url_reader:
            await executor.url_reader.close()


def main() -> None:
    """Console script entry point."""
    settings = RunnerSettings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
