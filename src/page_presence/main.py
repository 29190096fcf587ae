"""Main entry point for the page presence server."""

import asyncio
import logging
import sys

from pydantic import ValidationError

from page_presence.adapters.config import AppConfig
from page_presence.adapters.web import ConnectionHub, CountBroadcaster, PresenceWebAdapter
from page_presence.application.services import PresenceEngine

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def create_presence_server(config: AppConfig) -> PresenceWebAdapter:
    """Wire hub, broadcaster, engine and web adapter together."""
    hub = ConnectionHub(
        queue_size=config.outbound_queue_size,
        send_timeout_seconds=config.send_timeout_seconds,
    )
    engine = PresenceEngine(CountBroadcaster(hub))
    return PresenceWebAdapter(engine, hub, config)


async def main() -> None:
    """Main application entry point."""
    try:
        config = AppConfig()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level.upper())

    server = create_presence_server(config)
    try:
        await server.start()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        await server.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
