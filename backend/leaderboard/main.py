"""FastAPI application wiring for the stock leaderboard."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.responses import FileResponse

from .market import (
    Broadcaster,
    ConfigurationError,
    QuoteClient,
    QuotePoller,
    RankedStore,
    RedisRankedStore,
    Settings,
    SubscriberRegistry,
    UpdateChannel,
    create_stream_router,
)

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    settings: Settings | None = None,
    *,
    quote_client: QuoteClient | None = None,
    ranked_store: RankedStore | None = None,
) -> FastAPI:
    """Build the application and its pipeline components.

    Settings are read from the environment when not given; a missing provider
    key raises ConfigurationError here, before any route exists.
    """
    settings = settings or Settings.from_env()
    quote_client = quote_client or QuoteClient(settings.provider_key, timeout=settings.quote_timeout)
    ranked_store = ranked_store or RedisRankedStore.from_url(settings.redis_url, key=settings.leaderboard_key)

    channel = UpdateChannel(capacity=settings.channel_capacity)
    registry = SubscriberRegistry()
    poller = QuotePoller(
        quote_client=quote_client,
        ranked_store=ranked_store,
        channel=channel,
        symbols=settings.symbols,
        interval=settings.poll_interval,
    )
    broadcaster = Broadcaster(channel=channel, registry=registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await broadcaster.start()
        await poller.start()
        try:
            yield
        finally:
            await poller.stop()
            await broadcaster.stop()
            await quote_client.aclose()
            await ranked_store.close()

    app = FastAPI(title="Stock Leaderboard", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.channel = channel
    app.state.poller = poller
    app.state.broadcaster = broadcaster
    app.include_router(create_stream_router(registry, ranked_store))

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    return app


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env()
        app = create_app(settings)
    except ConfigurationError as e:
        logger.critical("Refusing to start: %s", e)
        sys.exit(1)

    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
