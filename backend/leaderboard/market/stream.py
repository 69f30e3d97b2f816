"""HTTP and WebSocket endpoints for the leaderboard and live updates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from .errors import RankedStoreError
from .ranked_store import RankedStore
from .registry import SubscriberRegistry

logger = logging.getLogger(__name__)


def create_stream_router(registry: SubscriberRegistry, ranked_store: RankedStore) -> APIRouter:
    """Create the router with references to the registry and ranked store.

    This factory pattern lets us inject the components without globals.
    """
    router = APIRouter(tags=["leaderboard"])

    @router.get("/leaderboard")
    async def get_leaderboard() -> list[dict]:
        """All tracked symbols ordered by percent change, highest first."""
        try:
            entries = await ranked_store.read_all_descending()
        except RankedStoreError as e:
            logger.error("Leaderboard read failed: %s", e)
            raise HTTPException(status_code=503, detail="ranked store unavailable") from e
        return [entry.to_dict() for entry in entries]

    @router.websocket("/ws")
    async def live_updates(websocket: WebSocket) -> None:
        """Push one JSON message per Update: {"symbol", "price", "change"}.

        Clients are not expected to send anything; the read loop only exists
        to notice disconnects. Sending is done by the Broadcaster.
        """
        await websocket.accept()
        await registry.add(websocket)
        try:
            while True:
                # Text or binary frames are ignored; only a close ends the loop
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.info("WebSocket read failed: %r", e)
        finally:
            if await registry.remove(websocket):
                try:
                    await websocket.close()
                except Exception as e:
                    logger.debug("Ignoring error while closing WebSocket: %r", e)

    return router
