from __future__ import annotations

import asyncio
import json
import logging

from planboard.integrations.redis import create_redis_async
from planboard.services.events import CHANNEL
from planboard.websocket.manager import manager


logger = logging.getLogger(__name__)


async def _close(resource) -> None:
    closer = getattr(resource, "aclose", None) or getattr(resource, "close", None)
    if closer is None:
        return
    result = closer()
    if asyncio.iscoroutine(result):
        await result


async def start_change_listener() -> None:
    while True:
        pubsub = None
        client = None
        try:
            client = create_redis_async()
            pubsub = client.pubsub()
            await pubsub.subscribe(CHANNEL)
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                raw = message.get("data")
                if not raw:
                    continue
                try:
                    await manager.broadcast(json.loads(raw))
                except Exception:
                    logger.exception("Failed to process change message")
        except asyncio.CancelledError:
            break
        except Exception:
            logger.exception("Redis listener failed; retrying soon")
        finally:
            try:
                if pubsub is not None:
                    await pubsub.unsubscribe(CHANNEL)
                    await _close(pubsub)
                if client is not None:
                    await _close(client)
            except Exception:
                logger.debug("Error while closing redis listener", exc_info=True)
        await asyncio.sleep(2)
