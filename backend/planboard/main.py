from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from planboard.api.deps import user_from_token
from planboard.api.routers import api_router
from planboard.config import settings
from planboard.websocket.manager import manager
from planboard.websocket.redis_listener import start_change_listener


logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Planboard", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.on_event("startup")
async def _startup() -> None:
    if settings.REDIS_ENABLED:
        asyncio.create_task(start_change_listener())
    else:
        logger.info("Redis disabled; change feed will stay silent")


@app.websocket("/ws/changes")
async def ws_changes(websocket: WebSocket, token: str = Query(...)) -> None:
    try:
        user_from_token(token)
    except ValueError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.disconnect(websocket)
