import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .facts import load_facts
from .game import GameController
from .handlers import dispatch
from .hub import ConnectionHub
from .registry import RoomRegistry
from .schemas import ConnectedOut

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        facts = load_facts(settings.FACTS_PATH)
        registry = RoomRegistry(
            code_length=settings.ROOM_CODE_LENGTH,
            max_attempts=settings.ROOM_CODE_ATTEMPTS,
        )
        app.state.registry = registry
        app.state.controller = GameController.from_settings(registry, facts, settings)
        app.state.hub = ConnectionHub()
        yield

    app = FastAPI(title="Quiz Duel", lifespan=lifespan)

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_origin_regex=settings.CORS_ORIGIN_REGEX or None,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"ok": True, "rooms": len(app.state.registry)}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        hub: ConnectionHub = app.state.hub
        controller: GameController = app.state.controller

        player_id = await hub.connect(ws)
        await hub.send(player_id, {"event": "connected", "data": ConnectedOut(player_id=player_id).wire()})
        try:
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw = message.get("text")
                if raw is None:
                    logger.warning("Ignoring binary frame from %s", player_id)
                    continue
                await hub.deliver(await dispatch(controller, player_id, raw))
        except WebSocketDisconnect:
            logger.debug("Socket %s closed", player_id)
        finally:
            hub.disconnect(player_id)
            await hub.deliver(await controller.disconnect(player_id))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
