"""STOMP over WebSocket endpoint."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...app import IApplication
from ...logging_config import get_logger
from ...stomp import StompSession, select_subprotocol

logger = get_logger(__name__)


def create_websocket_router(app: IApplication) -> APIRouter:
    """Create router exposing the /ws STOMP endpoint."""
    router = APIRouter(tags=["websocket"])

    @router.websocket("/ws")
    async def stomp_endpoint(websocket: WebSocket) -> None:
        """Serve one STOMP connection until either side closes it."""
        subprotocol = select_subprotocol(websocket.scope.get("subprotocols", []))
        await websocket.accept(subprotocol=subprotocol)

        session = StompSession(app.broker, send=websocket.send_text)
        client_gone = False
        try:
            while not session.closed:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    client_gone = True
                    break
                data = message.get("text")
                if data is None:
                    data = message.get("bytes") or b""
                await session.handle_text(data)
        except WebSocketDisconnect:
            client_gone = True
        finally:
            session.close()

        if not client_gone:
            await websocket.close()
        logger.info("WebSocket for STOMP session %s closed", session.session_id)

    return router
