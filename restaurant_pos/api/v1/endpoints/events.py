"""Change feed for the kitchen and billing screens."""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from restaurant_pos.api import deps
from restaurant_pos.schemas.event import OrderEvent

logger = logging.getLogger(__name__)
router = APIRouter()


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    try:
        while True:
            # Client messages (pings) carry nothing we need
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/ws")
async def events_websocket(
    websocket: WebSocket,
    token: str,
    table_number: Optional[int] = None,
    db: Session = Depends(deps.get_db),
):
    """
    Pushes a {"type": "refresh", ...} message after every committed change to
    tables, orders or bills, optionally only for one table. Screens refetch on
    each message; messages are not ordered and carry no row data.
    """
    user = deps.get_user_from_token(db, token)
    # Only needed for the token check; do not hold a connection for the feed's lifetime
    db.close()
    if user is None or not user.is_active:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    bus = deps.get_event_bus(websocket)
    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[OrderEvent]" = asyncio.Queue()

    # Mutations run in the threadpool; hand events over to this loop
    def on_event(event: OrderEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    subscription = bus.subscribe(on_event, table_number=table_number)
    await websocket.accept()
    logger.info(f"Event feed opened for {user.username} (table={table_number})")

    disconnected = asyncio.ensure_future(_wait_for_disconnect(websocket))
    next_event = None
    try:
        while True:
            next_event = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({next_event, disconnected}, return_when=asyncio.FIRST_COMPLETED)
            if next_event not in done:
                next_event.cancel()
                break
            await websocket.send_json(next_event.result().to_message())
    except WebSocketDisconnect:
        pass
    finally:
        bus.unsubscribe(subscription)
        disconnected.cancel()
        if next_event is not None:
            next_event.cancel()
        logger.info(f"Event feed closed for {user.username}")
