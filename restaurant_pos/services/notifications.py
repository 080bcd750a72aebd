# restaurant_pos/services/notifications.py
import itertools
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from restaurant_pos.schemas.event import EventKind, OrderEvent

logger = logging.getLogger(__name__)

Listener = Callable[[OrderEvent], None]


class OrderEventBus:
    """
    In-process fan-out of order events to the screens that need to refresh.

    Listeners register for every table or for a single table number. Events
    are delivered after the mutation is committed; delivery order across
    events is not guaranteed.
    """

    def __init__(self):
        self._listeners: Dict[int, Tuple[Optional[int], Listener]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, callback: Listener, *, table_number: Optional[int] = None) -> int:
        with self._lock:
            token = next(self._ids)
            self._listeners[token] = (table_number, callback)
        return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: OrderEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.values())

        for table_number, callback in listeners:
            # Listeners without a table filter see everything, including bill events
            if table_number is not None and event.table_number != table_number:
                continue
            try:
                callback(event)
            except Exception:
                # The mutation is already committed; a broken screen must not undo it
                logger.exception(f"Order event listener failed on {event.kind.value}")

    def emit(self, kind: EventKind, **fields) -> OrderEvent:
        event = OrderEvent(kind=kind, **fields)
        logger.debug(f"Emitting {kind.value} {fields}")
        self.publish(event)
        return event
