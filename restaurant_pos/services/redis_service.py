# restaurant_pos/services/redis_service.py
import json
import logging
from typing import Optional

import redis

from restaurant_pos.core.config import settings
from restaurant_pos.schemas.event import OrderEvent
from restaurant_pos.services.notifications import OrderEventBus

logger = logging.getLogger(__name__)


class RedisEventPublisher:
    """
    Forwards order events to Redis pub/sub so screens served by other
    processes refresh too. Publishing is best-effort: failures are logged.
    """

    def __init__(self, url: str = settings.REDIS_URL, channel_prefix: str = settings.REDIS_CHANNEL_PREFIX):
        self.url = url
        self.channel_prefix = channel_prefix
        self._client: Optional[redis.Redis] = None
        self._token: Optional[int] = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.url, decode_responses=True, socket_timeout=2)
        return self._client

    def channels_for(self, event: OrderEvent):
        channels = [f"{self.channel_prefix}orders"]
        if event.table_number is not None:
            channels.append(f"{self.channel_prefix}table_{event.table_number}")
        return channels

    def __call__(self, event: OrderEvent) -> None:
        message = json.dumps(event.to_message())
        for channel in self.channels_for(event):
            try:
                self.client.publish(channel, message)
            except redis.exceptions.RedisError as e:
                logger.warning(f"Could not publish {event.kind.value} to Redis channel {channel!r}: {e}")

    def attach(self, bus: OrderEventBus) -> None:
        if self._token is None:
            self._token = bus.subscribe(self)
            logger.info(f"Redis event publisher attached ({self.url})")

    def detach(self, bus: OrderEventBus) -> None:
        if self._token is not None:
            bus.unsubscribe(self._token)
            self._token = None
        if self._client is not None:
            self._client.close()
            self._client = None
