# adventures/services/events.py

"""
Публикация доменных событий в RabbitMQ (через kombu).

Доставка best-effort, at-most-once: одна попытка, без повторов.
Если брокер недоступен, событие теряется, ошибка только логируется.
"""

import logging
from datetime import datetime
from typing import List, Optional

from kombu import Connection, Exchange, Queue
from pydantic import ConfigDict

from adventures.config import settings
from adventures.schemas import CamelModel
from adventures.utils.exceptions import PublishError

logger = logging.getLogger(__name__)


class PostCreatedEvent(CamelModel):
    """Снимок поста в момент создания. Не хранится, только отправляется."""
    model_config = ConfigDict(frozen=True)

    post_id: int
    title: str
    location: str
    adventure_type: Optional[str] = None
    user_id: int
    user_name: Optional[str] = None
    photos: List[str] = []
    created_at: datetime


class EventPublisher:
    def __init__(
        self,
        url: str,
        connect_timeout: float = 5.0,
    ):
        self._url = url
        self._connect_timeout = connect_timeout

        self.post_created_exchange = Exchange(
            settings.POST_CREATED_EXCHANGE, type="direct", durable=True
        )
        self.post_created_queue = Queue(
            settings.POST_CREATED_QUEUE,
            exchange=self.post_created_exchange,
            routing_key=settings.POST_CREATED_ROUTING_KEY,
            durable=True,
        )

        # user.follow только объявляется, публикаций в него нет
        self.user_follow_exchange = Exchange(
            settings.USER_FOLLOW_EXCHANGE, type="direct", durable=True
        )
        self.user_follow_queue = Queue(
            settings.USER_FOLLOW_QUEUE,
            exchange=self.user_follow_exchange,
            routing_key=settings.USER_FOLLOW_ROUTING_KEY,
            durable=True,
        )

    def _connection(self) -> Connection:
        return Connection(self._url, connect_timeout=self._connect_timeout)

    # max_retries=0: ровно одна попытка подключения, без пауз и повторов
    def _send(self, payload: dict, exchange: Exchange, routing_key: str, queue: Queue) -> None:
        try:
            with self._connection() as conn:
                conn.ensure_connection(max_retries=0)
                producer = conn.Producer(serializer="json")
                producer.publish(
                    payload,
                    exchange=exchange,
                    routing_key=routing_key,
                    declare=[queue],
                    delivery_mode="persistent",
                    retry=False,
                )
        except Exception as exc:
            raise PublishError(f"Could not publish to {exchange.name}: {exc}") from exc

    def publish_post_created(self, event: PostCreatedEvent) -> None:
        """
        Отправить событие post.created. Никогда не бросает исключений.
        """
        try:
            logger.info("Publishing post created event: %s", event.post_id)
            self._send(
                event.model_dump(mode="json", by_alias=True),
                exchange=self.post_created_exchange,
                routing_key=settings.POST_CREATED_ROUTING_KEY,
                queue=self.post_created_queue,
            )
            logger.info("Post created event published: %s", event.post_id)
        except PublishError as exc:
            logger.error("Failed to publish post created event: %s", exc.detail, exc_info=exc)

    def declare_topology(self) -> bool:
        """
        Объявить обменники и очереди при старте сервиса.
        Возвращает False, если брокер недоступен (сервис все равно стартует).
        """
        try:
            with self._connection() as conn:
                conn.ensure_connection(max_retries=0)
                channel = conn.default_channel
                for queue in (self.post_created_queue, self.user_follow_queue):
                    queue(channel).declare()
            return True
        except Exception as exc:
            logger.error("Could not declare broker topology: %s", exc)
            return False


publisher = EventPublisher(
    settings.BROKER_URL,
    connect_timeout=settings.BROKER_CONNECT_TIMEOUT,
)
