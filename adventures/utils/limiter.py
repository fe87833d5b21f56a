from slowapi import Limiter
from slowapi.util import get_remote_address

from adventures.config import settings

# Ограничитель частоты запросов по IP клиента
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
