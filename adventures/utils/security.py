# adventures/utils/security.py

"""
Утилиты для безопасности: хэширование пароля и JWT токены.

Оба механизма выключены по умолчанию (PASSWORD_HASHING_ENABLED, JWT_ENABLED):
пароли сравниваются как есть, токены не выдаются.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from passlib.context import CryptContext
from adventures.config import settings

# Контекст bcrypt алгоритм
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# =============================
# ФУНКЦИЯ ДЛЯ РАБОТЫ С ПАРОЛЯМИ
# =============================

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

# Проверка, что введённый пароль совпадает с хэшем в БД
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def prepare_password(password: str) -> str:
    """
    Значение для колонки users.password
    """
    if settings.PASSWORD_HASHING_ENABLED:
        return hash_password(password)
    return password


def password_matches(plain_password: str, stored_password: str) -> bool:
    if settings.PASSWORD_HASHING_ENABLED:
        return verify_password(plain_password, stored_password)
    # Простое сравнение строк
    return plain_password == stored_password

# =============================
# ФУНКЦИИ ДЛЯ РАБОТЫ С JWT
# =============================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()

    # Определяем время истечения токена
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    # Добавляем в токен время истечения
    to_encode.update({
        "exp": expire,
        "token_type": "access",
    })

    # Кодируем в JWT
    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt

