# adventures/services/user_service.py

"""
Сервисный слой пользователей: регистрация, логин, подписки.

Знает про модели и БД, но не про HTTP. Ошибки - подклассы AppError.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from adventures.config import settings
from adventures.models import Follow, User
from adventures.schemas import AuthResponse, UserCreate, UserLogin, UserResponse
from adventures.utils.exceptions import AuthError, ConflictError, NotFoundError
from adventures.utils.security import (
    create_access_token,
    password_matches,
    prepare_password,
)

logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def _auth_response(message: str, user: User) -> AuthResponse:
    token = None
    if settings.JWT_ENABLED:
        token = create_access_token(data={"sub": str(user.id)})
    return AuthResponse(
        message=message,
        user=UserResponse.model_validate(user),
        token=token,
    )


async def register_user(
    db: Session,
    user_in: UserCreate,
) -> AuthResponse:
    """
    Зарегистрировать нового пользователя.

    ConflictError, если email или username уже заняты.
    """
    # Проверка уникальности email
    if db.query(User).filter(User.email == user_in.email).first():
        raise ConflictError(f"A user with this email already exists: {user_in.email}")

    # Проверка уникальности username
    if db.query(User).filter(User.username == user_in.username).first():
        raise ConflictError(f"A user with this username already exists: {user_in.username}")

    db_user = User(
        email=user_in.email,
        username=user_in.username,
        password=prepare_password(user_in.password),
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info("User registered: %s (id=%s)", db_user.username, db_user.id)
    return _auth_response(f"User registered successfully: {db_user.username}", db_user)


async def login_user(
    db: Session,
    creds: UserLogin,
) -> AuthResponse:
    """
    Аутентифицировать пользователя по email и паролю.
    """
    db_user = db.query(User).filter(User.email == creds.email).first()
    if not db_user:
        raise NotFoundError("User not found")

    if not password_matches(creds.password, db_user.password):
        raise AuthError("Incorrect password")

    logger.info("User logged in: %s", db_user.username)
    return _auth_response(f"Login successful for: {db_user.username}", db_user)


async def follow_user(
    db: Session,
    user_id: int,
    target_id: int,
) -> str:
    """
    Подписать user_id на target_id. Повторная подписка ничего не меняет.
    """
    _get_user_or_404(db, user_id)
    target = _get_user_or_404(db, target_id)

    already_following = (
        db.query(Follow)
        .filter(Follow.follower_id == user_id, Follow.followed_id == target_id)
        .first()
    )
    if not already_following:
        db.add(Follow(follower_id=user_id, followed_id=target_id))
        db.commit()
        logger.info("User %s now follows %s", user_id, target_id)

    return f"Now following {target.username}"


async def get_following_ids(
    db: Session,
    user_id: int,
) -> List[int]:
    """
    Id пользователей, на которых подписан user_id (по возрастанию).
    """
    _get_user_or_404(db, user_id)
    rows = (
        db.query(Follow.followed_id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.followed_id)
        .all()
    )
    return [row.followed_id for row in rows]


async def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()
