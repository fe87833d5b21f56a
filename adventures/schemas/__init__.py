# adventures/schemas/__init__.py

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Generic, Optional, List, TypeVar

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Базовая схема: snake_case в Python, camelCase в JSON
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =======================
# СХЕМЫ ДЛЯ ПОЛЬЗОВАТЕЛЕЙ
# =======================

class UserBase(CamelModel):
    """
    Базовая схема пользователя
    """
    email: EmailStr
    username: str


class UserCreate(UserBase):
    """
    Схема для создания пользователя (регистрация)
    """
    password: str


class UserLogin(CamelModel):
    """
    Схема для логина по e-mail
    """
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """
    Схема ответа с инфо о пользователе (без пароля)
    """
    id: int
    username: str
    email: str


class AuthResponse(CamelModel):
    message: str
    user: Optional[UserResponse] = None
    # Заполняется только при JWT_ENABLED
    token: Optional[str] = None


# ====================
# СХЕМЫ ДЛЯ ПУБЛИКАЦИИ
# ====================


class PostCreate(CamelModel):
    """Создание/обновление поста"""
    title: str
    description: Optional[str] = None
    location: str
    adventure_type: Optional[str] = None
    difficulty_level: Optional[str] = None
    estimated_duration: Optional[str] = None
    user_id: int
    user_name: str
    photos: Optional[List[str]] = None


class PostResponse(CamelModel):
    """Ответ с информацией о посте"""
    id: int
    title: str
    description: Optional[str] = None
    location: str
    adventure_type: Optional[str] = None
    difficulty_level: Optional[str] = None
    estimated_duration: Optional[str] = None
    user_id: int
    user_name: Optional[str] = None
    photos: List[str] = []
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime


class Page(CamelModel, Generic[T]):
    """Страница результатов (формат, который ждет фронтенд)"""
    content: List[T]
    number: int
    size: int
    total_elements: int
    total_pages: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total: int) -> "Page[T]":
        total_pages = (total + size - 1) // size if size else 0
        return cls(
            content=content,
            number=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            number_of_elements=len(content),
            first=page == 0,
            last=page >= total_pages - 1,
            empty=not content,
        )


# ======================
# СХЕМЫ ДЛЯ КОММЕНТАРИЕВ
# ======================

class CommentCreate(CamelModel):
    """Создание комментария"""
    content: str
    post_id: int
    user_id: int
    user_name: str


class CommentResponse(CamelModel):
    id: int
    content: str
    post_id: int
    user_id: int
    user_name: Optional[str] = None
    created_at: datetime


class CommentCount(CamelModel):
    post_id: int
    count: int
