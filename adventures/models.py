# adventures/models.py

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()

# ============
# USER SERVICE
# ============

class User(Base):
    """
    Модель пользователя.

    Пароль хранится в открытом виде, пока не включено хэширование
    (PASSWORD_HASHING_ENABLED).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Follow(Base):
    """
    Подписка: follower_id -> followed_id.

    Хранится только сторона подписчика, обратных ссылок нет.
    Составной первичный ключ не дает подписаться дважды.
    """
    __tablename__ = "user_follows"

    follower_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    followed_id = Column(Integer, ForeignKey("users.id"), primary_key=True)


# ============
# POST SERVICE
# ============

class Post(Base):
    """
    Модель публикации о приключении
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=False, index=True)
    adventure_type = Column(String(100), nullable=True)
    difficulty_level = Column(String(100), nullable=True)
    estimated_duration = Column(String(100), nullable=True)

    # Пользователи живут в другом сервисе, поэтому без ForeignKey
    user_id = Column(Integer, nullable=False, index=True)
    user_name = Column(String(100), nullable=True)

    likes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    photo_rows = relationship(
        "PostPhoto",
        order_by="PostPhoto.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def photos(self) -> list[str]:
        return [photo.photo_url for photo in self.photo_rows]

    @photos.setter
    def photos(self, urls: list[str] | None) -> None:
        self.photo_rows = [
            PostPhoto(position=position, photo_url=url)
            for position, url in enumerate(urls or [])
        ]


class PostPhoto(Base):
    """
    Ссылка на фото поста (порядок задает position)
    """

    __tablename__ = "post_photos"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    photo_url = Column(String(1024), nullable=False)


class Comment(Base):
    """
    Модель комментария.

    post_id без ForeignKey: существование поста не проверяется.
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    post_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    user_name = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
