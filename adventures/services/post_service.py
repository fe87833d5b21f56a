# adventures/services/post_service.py

"""
Сервисный слой для постов.

Знает про модели, кэш и брокер событий, но не про HTTP-статусы/исключения.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import desc, or_
from sqlalchemy.orm import Query, Session
from starlette.concurrency import run_in_threadpool

from adventures.models import Post
from adventures.schemas import Page, PostCreate, PostResponse
from adventures.services.cache import cache
from adventures.services.events import PostCreatedEvent, publisher
from adventures.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Ключ кэша для первой страницы ленты (page=0, size=10)
POSTS_CACHE_KEY = "posts:list:main"
DEFAULT_PAGE_SIZE = 10


def _newest_first(query: Query) -> Query:
    return query.order_by(desc(Post.created_at), desc(Post.id))


def _paginate(query: Query, page: int, size: int) -> Page[PostResponse]:
    total = query.count()
    posts = _newest_first(query).offset(page * size).limit(size).all()
    content = [PostResponse.model_validate(p) for p in posts]
    return Page[PostResponse].build(content, page=page, size=size, total=total)


def _validate(post_in: PostCreate) -> None:
    if not post_in.title or not post_in.title.strip():
        raise ValidationError("Title is required")
    if not post_in.location or not post_in.location.strip():
        raise ValidationError("Location is required")
    if post_in.user_id is None:
        raise ValidationError("User id is required")
    if not post_in.user_name or not post_in.user_name.strip():
        raise ValidationError("User name is required")


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError(f"Post not found with id: {post_id}")
    return post


async def create_post(
    db: Session,
    post_in: PostCreate,
) -> Post:
    """
    Создать пост, опубликовать событие post.created и сбросить кэш ленты.

    Ошибка брокера не влияет на результат: пост уже сохранен.
    """
    _validate(post_in)
    logger.info("Creating post: %s", post_in.title)

    db_post = Post(
        title=post_in.title,
        description=post_in.description,
        location=post_in.location,
        adventure_type=post_in.adventure_type,
        difficulty_level=post_in.difficulty_level,
        estimated_duration=post_in.estimated_duration,
        user_id=post_in.user_id,
        user_name=post_in.user_name,
        photos=post_in.photos,
        likes_count=0,
        comments_count=0,
    )

    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    logger.info("Post created with id %s", db_post.id)

    event = PostCreatedEvent(
        post_id=db_post.id,
        title=db_post.title,
        location=db_post.location,
        adventure_type=db_post.adventure_type,
        user_id=db_post.user_id,
        user_name=db_post.user_name,
        photos=db_post.photos,
        created_at=db_post.created_at,
    )
    # kombu блокирующий: ждем публикацию в пуле потоков, не останавливая event loop
    await run_in_threadpool(publisher.publish_post_created, event)

    # Инвалидация кэша главной ленты
    await cache.delete(POSTS_CACHE_KEY)

    return db_post


async def get_post(db: Session, post_id: int) -> Post:
    return _get_post_or_404(db, post_id)


async def list_posts(
    db: Session,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
) -> Page[PostResponse]:
    """
    Все посты, новые сверху, с пагинацией.
    Первая страница по умолчанию кэшируется.
    """
    use_cache = page == 0 and size == DEFAULT_PAGE_SIZE

    if use_cache:
        cached = await cache.get(POSTS_CACHE_KEY)
        if cached is not None:
            return Page[PostResponse].model_validate(cached)

    result = _paginate(db.query(Post), page, size)

    if use_cache:
        await cache.set(POSTS_CACHE_KEY, result.model_dump(mode="json"), ttl=300)

    return result


async def list_posts_by_user(db: Session, user_id: int) -> List[Post]:
    return _newest_first(db.query(Post).filter(Post.user_id == user_id)).all()


async def search_posts(
    db: Session,
    location: Optional[str],
    adventure_type: Optional[str],
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
) -> Page[PostResponse]:
    """
    Поиск по вхождению подстроки (с учетом регистра).

    Условия по location и adventure_type объединяются через OR.
    Не переданный фильтр (None) условия не добавляет; без фильтров - все посты.
    Пустая строка - это переданный фильтр: как LIKE '%%', совпадает с любым
    непустым (NOT NULL) значением поля.
    """
    logger.info("Searching posts: location=%s, adventure_type=%s", location, adventure_type)

    conditions = []
    if location is not None:
        conditions.append(Post.location.contains(location, autoescape=True))
    if adventure_type is not None:
        conditions.append(Post.adventure_type.contains(adventure_type, autoescape=True))

    query = db.query(Post)
    if conditions:
        query = query.filter(or_(*conditions))

    return _paginate(query, page, size)


async def list_posts_by_users(db: Session, user_ids: Iterable[int]) -> List[Post]:
    """
    Лента: посты перечисленных пользователей, новые сверху.
    """
    ids = set(user_ids)
    if not ids:
        return []
    logger.info("Loading feed for users: %s", sorted(ids))
    return _newest_first(db.query(Post).filter(Post.user_id.in_(ids))).all()


async def update_post(
    db: Session,
    post_id: int,
    post_in: PostCreate,
) -> Post:
    """
    Перезаписать изменяемые поля поста.
    Владелец и лайки не меняются.
    """
    db_post = _get_post_or_404(db, post_id)
    _validate(post_in)
    logger.info("Updating post %s", post_id)

    db_post.title = post_in.title
    db_post.description = post_in.description
    db_post.location = post_in.location
    db_post.adventure_type = post_in.adventure_type
    db_post.difficulty_level = post_in.difficulty_level
    db_post.estimated_duration = post_in.estimated_duration
    db_post.photos = post_in.photos
    db_post.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_post)

    await cache.delete(POSTS_CACHE_KEY)

    return db_post


async def delete_post(db: Session, post_id: int) -> None:
    """
    Удалить пост вместе с фото. Комментарии остаются - их удаляет вызывающая сторона.
    """
    db_post = _get_post_or_404(db, post_id)

    db.delete(db_post)
    db.commit()
    logger.info("Post %s deleted", post_id)

    await cache.delete(POSTS_CACHE_KEY)


async def like_post(db: Session, post_id: int) -> Post:
    db_post = _get_post_or_404(db, post_id)

    # Обычный read-modify-write, без блокировок
    db_post.likes_count = db_post.likes_count + 1
    db.commit()
    db.refresh(db_post)
    logger.info("Post %s liked (%s)", post_id, db_post.likes_count)

    await cache.delete(POSTS_CACHE_KEY)
    return db_post


async def unlike_post(db: Session, post_id: int) -> Post:
    db_post = _get_post_or_404(db, post_id)

    if db_post.likes_count > 0:
        db_post.likes_count = db_post.likes_count - 1
        db.commit()
        db.refresh(db_post)
        logger.info("Post %s unliked (%s)", post_id, db_post.likes_count)
        await cache.delete(POSTS_CACHE_KEY)

    return db_post
