"""
API endpoints для публикаций о приключениях
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from adventures.dependencies import get_feed_user_ids
from adventures.schemas import Page, PostCreate, PostResponse
from adventures.services import post_service
from adventures.utils.database import get_db

router = APIRouter(prefix="/api/posts", tags=["posts"])


# =========================
# СОЗДАНИЕ НОВОЙ ПУБЛИКАЦИИ
# =========================

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    db: Session = Depends(get_db),
):
    """
    Создание публикации. После сохранения отправляется событие post.created.
    """
    return await post_service.create_post(db=db, post_in=post)


# ===============================
# ПОЛУЧИТЬ СПИСОК ВСЕХ ПУБЛИКАЦИЙ
# ===============================

@router.get("", response_model=Page[PostResponse])
async def list_posts(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Все посты, новые сверху, с пагинацией (page с нуля).
    """
    return await post_service.list_posts(db=db, page=page, size=size)


# =====
# ПОИСК
# =====

@router.get("/search", response_model=Page[PostResponse])
async def search_posts(
    location: Optional[str] = None,
    adventure_type: Optional[str] = Query(None, alias="adventureType"),
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Поиск по локации или типу приключения (вхождение подстроки).
    """
    return await post_service.search_posts(
        db=db,
        location=location,
        adventure_type=adventure_type,
        page=page,
        size=size,
    )


# =====
# ЛЕНТА
# =====

@router.get("/feed", response_model=List[PostResponse])
async def get_feed(
    user_ids: List[int] = Depends(get_feed_user_ids),
    db: Session = Depends(get_db),
):
    """
    Посты пользователей из userIds (обычно тех, на кого подписан текущий).
    """
    return await post_service.list_posts_by_users(db=db, user_ids=user_ids)


@router.get("/user/{user_id}", response_model=List[PostResponse])
async def list_user_posts(
    user_id: int,
    db: Session = Depends(get_db),
):
    return await post_service.list_posts_by_user(db=db, user_id=user_id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    return await post_service.get_post(db=db, post_id=post_id)


# =====================================
# ОБНОВЛЕНИЕ(РЕДАКТИРОВАНИЕ) ПУБЛИКАЦИИ
# =====================================

@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post: PostCreate,
    db: Session = Depends(get_db),
):
    """
    Обновление поста. Тело запроса такое же, как при создании.
    """
    return await post_service.update_post(db=db, post_id=post_id, post_in=post)


# ==================
# УДАЛИТЬ ПУБЛИКАЦИЮ
# ==================

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    """
    Удаление поста. Комментарии не удаляются
    (для этого есть DELETE /api/comments/post/{post_id}).
    """
    await post_service.delete_post(db=db, post_id=post_id)
    return None


# =====
# ЛАЙКИ
# =====

@router.post("/{post_id}/like", status_code=status.HTTP_200_OK)
async def like_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    await post_service.like_post(db=db, post_id=post_id)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{post_id}/like", status_code=status.HTTP_200_OK)
async def unlike_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    await post_service.unlike_post(db=db, post_id=post_id)
    return Response(status_code=status.HTTP_200_OK)
