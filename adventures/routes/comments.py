# adventures/routes/comments.py

"""
API endpoints для комментариев.

Комментарии не привязаны к посту внешним ключом:
существование поста не проверяется.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from adventures.schemas import CommentCount, CommentCreate, CommentResponse
from adventures.services import comment_service
from adventures.utils.database import get_db


router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_comment(
    comment: CommentCreate,
    db: Session = Depends(get_db),
):
    """
    Создаём комментарий к посту.
    """
    return await comment_service.create_comment(db=db, comment_in=comment)


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    post_id: int = Query(..., alias="postId"),
    db: Session = Depends(get_db),
):
    """
    То же, что GET /post/{post_id}, но через query-параметр.
    """
    return await comment_service.list_comments_for_post(db=db, post_id=post_id)


@router.get("/post/{post_id}", response_model=List[CommentResponse])
async def list_post_comments(
    post_id: int,
    db: Session = Depends(get_db),
):
    """
    Получить все комментарии к посту, от старых к новым.
    """
    return await comment_service.list_comments_for_post(db=db, post_id=post_id)


@router.get("/post/{post_id}/count", response_model=CommentCount)
async def count_post_comments(
    post_id: int,
    db: Session = Depends(get_db),
):
    count = await comment_service.count_comments_for_post(db=db, post_id=post_id)
    return CommentCount(post_id=post_id, count=count)


@router.delete("/post/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_comments(
    post_id: int,
    db: Session = Depends(get_db),
):
    """
    Удалить все комментарии поста (используется при удалении поста).
    """
    await comment_service.delete_comments_for_post(db=db, post_id=post_id)
    return None


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
):
    await comment_service.delete_comment(db=db, comment_id=comment_id)
    return None
