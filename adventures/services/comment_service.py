# adventures/services/comment_service.py

"""
Сервисный слой для комментариев.

Знает про Comment и БД, но не про HTTP-исключения.
Существование поста не проверяется: post_id принимается как есть.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from adventures.models import Comment
from adventures.schemas import CommentCreate
from adventures.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def create_comment(
    db: Session,
    comment_in: CommentCreate,
) -> Comment:
    """
    Создать комментарий к посту.
    """
    if not comment_in.content or not comment_in.content.strip():
        raise ValidationError("Comment content is required")
    if not comment_in.user_name or not comment_in.user_name.strip():
        raise ValidationError("User name is required")

    logger.info("Creating comment for post %s", comment_in.post_id)

    db_comment = Comment(
        content=comment_in.content,
        post_id=comment_in.post_id,
        user_id=comment_in.user_id,
        user_name=comment_in.user_name,
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)

    logger.info("Comment created with id %s", db_comment.id)
    return db_comment


async def list_comments_for_post(
    db: Session,
    post_id: int,
) -> List[Comment]:
    """
    Все комментарии к посту, от старых к новым.
    """
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


async def count_comments_for_post(db: Session, post_id: int) -> int:
    return db.query(Comment).filter(Comment.post_id == post_id).count()


async def delete_comment(
    db: Session,
    comment_id: int,
) -> None:
    db_comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not db_comment:
        raise NotFoundError(f"Comment not found with id: {comment_id}")

    db.delete(db_comment)
    db.commit()
    logger.info("Comment %s deleted", comment_id)


async def delete_comments_for_post(
    db: Session,
    post_id: int,
) -> int:
    """
    Удалить все комментарии поста. Если их нет - это не ошибка.
    Возвращает количество удаленных.
    """
    deleted = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Deleted %s comments of post %s", deleted, post_id)
    return deleted
