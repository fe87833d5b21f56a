# adventures/routes/users.py

"""
API endpoints сервиса пользователей: регистрация, логин, подписки.

Ошибки регистрации/логина/подписки отдаются как 400 с текстом ошибки.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from adventures.config import settings
from adventures.schemas import AuthResponse, UserCreate, UserLogin, UserResponse
from adventures.services import user_service
from adventures.utils.database import get_db
from adventures.utils.exceptions import AppError
from adventures.utils.limiter import limiter

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={400: {"description": "Bad Request"}},
)


def _auth_error(prefix: str, exc: AppError) -> JSONResponse:
    body = AuthResponse(message=f"{prefix}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


# ===============================
# РЕГИСТРАЦИЯ НОВОГО ПОЛЬЗОВАТЕЛЯ
# ===============================

@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register_user(
        user: UserCreate,
        request: Request,
        db: Session = Depends(get_db)
):
    try:
        return await user_service.register_user(db=db, user_in=user)
    except AppError as exc:
        return _auth_error("Registration error", exc)


# ==============================
# Авторизация созданного профиля
# ==============================

@router.post(
    "/login",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_user(
        user: UserLogin,
        request: Request,
        db: Session = Depends(get_db)
):
    """Логин пользователя по email и паролю"""
    try:
        return await user_service.login_user(db=db, creds=user)
    except AppError as exc:
        return _auth_error("Login error", exc)


# ========
# ПОДПИСКИ
# ========

@router.post("/{user_id}/follow/{target_id}", response_class=PlainTextResponse)
async def follow_user(
        user_id: int,
        target_id: int,
        db: Session = Depends(get_db),
):
    try:
        return await user_service.follow_user(db=db, user_id=user_id, target_id=target_id)
    except AppError as exc:
        return PlainTextResponse(
            f"Error following user: {exc.detail}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.get("/{user_id}/following", response_model=List[int])
async def get_following(
        user_id: int,
        db: Session = Depends(get_db),
):
    """Id пользователей, на которых подписан user_id"""
    return await user_service.get_following_ids(db=db, user_id=user_id)


@router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    """Все пользователи (без паролей)"""
    return await user_service.list_users(db=db)
