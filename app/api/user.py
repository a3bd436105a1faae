import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.security import hash_password
from app.database import get_db
from app.models import Badge, Book, User
from app.schemas.error import MessageResponse
from app.schemas.user import (
    FavoriteBookRequest,
    PrimaryBadgeRequest,
    UserBadgesResponse,
    UserRead,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


def _get_self(db: Session, actor: Actor) -> User:
    user = db.query(User).filter(User.id == actor.id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", response_model=UserRead, summary="내 정보")
def get_me(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return _get_self(db, actor)


@router.patch("/", response_model=UserRead, summary="내 프로필 수정")
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = _get_self(db, actor)
    # 빈 값은 무시하고 들어온 필드만 변경
    if payload.username is not None and payload.username.strip() != "":
        user.username = payload.username.strip()
    if payload.password:
        user.password_hash = hash_password(payload.password)
    if payload.image:
        user.image = payload.image
    db.commit()
    db.refresh(user)
    return user


@router.delete("/", response_model=MessageResponse, summary="회원 탈퇴")
def delete_me(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    user = _get_self(db, actor)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted their account", actor.id)
    return MessageResponse(message="User deleted successfully")


@router.get("/badges", response_model=UserBadgesResponse, summary="내 배지 목록")
def my_badges(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    user = _get_self(db, actor)
    return UserBadgesResponse(badges=sorted(user.badges, key=lambda b: b.id))


@router.patch("/primary-badge", response_model=UserRead, summary="대표 배지 변경")
def change_primary_badge(
    payload: PrimaryBadgeRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = _get_self(db, actor)
    badge = db.query(Badge).filter(Badge.id == payload.primary_badge).first()
    if not badge:
        raise HTTPException(status_code=404, detail="Badge not found")
    if badge not in user.badges:
        raise HTTPException(status_code=400, detail="Badge is not owned by this user")
    user.primary_badge_id = badge.id
    db.commit()
    db.refresh(user)
    return user


@router.patch("/favorite-book", response_model=UserRead, summary="인생책 변경")
def change_favorite_book(
    payload: FavoriteBookRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = _get_self(db, actor)
    if not db.query(Book.id).filter(Book.id == payload.favorite_book).first():
        raise HTTPException(status_code=404, detail="Book not found")
    user.favorite_book_id = payload.favorite_book
    db.commit()
    db.refresh(user)
    return user
