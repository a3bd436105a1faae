from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.permissions import assert_owner_or_admin
from app.database import get_db
from app.models import Reply, Review
from app.schemas.error import MessageResponse
from app.schemas.reply import ReplyCreateRequest, ReplyResponse, ReplyUpdateRequest

router = APIRouter(prefix="/replies", tags=["replies"])


def _get_reply(db: Session, reply_id: int) -> Reply | None:
    return db.query(Reply).filter(Reply.id == reply_id).first()


@router.post("/", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED, summary="리뷰에 답글 작성")
def create_reply(
    payload: ReplyCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if not db.query(Review.id).filter(Review.id == payload.review_id).first():
        raise HTTPException(status_code=404, detail="Review not found")
    reply = Reply(review_id=payload.review_id, author_id=actor.id, reply=payload.reply)
    db.add(reply)
    db.commit()
    db.refresh(reply)
    return reply


@router.get("/review/{review_id}", response_model=list[ReplyResponse], summary="리뷰의 답글 목록 (최신순)")
def list_replies(review_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Reply)
        .filter(Reply.review_id == review_id)
        .order_by(Reply.created_at.desc(), Reply.id.desc())
        .all()
    )


@router.get("/{reply_id}", response_model=ReplyResponse)
def get_reply(reply_id: int, db: Session = Depends(get_db)):
    reply = _get_reply(db, reply_id)
    if not reply:
        raise HTTPException(status_code=404, detail="Reply not found")
    return reply


@router.patch("/{reply_id}", response_model=ReplyResponse)
def update_reply(
    reply_id: int,
    payload: ReplyUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    reply = assert_owner_or_admin(_get_reply(db, reply_id), actor, "reply", "update")
    reply.reply = payload.reply
    db.commit()
    db.refresh(reply)
    return reply


@router.delete("/{reply_id}", response_model=MessageResponse)
def delete_reply(
    reply_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    reply = assert_owner_or_admin(_get_reply(db, reply_id), actor, "reply", "delete")
    db.delete(reply)
    db.commit()
    return MessageResponse(message="Reply deleted successfully")
