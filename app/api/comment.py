from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.permissions import assert_owner_or_admin
from app.database import get_db
from app.models import Comment, Reply
from app.schemas.error import MessageResponse
from app.schemas.reply import (
    CommentCreateRequest,
    CommentDetailResponse,
    CommentResponse,
    CommentUpdateRequest,
)

router = APIRouter(prefix="/comments", tags=["comments"])


def _get_comment(db: Session, comment_id: int) -> Comment | None:
    return db.query(Comment).filter(Comment.id == comment_id).first()


@router.post("/", response_model=CommentDetailResponse, status_code=status.HTTP_201_CREATED, summary="답글에 댓글 작성")
def create_comment(
    payload: CommentCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if not db.query(Reply.id).filter(Reply.id == payload.reply_id).first():
        raise HTTPException(status_code=404, detail="Reply not found")
    comment = Comment(reply_id=payload.reply_id, author_id=actor.id, comment=payload.comment)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


@router.get("/reply/{reply_id}", response_model=list[CommentResponse], summary="답글의 댓글 목록 (최신순)")
def list_comments(reply_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Comment)
        .filter(Comment.reply_id == reply_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


@router.get("/{comment_id}", response_model=CommentDetailResponse)
def get_comment(comment_id: int, db: Session = Depends(get_db)):
    comment = _get_comment(db, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.put("/{comment_id}", response_model=CommentDetailResponse)
@router.patch("/{comment_id}", response_model=CommentDetailResponse)
def update_comment(
    comment_id: int,
    payload: CommentUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    comment = assert_owner_or_admin(_get_comment(db, comment_id), actor, "comment", "update")
    comment.comment = payload.comment
    db.commit()
    db.refresh(comment)
    return comment


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    comment = assert_owner_or_admin(_get_comment(db, comment_id), actor, "comment", "delete")
    db.delete(comment)
    db.commit()
    return MessageResponse(message="Comment deleted successfully")
