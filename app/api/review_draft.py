from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.permissions import assert_owner_or_admin
from app.core.utils import ensure_rating_in_range
from app.database import get_db
from app.models import Book, ReviewDraft, User
from app.schemas.review import (
    ReviewCreateRequest,
    ReviewDraftResponse,
    ReviewUpdateRequest,
)
from app.services.resolver import resolve_tags

router = APIRouter(prefix="/review-drafts", tags=["review-drafts"])


def _get_draft(db: Session, draft_id: int) -> ReviewDraft | None:
    return db.query(ReviewDraft).filter(ReviewDraft.id == draft_id).first()


@router.post("/", response_model=ReviewDraftResponse, status_code=status.HTTP_201_CREATED, summary="리뷰 초안 저장")
def create_review_draft(
    payload: ReviewCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if not db.query(Book.id).filter(Book.id == payload.book_id).first():
        raise HTTPException(status_code=404, detail="Book not found")
    if not db.query(User.id).filter(User.id == actor.id).first():
        raise HTTPException(status_code=404, detail="User not found")
    ensure_rating_in_range(payload.rating)

    draft = ReviewDraft(
        book_id=payload.book_id,
        author_id=actor.id,
        title=payload.title,
        description=payload.description,
        rating=payload.rating,
        tags=resolve_tags(db, payload.tags),
    )
    db.add(draft)
    db.commit()
    db.refresh(draft)
    return draft


@router.get("/", response_model=list[ReviewDraftResponse], summary="내 리뷰 초안 목록")
def list_my_review_drafts(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return (
        db.query(ReviewDraft)
        .filter(ReviewDraft.author_id == actor.id)
        .order_by(ReviewDraft.updated_at.desc(), ReviewDraft.id.desc())
        .all()
    )


@router.get("/{draft_id}", response_model=ReviewDraftResponse)
def get_review_draft(
    draft_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return assert_owner_or_admin(_get_draft(db, draft_id), actor, "review draft", "view")


@router.put("/{draft_id}", response_model=ReviewDraftResponse)
def update_review_draft(
    draft_id: int,
    payload: ReviewUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if payload.rating is not None:
        ensure_rating_in_range(payload.rating)

    draft = assert_owner_or_admin(_get_draft(db, draft_id), actor, "review draft", "update")

    if payload.tags is not None:
        draft.tags = resolve_tags(db, payload.tags)
    if payload.title is not None:
        draft.title = payload.title
    if payload.description is not None:
        draft.description = payload.description
    # 초안의 별점은 Rating 테이블이 아니라 초안 행에만 반영
    if payload.rating is not None:
        draft.rating = payload.rating
    db.commit()
    db.refresh(draft)
    return draft
