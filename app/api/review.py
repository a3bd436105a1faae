import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.permissions import assert_owner_or_admin
from app.core.utils import ensure_rating_in_range
from app.database import get_db
from app.models import Book, Rating, Review, User
from app.schemas.review import (
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)
from app.services.resolver import resolve_tags

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _get_review(db: Session, review_id: int) -> Review | None:
    return db.query(Review).filter(Review.id == review_id).first()


@router.get("/book/{book_id}", response_model=list[ReviewResponse], summary="특정 책의 리뷰 목록")
def list_reviews_for_book(
    book_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if not db.query(Book.id).filter(Book.id == book_id).first():
        raise HTTPException(status_code=404, detail="Book not found")
    return (
        db.query(Review)
        .filter(Review.book_id == book_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


@router.get("/{review_id}", response_model=ReviewResponse, summary="리뷰 상세")
def get_review(
    review_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rv = _get_review(db, review_id)
    if not rv:
        raise HTTPException(status_code=404, detail="Review not found")
    return rv


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    book = db.query(Book).filter(Book.id == payload.book_id).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")

    user = db.query(User).filter(User.id == actor.id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    ensure_rating_in_range(payload.rating)

    tags = resolve_tags(db, payload.tags)

    review = Review(
        book_id=book.id,
        author_id=user.id,
        title=payload.title,
        description=payload.description,
        tags=tags,
    )
    db.add(review)
    db.commit()
    db.refresh(review)

    # 별점은 리뷰와 별도로 저장
    db.add(Rating(book_id=book.id, review_id=review.id, rating=payload.rating))
    db.commit()

    db.expire(review)
    logger.info("Review %s created for book %s by user %s", review.id, book.id, user.id)
    return _get_review(db, review.id)


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    payload: ReviewUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if payload.rating is not None:
        ensure_rating_in_range(payload.rating)

    rv = assert_owner_or_admin(_get_review(db, review_id), actor, "review", "update")

    fields_set = payload.model_fields_set
    if payload.tags is not None:
        # 병합이 아니라 전체 교체
        rv.tags = resolve_tags(db, payload.tags)
    if "title" in fields_set and payload.title is not None:
        rv.title = payload.title
    if "description" in fields_set and payload.description is not None:
        rv.description = payload.description
    db.commit()

    if payload.rating is not None:
        if rv.rating is not None:
            rv.rating.rating = payload.rating
        else:
            db.add(Rating(book_id=rv.book_id, review_id=rv.id, rating=payload.rating))
        db.commit()

    db.expire(rv)
    return _get_review(db, review_id)


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rv = assert_owner_or_admin(_get_review(db, review_id), actor, "review", "delete")
    # 별점/답글은 함께 삭제되고 태그는 연결만 해제
    db.delete(rv)
    db.commit()
    logger.info("Review %s deleted by user %s", review_id, actor.id)
    return None
