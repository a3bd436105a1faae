from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_current_actor
from app.core.permissions import assert_owner_or_admin
from app.core.utils import ensure_rating_in_range
from app.database import get_db
from app.models import Book, Rating, Review
from app.schemas.review import RatingCreateRequest, RatingResponse, RatingUpdateRequest

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("/", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    ensure_rating_in_range(payload.rating)

    if not db.query(Book.id).filter(Book.id == payload.book_id).first():
        raise HTTPException(status_code=404, detail="Book not found")

    review = db.query(Review).filter(Review.id == payload.review_id).first()
    # 별점의 작성자는 리뷰 작성자
    assert_owner_or_admin(review, actor, "review", "rate")
    if review.book_id != payload.book_id:
        raise HTTPException(status_code=400, detail="Review does not belong to this book")
    if review.rating is not None:
        raise HTTPException(status_code=400, detail="Rating already exists for this review")

    rating = Rating(book_id=payload.book_id, review_id=review.id, rating=payload.rating)
    db.add(rating)
    db.commit()
    db.refresh(rating)
    return rating


@router.put("/{rating_id}", response_model=RatingResponse)
def update_rating(
    rating_id: int,
    payload: RatingUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    ensure_rating_in_range(payload.rating)

    rating = db.query(Rating).filter(Rating.id == rating_id).first()
    if not rating:
        raise HTTPException(status_code=404, detail="Rating not found")
    assert_owner_or_admin(rating.review, actor, "rating", "update")

    rating.rating = payload.rating
    db.commit()
    db.refresh(rating)
    return rating
