import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_admin_actor, get_current_actor
from app.core.utils import commit_unique
from app.database import get_db
from app.models import Book, Category
from app.schemas.book import CategoryResponse
from app.schemas.category import (
    CategoryBookItem,
    CategoryCreateRequest,
    CategoryDetailResponse,
    CategoryListItem,
    CategoryUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    if db.query(Category).filter(Category.name == payload.name).first():
        raise HTTPException(status_code=400, detail="Category already exists")
    category = Category(name=payload.name)
    db.add(category)
    commit_unique(db, "Category already exists")
    db.refresh(category)
    logger.info("Created category %s (%r)", category.id, category.name)
    return category


@router.get("/", response_model=list[CategoryListItem])
def list_categories(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rows = (
        db.query(Category, func.count(Book.id))
        .outerjoin(Book, Book.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name.asc())
        .all()
    )
    return [CategoryListItem(id=c.id, name=c.name, book_count=int(cnt)) for c, cnt in rows]


@router.get("/{category_id}", response_model=CategoryDetailResponse, summary="카테고리 상세 (책과 각 책의 리뷰 포함)")
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    books = []
    for b in sorted(category.books, key=lambda x: x.id):
        item = CategoryBookItem.model_validate(b)
        item.reviews.sort(key=lambda r: r.id, reverse=True)
        item.review_count = len(item.reviews)
        books.append(item)
    return CategoryDetailResponse(id=category.id, name=category.name, book_count=len(books), books=books)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    payload: CategoryUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    duplicate = (
        db.query(Category)
        .filter(Category.name == payload.name, Category.id != category_id)
        .first()
    )
    if duplicate:
        raise HTTPException(status_code=400, detail="Category name already exists")

    category.name = payload.name
    commit_unique(db, "Category name already exists")
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    books_count = db.query(func.count(Book.id)).filter(Book.category_id == category_id).scalar() or 0
    if books_count > 0:
        raise HTTPException(status_code=400, detail="Cannot delete category with books")

    db.delete(category)
    db.commit()
    logger.info("Deleted category %s by admin %s", category_id, actor.id)
    return None
