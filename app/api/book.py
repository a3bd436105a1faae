import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.core.auth import Actor, get_admin_actor, get_current_actor
from app.core.utils import commit_unique
from app.database import get_db
from app.models import Book, Category, Review, User
from app.schemas.book import (
    BookDetailResponse,
    BookPreview,
    BookResponse,
    BookSearchPage,
    BookUpdateRequest,
)
from app.schemas.error import MessageResponse
from app.services.naver_books import (
    SORT_ALIASES,
    NaverBooksClient,
    get_catalog_client,
    import_by_isbn,
    search_by_query,
)
from app.services.resolver import default_category, resolve_or_create

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

_UPDATABLE_FIELDS = ("title", "link", "image", "author", "publisher", "pub_date", "description")


def _review_count(db: Session, book_id: int) -> int:
    return db.query(func.count(Review.id)).filter(Review.book_id == book_id).scalar() or 0


def _detail(db: Session, book: Book) -> BookDetailResponse:
    resp = BookDetailResponse.model_validate(book)
    resp.review_count = int(_review_count(db, book.id))
    return resp


@router.get("/", response_model=BookSearchPage, summary="외부 도서 검색 (네이버)")
def search_books(
    query: Optional[str] = Query(None, description="검색어"),
    display: int = Query(10, ge=1, le=100, description="페이지 크기"),
    start: int = Query(1, ge=1, le=1000, description="1부터 시작하는 오프셋"),
    sort: str = Query("sim", description="sim(relevance)|date"),
    client: NaverBooksClient = Depends(get_catalog_client),
    actor: Actor = Depends(get_current_actor),
):
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")
    if sort not in SORT_ALIASES:
        raise HTTPException(status_code=400, detail="sort must be one of sim, relevance, date")
    page = search_by_query(client, query.strip(), display=display, start=start, sort=sort)
    return BookSearchPage(**page)


@router.post("/", response_model=BookResponse, status_code=status.HTTP_201_CREATED, summary="ISBN으로 책 가져오기")
def create_book(
    isbn: str = Query(..., min_length=1, description="가져올 책의 ISBN"),
    db: Session = Depends(get_db),
    client: NaverBooksClient = Depends(get_catalog_client),
    actor: Actor = Depends(get_current_actor),
):
    isbn = isbn.strip()
    if db.query(Book).filter(Book.isbn == isbn).first():
        raise HTTPException(status_code=400, detail="Book with this ISBN already exists")

    fields = import_by_isbn(client, isbn)
    if fields is None:
        raise HTTPException(status_code=404, detail="Book not found")

    # 제공자가 돌려준 ISBN(첫 토큰)이 요청값과 다를 수 있으므로 한 번 더 확인
    stored_isbn = fields["isbn"] or isbn
    if stored_isbn != isbn and db.query(Book).filter(Book.isbn == stored_isbn).first():
        raise HTTPException(status_code=400, detail="Book with this ISBN already exists")

    category = default_category(db)
    book = Book(
        title=fields["title"],
        link=fields["link"],
        image=fields["image"],
        author=fields["author"],
        publisher=fields["publisher"],
        pub_date=fields["pub_date"],
        isbn=stored_isbn,
        description=fields["description"],
        category_id=category.id,
    )
    db.add(book)
    commit_unique(db, "Book with this ISBN already exists")
    db.refresh(book)
    logger.info("Imported book %s (isbn=%s) by user %s", book.id, book.isbn, actor.id)
    return book


@router.get(
    "/isbn/{isbn}",
    response_model=BookDetailResponse | BookPreview,
    summary="ISBN으로 조회 (없으면 외부 검색 결과 미리보기)",
)
def get_book_by_isbn(
    isbn: str,
    db: Session = Depends(get_db),
    client: NaverBooksClient = Depends(get_catalog_client),
    actor: Actor = Depends(get_current_actor),
):
    book = db.query(Book).filter(Book.isbn == isbn).first()
    if book:
        return _detail(db, book)

    fields = import_by_isbn(client, isbn)
    if fields is None:
        raise HTTPException(status_code=404, detail="Book not found")
    # 저장하지 않는다
    return BookPreview(**fields)


@router.get("/{book_id}", response_model=BookDetailResponse)
def get_book(book_id: int, db: Session = Depends(get_db)):
    book = db.query(Book).filter(Book.id == book_id).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return _detail(db, book)


@router.patch("/{book_id}", response_model=BookResponse, summary="책 정보 수정 (관리자)")
def update_book(
    book_id: int,
    payload: BookUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    book = db.query(Book).filter(Book.id == book_id).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")

    # 값이 들어온 필드만 변경
    changes = {}
    for name in _UPDATABLE_FIELDS:
        if name in payload.model_fields_set:
            value = getattr(payload, name)
            if value is not None and value != "":
                changes[name] = value

    if payload.category_name is not None:
        category_name = payload.category_name.strip()
        if not category_name:
            raise HTTPException(status_code=400, detail="Category name must not be empty")
        changes["category_id"] = resolve_or_create(db, Category, category_name).id
    elif payload.category_id is not None:
        category = db.query(Category).filter(Category.id == payload.category_id).first()
        # 없는 카테고리를 가리키면 기본 카테고리로 대체
        changes["category_id"] = category.id if category else default_category(db).id

    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    for name, value in changes.items():
        setattr(book, name, value)
    db.commit()
    db.refresh(book)
    return book


@router.delete("/{book_id}", response_model=MessageResponse, summary="책 삭제 (관리자)")
def delete_book(
    book_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    book = db.query(Book).filter(Book.id == book_id).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    db.query(User).filter(User.favorite_book_id == book.id).update(
        {User.favorite_book_id: None}, synchronize_session=False
    )
    db.delete(book)
    db.commit()
    logger.info("Deleted book %s by admin %s", book_id, actor.id)
    return MessageResponse(message="Book deleted successfully")
