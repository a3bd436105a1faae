from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator


class CategoryResponse(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


class BookSummary(BaseModel):
    id: int
    title: str
    isbn: str
    image: Optional[str] = None
    author: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class BookResponse(BaseModel):
    id: int
    title: str
    link: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    pub_date: Optional[date] = None
    isbn: str
    description: Optional[str] = None
    category_id: int
    category: Optional[CategoryResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BookDetailResponse(BookResponse):
    # 리뷰 수 (상세/ISBN 조회에서 제공)
    review_count: int = 0


class BookPreview(BaseModel):
    """외부 검색 결과를 로컬 Book 형태로 변환한 것 (DB에 저장되지 않음)."""

    title: str
    link: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    pub_date: Optional[date] = None
    isbn: str
    description: Optional[str] = None
    price: int | str | None = None
    discount: int | str | None = None
    category: Optional[CategoryResponse] = None
    reviews: List[int] = []


class BookSearchPage(BaseModel):
    total: int
    start: int
    display: int
    items: List[BookPreview]


class BookUpdateRequest(BaseModel):
    title: Optional[str] = None
    link: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    pub_date: Optional[date] = Field(None, description="YYYY-MM-DD")
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = Field(None, description="없으면 새로 생성")


class NameRequest(BaseModel):
    """카테고리/태그 이름 입력. 리뷰 태그와 같은 규칙으로 앞뒤 공백을 제거한다."""

    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v
