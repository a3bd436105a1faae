from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .book import NameRequest
from .user import UserSummary


class TagResponse(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


class TagCreateRequest(NameRequest):
    pass


class TagUpdateRequest(NameRequest):
    pass


class RatingCreateRequest(BaseModel):
    book_id: int
    review_id: int
    # 범위(1~5)는 핸들러에서 검사해 400으로 응답
    rating: int


class RatingUpdateRequest(BaseModel):
    rating: int


class RatingResponse(BaseModel):
    id: int
    book_id: int
    review_id: int
    rating: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ReviewCreateRequest(BaseModel):
    book_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    rating: int
    tags: List[str] = []


class ReviewUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    rating: Optional[int] = None
    # None이면 기존 태그 유지, 리스트면 통째로 교체
    tags: Optional[List[str]] = None


class ReviewSummary(BaseModel):
    id: int
    book_id: int
    author_id: int
    title: str
    description: str
    model_config = ConfigDict(from_attributes=True)


class ReviewResponse(ReviewSummary):
    author: Optional[UserSummary] = None
    rating: Optional[RatingResponse] = None
    tags: List[TagResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewDraftResponse(ReviewSummary):
    rating: int
    tags: List[TagResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
