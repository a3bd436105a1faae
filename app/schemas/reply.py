from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .review import ReviewSummary
from .user import UserSummary


class ReplyCreateRequest(BaseModel):
    review_id: int
    reply: str = Field(..., min_length=1, max_length=2000)


class ReplyUpdateRequest(BaseModel):
    reply: str = Field(..., min_length=1, max_length=2000)


class CommentCreateRequest(BaseModel):
    reply_id: int
    comment: str = Field(..., min_length=1, max_length=2000)


class CommentUpdateRequest(BaseModel):
    comment: str = Field(..., min_length=1, max_length=2000)


class ReplySummary(BaseModel):
    id: int
    review_id: int
    author_id: int
    reply: str
    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    id: int
    reply_id: int
    author_id: int
    comment: str
    author: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CommentDetailResponse(CommentResponse):
    reply: Optional[ReplySummary] = None


class ReplyResponse(ReplySummary):
    author: Optional[UserSummary] = None
    review: Optional[ReviewSummary] = None
    comments: List[CommentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
