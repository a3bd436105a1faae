from pydantic import BaseModel, EmailStr, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

from ..models import UserRole
from .book import BookSummary


class BadgeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    id: int
    username: str
    image: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    image: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: EmailStr
    username: str
    image: Optional[str] = None
    role: UserRole
    primary_badge_id: Optional[int] = None
    favorite_book_id: Optional[int] = None
    primary_badge: Optional[BadgeResponse] = None
    favorite_book: Optional[BookSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    image: Optional[str] = None


class UserBadgesResponse(BaseModel):
    badges: List[BadgeResponse] = []


class PrimaryBadgeRequest(BaseModel):
    primary_badge: int


class FavoriteBookRequest(BaseModel):
    favorite_book: int
