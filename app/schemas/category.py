from typing import List

from .book import BookDetailResponse, CategoryResponse, NameRequest
from .review import ReviewResponse


class CategoryCreateRequest(NameRequest):
    pass


class CategoryUpdateRequest(NameRequest):
    pass


class CategoryListItem(CategoryResponse):
    book_count: int = 0


class CategoryBookItem(BookDetailResponse):
    # 최신 리뷰 먼저, 작성자/별점/태그 포함
    reviews: List[ReviewResponse] = []


class CategoryDetailResponse(CategoryListItem):
    books: List[CategoryBookItem] = []
