from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

RATING_MIN = 1
RATING_MAX = 5


def ensure_rating_in_range(rating: Optional[int]) -> None:
    # 별점은 저장 전에 항상 1~5 범위 검사
    if rating is None or rating < RATING_MIN or rating > RATING_MAX:
        raise HTTPException(status_code=400, detail="Rating must be between 1 and 5")


def commit_unique(db: Session, detail: str) -> None:
    """커밋하다 unique 제약에 걸리면 롤백하고 400.

    중복 여부를 미리 조회하더라도 동시에 들어온 요청끼리는 둘 다 통과할 수 있다.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=detail)
