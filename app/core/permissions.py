"""작성자/관리자 권한 판단.

리뷰, 리뷰 초안, 답글, 댓글, 별점처럼 작성자가 있는 리소스는 작성자 본인만
수정/삭제할 수 있다(관리자라도 예외 없음). 책/카테고리/태그 수정은 관리자
역할만 가능하며 리소스별 소유 개념은 없다.
"""
import enum
import logging
from typing import Any, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class Policy(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"


def authorize(owner_id: Optional[int], actor: Any, policy: Policy) -> bool:
    if policy is Policy.ADMIN:
        return getattr(actor, "role", None) == ADMIN_ROLE
    return owner_id is not None and owner_id == actor.id


def assert_admin(actor: Any) -> None:
    if not authorize(None, actor, Policy.ADMIN):
        logger.warning("Admin-only action refused for user %s", getattr(actor, "id", None))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")


def assert_owner_or_admin(resource: Any, actor: Any, noun: str, action: str = "update") -> Any:
    """존재 확인(404)을 먼저 하고, 그 다음 작성자 확인(403)."""
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{noun.capitalize()} not found")
    owner_id = getattr(resource, "author_id", None)
    if not authorize(owner_id, actor, Policy.OWNER):
        logger.warning(
            "User %s tried to %s %s %s owned by %s",
            actor.id,
            action,
            noun,
            getattr(resource, "id", None),
            owner_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this {noun}",
        )
    return resource
