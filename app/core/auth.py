from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User, UserRole
from .permissions import assert_admin
from .security import decode_token

# auto_error=False: 헤더 누락도 403이 아니라 401로 응답하기 위해 직접 처리
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    """요청을 보낸 인증된 사용자. 핸들러에 명시적으로 전달된다."""

    id: int
    role: str = UserRole.USER.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Actor:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    payload = decode_token(credentials.credentials, expected_type="access")
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalid or expired")
    # role은 토큰이 아니라 DB 기준 (권한 변경이 즉시 반영되도록)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return Actor(id=user.id, role=user.role.value if isinstance(user.role, UserRole) else str(user.role))


def get_admin_actor(actor: Actor = Depends(get_current_actor)) -> Actor:
    assert_admin(actor)
    return actor
