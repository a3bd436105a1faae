import logging
from typing import Iterable, List, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models import Category, Tag

logger = logging.getLogger(__name__)

T = TypeVar("T", Category, Tag)


def resolve_or_create(db: Session, model: Type[T], name: str) -> T:
    """이름으로 찾고, 없으면 만든다.

    name 컬럼의 unique 제약 덕분에 동시에 같은 이름을 만들려는 요청이 있어도
    한쪽 insert만 성공한다. 진 쪽은 롤백 후 이미 만들어진 행을 다시 읽어 반환.
    이름은 앞뒤 공백을 제거해서 쓰며, 빈 이름이면 ValueError.
    """
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ValueError(f"{model.__tablename__} name must not be blank")
    row = db.query(model).filter(model.name == name).first()
    if row:
        return row
    row = model(name=name)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = db.query(model).filter(model.name == name).first()
        if existing is None:
            raise
        return existing
    db.refresh(row)
    logger.info("Created %s %r (id=%s)", model.__tablename__, name, row.id)
    return row


def resolve_tags(db: Session, names: Iterable[str]) -> List[Tag]:
    tags: List[Tag] = []
    seen = set()
    for raw in names or []:
        name = raw.strip() if isinstance(raw, str) else ""
        if not name or name in seen:
            continue
        seen.add(name)
        tags.append(resolve_or_create(db, Tag, name))
    return tags


def default_category(db: Session) -> Category:
    return resolve_or_create(db, Category, get_settings().default_category_name)
