import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import Actor, get_admin_actor, get_current_actor
from app.core.utils import commit_unique
from app.database import get_db
from app.models import Tag
from app.schemas.review import TagCreateRequest, TagResponse, TagUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    payload: TagCreateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    if db.query(Tag).filter(Tag.name == payload.name).first():
        raise HTTPException(status_code=400, detail="Tag already exists")
    tag = Tag(name=payload.name)
    db.add(tag)
    commit_unique(db, "Tag already exists")
    db.refresh(tag)
    logger.info("Created tag %s (%r)", tag.id, tag.name)
    return tag


@router.get("/", response_model=list[TagResponse])
def list_tags(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return db.query(Tag).order_by(Tag.name.asc()).all()


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


@router.put("/{tag_id}", response_model=TagResponse)
@router.patch("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    payload: TagUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")

    duplicate = db.query(Tag).filter(Tag.name == payload.name, Tag.id != tag_id).first()
    if duplicate:
        raise HTTPException(status_code=400, detail="Tag name already exists")

    tag.name = payload.name
    commit_unique(db, "Tag name already exists")
    db.refresh(tag)
    return tag


@router.delete("/{tag_id}", status_code=204)
def delete_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_admin_actor),
):
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    # 리뷰/초안과의 연결 행은 함께 지워지고 리뷰 자체는 남는다
    db.delete(tag)
    db.commit()
    logger.info("Deleted tag %s by admin %s", tag_id, actor.id)
    return None
