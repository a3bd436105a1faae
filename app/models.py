import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    Table,
    func,
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

# =========================
# Enum 정의
# =========================


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


# =========================
# 다대다 연결 테이블
# =========================

user_badges = Table(
    "user_badges",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("badge_id", Integer, ForeignKey("badges.id", ondelete="CASCADE"), primary_key=True),
)

review_tags = Table(
    "review_tags",
    Base.metadata,
    Column("review_id", Integer, ForeignKey("reviews.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

review_draft_tags = Table(
    "review_draft_tags",
    Base.metadata,
    Column("review_draft_id", Integer, ForeignKey("review_drafts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


# =========================
# User / Badge
# =========================


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    image = Column(String(512), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)

    primary_badge_id = Column(Integer, ForeignKey("badges.id", ondelete="SET NULL"), nullable=True)
    favorite_book_id = Column(Integer, ForeignKey("books.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # 관계
    badges = relationship("Badge", secondary=user_badges, back_populates="users")
    primary_badge = relationship("Badge", foreign_keys=[primary_badge_id])
    favorite_book = relationship("Book", foreign_keys=[favorite_book_id])
    reviews = relationship(
        "Review",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    review_drafts = relationship(
        "ReviewDraft",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    replies = relationship(
        "Reply",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    comments = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan",
    )


class Badge(Base):
    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(512), nullable=True)

    users = relationship("User", secondary=user_badges, back_populates="badges")


# =========================
# Category / Tag / Book
# =========================


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    books = relationship("Book", back_populates="category")


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    reviews = relationship("Review", secondary=review_tags, back_populates="tags")
    review_drafts = relationship("ReviewDraft", secondary=review_draft_tags, back_populates="tags")


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    link = Column(String(512), nullable=True)
    image = Column(String(512), nullable=True)
    author = Column(String(255), nullable=True)
    publisher = Column(String(255), nullable=True)
    pub_date = Column(Date, nullable=True)
    # ISBN은 INT가 아니라 문자열로
    isbn = Column(String(20), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # 관계
    category = relationship("Category", back_populates="books")
    reviews = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )
    review_drafts = relationship(
        "ReviewDraft",
        back_populates="book",
        cascade="all, delete-orphan",
    )
    ratings = relationship(
        "Rating",
        back_populates="book",
        cascade="all, delete-orphan",
    )


# =========================
# Review / ReviewDraft / Rating
# =========================


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    book = relationship("Book", back_populates="reviews")
    author = relationship("User", back_populates="reviews")
    tags = relationship("Tag", secondary=review_tags, back_populates="reviews")
    # 리뷰 1개당 별점 1개
    rating = relationship(
        "Rating",
        back_populates="review",
        uselist=False,
        cascade="all, delete-orphan",
    )
    replies = relationship(
        "Reply",
        back_populates="review",
        cascade="all, delete-orphan",
    )


class ReviewDraft(Base):
    __tablename__ = "review_drafts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # 초안은 Rating 행 대신 자체 컬럼에 별점을 보관
    rating = Column(Integer, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    book = relationship("Book", back_populates="review_drafts")
    author = relationship("User", back_populates="review_drafts")
    tags = relationship("Tag", secondary=review_draft_tags, back_populates="review_drafts")


class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), unique=True, nullable=False)
    rating = Column(Integer, nullable=False)  # 1~5

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    book = relationship("Book", back_populates="ratings")
    review = relationship("Review", back_populates="rating")


# =========================
# Reply / Comment
# =========================


class Reply(Base):
    __tablename__ = "replies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reply = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    review = relationship("Review", back_populates="replies")
    author = relationship("User", back_populates="replies")
    comments = relationship(
        "Comment",
        back_populates="reply",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reply_id = Column(Integer, ForeignKey("replies.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    comment = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    reply = relationship("Reply", back_populates="comments")
    author = relationship("User", back_populates="comments")
