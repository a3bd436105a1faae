import uuid

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.database import get_db
from app.models import Base, User, UserRole
from app.services.naver_books import NaverBooksClient, get_catalog_client

# In-memory SQLite shared across threads/connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base.metadata.create_all(bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
_client = TestClient(app)


def naver_item(isbn, title="<b>죽음</b> 1", description="<b>죽음</b>에 관한 <i>소설</i>", pubdate="20190520", **extra):
    item = {
        "title": title,
        "link": f"https://search.shopping.naver.com/book/catalog/{isbn.split()[0]}",
        "image": "https://shopping-phinf.pstatic.net/sample.jpg",
        "author": "베르나르 베르베르",
        "discount": "14220",
        "publisher": "열린책들",
        "pubdate": pubdate,
        "isbn": isbn,
        "description": description,
    }
    item.update(extra)
    return item


class FakeNaverCatalog:
    """네이버 검색 API 흉내. httpx.MockTransport로 실제 클라이언트 코드를 그대로 탄다."""

    def __init__(self):
        self.items = []
        self.fail = False
        self.requests = []

    def add(self, item):
        self.items.append(item)
        return item

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(502, json={"errorMessage": "upstream down"})
        params = request.url.params
        if request.url.path.endswith("/book_adv.json"):
            isbn = params.get("d_isbn", "")
            matched = [i for i in self.items if isbn in i["isbn"].split()][: int(params.get("display", 1))]
            return httpx.Response(200, json={"total": len(matched), "start": 1, "display": len(matched), "items": matched})
        query = params.get("query", "")
        start = int(params.get("start", 1))
        display = int(params.get("display", 10))
        matched = [i for i in self.items if query in i["title"]]
        page = matched[start - 1 : start - 1 + display]
        return httpx.Response(200, json={"total": len(matched), "start": start, "display": len(page), "items": page})

    def client(self) -> NaverBooksClient:
        return NaverBooksClient("test-id", "test-secret", transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def catalog():
    fake = FakeNaverCatalog()
    app.dependency_overrides[get_catalog_client] = fake.client
    yield fake
    app.dependency_overrides.pop(get_catalog_client, None)


@pytest.fixture
def client():
    return _client


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def _register_and_login(role: UserRole = UserRole.USER):
    email = f"user_{uuid.uuid4().hex[:8]}@example.com"
    pw = "Pw123456!"
    r = _client.post("/auth/register", json={"email": email, "password": pw, "username": "reader"})
    assert r.status_code == 201
    user_id = r.json()["id"]
    if role is UserRole.ADMIN:
        db = TestingSessionLocal()
        try:
            db.query(User).filter(User.id == user_id).update({User.role: UserRole.ADMIN})
            db.commit()
        finally:
            db.close()
    lg = _client.post("/auth/login", json={"email": email, "password": pw})
    assert lg.status_code == 200
    token = lg.json()["access_token"]
    return {"id": user_id, "email": email, "password": pw, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def make_user():
    return _register_and_login


@pytest.fixture
def user():
    return _register_and_login()


@pytest.fixture
def other_user():
    return _register_and_login()


@pytest.fixture
def admin():
    return _register_and_login(UserRole.ADMIN)


@pytest.fixture
def make_book(catalog, user):
    def _make(isbn=None, **fields):
        isbn = isbn or str(9790000000000 + uuid.uuid4().int % 10**9)
        catalog.add(naver_item(isbn, **fields))
        r = _client.post("/books/", params={"isbn": isbn}, headers=user["headers"])
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_review(make_book):
    def _make(author, book_id=None, rating=4, tags=("소설",), **fields):
        if book_id is None:
            book_id = make_book()["id"]
        body = {
            "book_id": book_id,
            "title": fields.get("title", "좋은 책"),
            "description": fields.get("description", "재미있게 읽었습니다"),
            "rating": rating,
            "tags": list(tags),
        }
        r = _client.post("/reviews/", json=body, headers=author["headers"])
        assert r.status_code == 201, r.text
        return r.json()

    return _make
