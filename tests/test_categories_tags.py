import uuid

import pytest
from fastapi import HTTPException

from app.core.utils import commit_unique
from app.models import Book, Category, Tag
from app.services.resolver import resolve_or_create, resolve_tags


def _name(prefix):
    return f"{prefix}-{uuid.uuid4().hex[:6]}"


def test_category_resolver_is_idempotent(db_session):
    name = _name("resolver")
    first = resolve_or_create(db_session, Category, name)
    second = resolve_or_create(db_session, Category, name)
    assert first.id == second.id
    assert db_session.query(Category).filter(Category.name == name).count() == 1


def test_resolver_is_case_sensitive(db_session):
    name = _name("Case")
    upper = resolve_or_create(db_session, Tag, name)
    lower = resolve_or_create(db_session, Tag, name.lower())
    assert upper.id != lower.id


def test_resolve_tags_skips_blanks_and_duplicates(db_session):
    a, b = _name("a"), _name("b")
    tags = resolve_tags(db_session, [a, " ", b, a])
    assert [t.name for t in tags] == [a, b]


def test_category_crud(client, admin, user):
    name = _name("소설")
    r = client.post("/categories/", json={"name": name}, headers=admin["headers"])
    assert r.status_code == 201
    cid = r.json()["id"]

    dup = client.post("/categories/", json={"name": name}, headers=admin["headers"])
    assert dup.status_code == 400
    assert dup.json()["message"] == "Category already exists"

    assert client.post("/categories/", json={"name": _name("x")}, headers=user["headers"]).status_code == 403

    listed = client.get("/categories/", headers=user["headers"])
    assert listed.status_code == 200
    names = [c["name"] for c in listed.json()]
    assert names == sorted(names)
    assert name in names

    renamed = _name("에세이")
    r = client.patch(f"/categories/{cid}", json={"name": renamed}, headers=admin["headers"])
    assert r.status_code == 200
    assert r.json()["name"] == renamed

    other = client.post("/categories/", json={"name": _name("other")}, headers=admin["headers"]).json()
    clash = client.patch(f"/categories/{other['id']}", json={"name": renamed}, headers=admin["headers"])
    assert clash.status_code == 400
    assert clash.json()["message"] == "Category name already exists"

    assert client.patch("/categories/987654", json={"name": "z"}, headers=admin["headers"]).status_code == 404

    assert client.delete(f"/categories/{cid}", headers=admin["headers"]).status_code == 204
    assert client.get(f"/categories/{cid}", headers=user["headers"]).status_code == 404
    assert client.delete(f"/categories/{cid}", headers=admin["headers"]).status_code == 404


def test_category_with_books_cannot_be_deleted(client, admin, make_book, db_session):
    book = make_book()
    name = _name("역사")
    client.patch(f"/books/{book['id']}", json={"category_name": name}, headers=admin["headers"])
    category = db_session.query(Category).filter(Category.name == name).one()

    r = client.delete(f"/categories/{category.id}", headers=admin["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete category with books"

    detail = client.get(f"/categories/{category.id}", headers=admin["headers"])
    assert detail.status_code == 200
    assert detail.json()["book_count"] == 1
    assert detail.json()["books"][0]["id"] == book["id"]
    assert db_session.query(Book).filter(Book.id == book["id"]).one().category_id == category.id


def test_tag_crud(client, admin, user):
    name = _name("감동")
    r = client.post("/tags/", json={"name": name}, headers=admin["headers"])
    assert r.status_code == 201
    tid = r.json()["id"]

    assert client.post("/tags/", json={"name": name}, headers=admin["headers"]).status_code == 400
    assert client.post("/tags/", json={"name": _name("t")}, headers=user["headers"]).status_code == 403

    assert client.get(f"/tags/{tid}", headers=user["headers"]).json()["name"] == name
    names = [t["name"] for t in client.get("/tags/", headers=user["headers"]).json()]
    assert names == sorted(names)

    put_name = _name("put")
    assert client.put(f"/tags/{tid}", json={"name": put_name}, headers=admin["headers"]).json()["name"] == put_name
    patch_name = _name("patch")
    assert client.patch(f"/tags/{tid}", json={"name": patch_name}, headers=admin["headers"]).json()["name"] == patch_name
    assert client.patch(f"/tags/{tid}", json={"name": "x"}, headers=user["headers"]).status_code == 403

    other = client.post("/tags/", json={"name": _name("o")}, headers=admin["headers"]).json()
    assert client.patch(f"/tags/{other['id']}", json={"name": patch_name}, headers=admin["headers"]).status_code == 400

    assert client.delete(f"/tags/{tid}", headers=admin["headers"]).status_code == 204
    assert client.get(f"/tags/{tid}", headers=user["headers"]).status_code == 404


def test_deleting_tag_detaches_it_from_reviews(client, admin, user, make_review):
    name = _name("detach")
    review = make_review(user, tags=[name, "유지"])
    tag_id = next(t["id"] for t in review["tags"] if t["name"] == name)

    assert client.delete(f"/tags/{tag_id}", headers=admin["headers"]).status_code == 204
    after = client.get(f"/reviews/{review['id']}", headers=user["headers"]).json()
    assert [t["name"] for t in after["tags"]] == ["유지"]


def test_resolver_refuses_blank_names(db_session):
    before = db_session.query(Category).count()
    with pytest.raises(ValueError):
        resolve_or_create(db_session, Category, "   ")
    with pytest.raises(ValueError):
        resolve_or_create(db_session, Tag, "")
    assert db_session.query(Category).count() == before
    assert db_session.query(Category).filter(Category.name == "").count() == 0


def test_resolver_strips_surrounding_whitespace(db_session):
    name = _name("공백")
    padded = resolve_or_create(db_session, Category, f"  {name} ")
    assert padded.name == name
    assert resolve_or_create(db_session, Category, name).id == padded.id


def test_blank_category_name_on_book_update(client, admin, make_book, db_session):
    book = make_book()
    r = client.patch(f"/books/{book['id']}", json={"category_name": "   "}, headers=admin["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "Category name must not be empty"
    assert db_session.query(Category).filter(Category.name == "").count() == 0
    assert client.get(f"/books/{book['id']}").json()["category_id"] == book["category_id"]


def test_unique_violation_on_commit_is_bad_request(db_session):
    name = _name("경합")
    db_session.add(Category(name=name))
    db_session.commit()

    db_session.add(Category(name=name))
    with pytest.raises(HTTPException) as exc:
        commit_unique(db_session, "Category already exists")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Category already exists"
    # 롤백 후 세션은 계속 사용 가능
    assert db_session.query(Category).filter(Category.name == name).count() == 1


def test_admin_names_are_stripped_like_review_tags(client, admin, user, make_review):
    name = _name("소설")
    r = client.post("/tags/", json={"name": f"  {name} "}, headers=admin["headers"])
    assert r.status_code == 201
    assert r.json()["name"] == name

    review = make_review(user, tags=[name])
    assert [t["id"] for t in review["tags"]] == [r.json()["id"]]

    assert client.post("/tags/", json={"name": "   "}, headers=admin["headers"]).status_code == 400
    renamed = _name("시")
    r = client.patch(f"/tags/{r.json()['id']}", json={"name": f" {renamed}"}, headers=admin["headers"])
    assert r.json()["name"] == renamed

    cat_name = _name("에세이")
    r = client.post("/categories/", json={"name": f" {cat_name}  "}, headers=admin["headers"])
    assert r.status_code == 201
    assert r.json()["name"] == cat_name
    dup = client.post("/categories/", json={"name": cat_name}, headers=admin["headers"])
    assert dup.status_code == 400
    assert client.post("/categories/", json={"name": " "}, headers=admin["headers"]).status_code == 400


def test_category_detail_nests_reviews(client, admin, user, other_user, make_book, make_review):
    book = make_book()
    name = _name("추리")
    client.patch(f"/books/{book['id']}", json={"category_name": name}, headers=admin["headers"])
    older = make_review(user, book_id=book["id"], rating=3, tags=["반전"])
    newer = make_review(other_user, book_id=book["id"], rating=5, tags=[])

    category_id = client.get(f"/books/{book['id']}").json()["category_id"]
    detail = client.get(f"/categories/{category_id}", headers=user["headers"]).json()
    item = detail["books"][0]
    assert item["review_count"] == 2
    assert [rv["id"] for rv in item["reviews"]] == [newer["id"], older["id"]]
    first, second = item["reviews"]
    assert first["author"]["id"] == other_user["id"]
    assert first["rating"]["rating"] == 5
    assert second["author"]["id"] == user["id"]
    assert [t["name"] for t in second["tags"]] == ["반전"]
