import pytest


@pytest.fixture
def reply(client, user, make_review):
    review = make_review(user)
    r = client.post("/replies/", json={"review_id": review["id"], "reply": "공감합니다"}, headers=user["headers"])
    assert r.status_code == 201
    return r.json()


def test_create_reply(client, user, reply):
    assert reply["author_id"] == user["id"]
    assert reply["reply"] == "공감합니다"
    assert reply["author"]["id"] == user["id"]
    assert reply["comments"] == []


def test_reply_to_missing_review(client, user):
    r = client.post("/replies/", json={"review_id": 987654321, "reply": "x"}, headers=user["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "Review not found"


def test_list_replies_newest_first(client, user, other_user, make_review):
    review = make_review(user)
    ids = []
    for text, actor in (("첫번째", user), ("두번째", other_user)):
        r = client.post("/replies/", json={"review_id": review["id"], "reply": text}, headers=actor["headers"])
        ids.append(r.json()["id"])
    listed = client.get(f"/replies/review/{review['id']}").json()
    assert [rp["id"] for rp in listed] == list(reversed(ids))


def test_update_and_delete_reply(client, user, other_user, admin, reply):
    for actor in (other_user, admin):
        r = client.patch(f"/replies/{reply['id']}", json={"reply": "해킹"}, headers=actor["headers"])
        assert r.status_code == 403
        assert r.json()["message"] == "Not authorized to update this reply"
        r = client.delete(f"/replies/{reply['id']}", headers=actor["headers"])
        assert r.status_code == 403
        assert r.json()["message"] == "Not authorized to delete this reply"

    r = client.patch(f"/replies/{reply['id']}", json={"reply": "수정됨"}, headers=user["headers"])
    assert r.status_code == 200
    assert r.json()["reply"] == "수정됨"

    r = client.delete(f"/replies/{reply['id']}", headers=user["headers"])
    assert r.status_code == 200
    assert r.json() == {"message": "Reply deleted successfully"}
    assert client.get(f"/replies/{reply['id']}").status_code == 404


def test_comment_lifecycle(client, user, other_user, reply):
    r = client.post("/comments/", json={"reply_id": reply["id"], "comment": "저도요"}, headers=other_user["headers"])
    assert r.status_code == 201
    comment = r.json()
    assert comment["author_id"] == other_user["id"]
    assert comment["reply"]["id"] == reply["id"]

    r = client.put(f"/comments/{comment['id']}", json={"comment": "put"}, headers=other_user["headers"])
    assert r.status_code == 200
    assert r.json()["comment"] == "put"
    r = client.patch(f"/comments/{comment['id']}", json={"comment": "patch"}, headers=other_user["headers"])
    assert r.json()["comment"] == "patch"

    r = client.patch(f"/comments/{comment['id']}", json={"comment": "x"}, headers=user["headers"])
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to update this comment"

    detail = client.get(f"/replies/{reply['id']}").json()
    assert [c["id"] for c in detail["comments"]] == [comment["id"]]

    r = client.delete(f"/comments/{comment['id']}", headers=other_user["headers"])
    assert r.status_code == 200
    assert r.json() == {"message": "Comment deleted successfully"}
    assert client.get(f"/comments/{comment['id']}").status_code == 404


def test_only_author_may_modify_comment(client, user, other_user, admin, reply):
    comment = client.post(
        "/comments/", json={"reply_id": reply["id"], "comment": "원래 댓글"}, headers=other_user["headers"]
    ).json()

    for actor in (user, admin):
        for method in (client.put, client.patch):
            r = method(f"/comments/{comment['id']}", json={"comment": "바꿈"}, headers=actor["headers"])
            assert r.status_code == 403
            assert r.json()["message"] == "Not authorized to update this comment"
        r = client.delete(f"/comments/{comment['id']}", headers=actor["headers"])
        assert r.status_code == 403
        assert r.json()["message"] == "Not authorized to delete this comment"

    after = client.get(f"/comments/{comment['id']}")
    assert after.status_code == 200
    assert after.json()["comment"] == "원래 댓글"


def test_comment_on_missing_reply(client, user):
    r = client.post("/comments/", json={"reply_id": 987654321, "comment": "x"}, headers=user["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "Reply not found"


def test_deleting_reply_removes_its_comments(client, user, other_user, reply):
    c = client.post("/comments/", json={"reply_id": reply["id"], "comment": "곧 사라짐"}, headers=other_user["headers"]).json()
    client.delete(f"/replies/{reply['id']}", headers=user["headers"])
    assert client.get(f"/comments/{c['id']}").status_code == 404
    assert client.get(f"/comments/reply/{reply['id']}").json() == []
