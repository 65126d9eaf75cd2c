from app.models.post import Comment, Post
from app.models.social import CommentLike, PostLike


def create_post(client, headers, **fields):
    body = {"image": "http://img/p.jpg", "caption": "hello", "location": "Dhaka"}
    body.update(fields)
    resp = client.post("/api/v1/posts/", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_and_read_post(client, make_user):
    ann_id, ann = make_user("ann")
    post = create_post(client, ann)
    assert post["user"]["id"] == ann_id
    assert post["caption"] == "hello"
    assert post["likes"] == [] and post["comments"] == []

    fetched = client.get(f"/api/v1/posts/{post['id']}", headers=ann)
    assert fetched.status_code == 200
    assert fetched.json()["location"] == "Dhaka"
    assert client.get("/api/v1/posts/9999", headers=ann).status_code == 404


def test_feed_is_newest_first_and_paginated(client, make_user):
    _, ann = make_user("ann")
    ids = [create_post(client, ann, caption=str(i))["id"] for i in range(3)]

    feed = client.get("/api/v1/posts/", headers=ann).json()
    assert [p["id"] for p in feed] == list(reversed(ids))

    page = client.get("/api/v1/posts/?skip=1&limit=1", headers=ann).json()
    assert [p["id"] for p in page] == [ids[1]]


def test_post_requires_image(client, make_user):
    _, ann = make_user("ann")
    resp = client.post("/api/v1/posts/", json={"caption": "no image"}, headers=ann)
    assert resp.status_code == 422
    assert resp.json()["errors"]


def test_only_owner_can_delete_post(client, make_user, db):
    _, ann = make_user("ann")
    _, bob = make_user("bob")
    post = create_post(client, ann)
    client.post(f"/api/v1/posts/{post['id']}/like", headers=bob)
    comment = client.post("/api/v1/comments/", json={"post_id": post["id"], "text": "hi"}, headers=bob).json()
    client.post(f"/api/v1/comments/{comment['id']}/like", headers=ann)

    assert client.delete(f"/api/v1/posts/{post['id']}", headers=bob).status_code == 403
    assert client.delete(f"/api/v1/posts/{post['id']}", headers=ann).status_code == 200

    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0
    assert db.query(PostLike).count() == 0
    assert db.query(CommentLike).count() == 0


def test_comments_on_post(client, make_user):
    _, ann = make_user("ann")
    bob_id, bob = make_user("bob")
    post = create_post(client, ann)

    created = client.post("/api/v1/comments/", json={"post_id": post["id"], "text": "  first  "}, headers=bob)
    assert created.status_code == 201
    assert created.json()["text"] == "first"
    assert created.json()["user"]["id"] == bob_id
    client.post("/api/v1/comments/", json={"post_id": post["id"], "text": "second"}, headers=ann)

    listed = client.get(f"/api/v1/comments/post/{post['id']}", headers=ann).json()
    assert [c["text"] for c in listed] == ["second", "first"]

    embedded = client.get(f"/api/v1/posts/{post['id']}", headers=ann).json()["comments"]
    assert [c["text"] for c in embedded] == ["first", "second"]


def test_comment_on_missing_post(client, make_user):
    _, ann = make_user("ann")
    resp = client.post("/api/v1/comments/", json={"post_id": 9999, "text": "hi"}, headers=ann)
    assert resp.status_code == 404


def test_blank_comment_rejected(client, make_user):
    _, ann = make_user("ann")
    post = create_post(client, ann)
    resp = client.post("/api/v1/comments/", json={"post_id": post["id"], "text": "   "}, headers=ann)
    assert resp.status_code == 422


def test_only_author_can_delete_comment(client, make_user):
    _, ann = make_user("ann")
    _, bob = make_user("bob")
    post = create_post(client, ann)
    comment = client.post("/api/v1/comments/", json={"post_id": post["id"], "text": "hi"}, headers=bob).json()

    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=ann).status_code == 403
    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=bob).status_code == 200
    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=bob).status_code == 404
