from app.models.post import Post
from app.models.story import Story
from app.models.user import User


def test_get_profile(client, make_user):
    ann_id, ann = make_user("ann")
    resp = client.get(f"/api/v1/users/{ann_id}", headers=ann)
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "ann"
    assert body["is_verified"] is True
    assert body["followers_count"] == 0
    assert "hashed_password" not in body

    assert client.get("/api/v1/users/9999", headers=ann).status_code == 404


def test_update_profile_partial(client, make_user):
    _, ann = make_user("ann")
    resp = client.put("/api/v1/users/profile", json={"bio": "hi there", "website": "https://ann.dev"}, headers=ann)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["bio"] == "hi there"
    assert user["website"] == "https://ann.dev"
    assert user["name"] == "Ann"

    renamed = client.put("/api/v1/users/profile", json={"name": "  Ann B  "}, headers=ann).json()["user"]
    assert renamed["name"] == "Ann B"
    assert renamed["bio"] == "hi there"


def test_update_profile_validation(client, make_user):
    _, ann = make_user("ann")
    assert client.put("/api/v1/users/profile", json={"bio": "x" * 151}, headers=ann).status_code == 422
    assert client.put("/api/v1/users/profile", json={"name": "  "}, headers=ann).status_code == 422


def test_delete_account_cascades(client, make_user, db):
    ann_id, ann = make_user("ann")
    _, bob = make_user("bob")
    client.post("/api/v1/posts/", json={"image": "http://img/p.jpg"}, headers=ann)
    client.post("/api/v1/stories/", json={"image": "http://img/s.jpg"}, headers=ann)

    resp = client.delete("/api/v1/users/delete-account", headers=ann)
    assert resp.status_code == 200

    assert db.query(User).filter(User.id == ann_id).first() is None
    assert db.query(Post).count() == 0
    assert db.query(Story).count() == 0
    assert client.get("/api/v1/auth/me", headers=ann).status_code == 401
    assert client.get(f"/api/v1/users/{ann_id}", headers=bob).status_code == 404


def test_root(client):
    assert client.get("/").status_code == 200
