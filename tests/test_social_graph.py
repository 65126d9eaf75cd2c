from sqlalchemy.orm import Query

from app.models.social import Follow, PostLike, StoryView
from app.models.user import User
from app.services.social_graph import add_member, count_members, toggle_membership


def follow(client, headers, user_id):
    return client.post(f"/api/v1/users/{user_id}/follow", headers=headers)


def test_follow_toggle_is_an_involution(client, make_user):
    ann_id, ann = make_user("ann")
    bob_id, bob = make_user("bob")

    first = follow(client, ann, bob_id)
    assert first.status_code == 200
    assert first.json() == {
        "message": "Followed successfully",
        "is_following": True,
        "following_count": 1,
        "followers_count": 1,
    }

    profile = client.get(f"/api/v1/users/{bob_id}", headers=bob).json()
    assert [u["id"] for u in profile["followers"]] == [ann_id]
    assert profile["following"] == []
    ann_profile = client.get(f"/api/v1/users/{ann_id}", headers=bob).json()
    assert [u["id"] for u in ann_profile["following"]] == [bob_id]

    second = follow(client, ann, bob_id).json()
    assert second["is_following"] is False
    assert second["following_count"] == 0
    assert second["followers_count"] == 0

    profile = client.get(f"/api/v1/users/{bob_id}", headers=bob).json()
    assert profile["followers"] == []


def test_mutual_follows_are_independent(client, make_user):
    ann_id, ann = make_user("ann")
    bob_id, bob = make_user("bob")

    follow(client, ann, bob_id)
    back = follow(client, bob, ann_id).json()
    assert back["following_count"] == 1
    assert back["followers_count"] == 1

    follow(client, ann, bob_id)
    profile = client.get(f"/api/v1/users/{ann_id}", headers=ann).json()
    assert profile["followers_count"] == 1
    assert profile["following_count"] == 0


def test_cannot_follow_self(client, make_user, db):
    ann_id, ann = make_user("ann")
    resp = follow(client, ann, ann_id)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_TARGET"
    assert db.query(Follow).count() == 0


def test_follow_unknown_user(client, make_user):
    _, ann = make_user("ann")
    assert follow(client, ann, 9999).status_code == 404


def test_follow_requires_auth(client, make_user):
    bob_id, _ = make_user("bob")
    assert follow(client, {}, bob_id).status_code == 401


def test_post_like_double_toggle(client, make_user):
    _, ann = make_user("ann")
    bob_id, bob = make_user("bob")
    post_id = client.post("/api/v1/posts/", json={"image": "http://img/1.jpg"}, headers=ann).json()["id"]

    liked = client.post(f"/api/v1/posts/{post_id}/like", headers=bob).json()
    assert liked["is_liked"] is True
    assert liked["likes"] == 1
    assert [u["id"] for u in liked["post"]["likes"]] == [bob_id]
    assert liked["post"]["likes_count"] == 1

    unliked = client.post(f"/api/v1/posts/{post_id}/like", headers=bob).json()
    assert unliked["is_liked"] is False
    assert unliked["likes"] == 0
    assert unliked["post"]["likes"] == []

    assert client.post("/api/v1/posts/9999/like", headers=bob).status_code == 404


def test_comment_like_double_toggle(client, make_user):
    _, ann = make_user("ann")
    _, bob = make_user("bob")
    post_id = client.post("/api/v1/posts/", json={"image": "http://img/1.jpg"}, headers=ann).json()["id"]
    comment_id = client.post(
        "/api/v1/comments/", json={"post_id": post_id, "text": "nice"}, headers=ann
    ).json()["id"]

    assert client.post(f"/api/v1/comments/{comment_id}/like", headers=bob).json()["likes"] == 1
    assert client.post(f"/api/v1/comments/{comment_id}/like", headers=ann).json()["likes"] == 2
    undone = client.post(f"/api/v1/comments/{comment_id}/like", headers=bob).json()
    assert undone == {"message": "Comment unliked", "is_liked": False, "likes": 1}


def test_toggle_membership_on_edge_table(make_user, db):
    ann_id, _ = make_user("ann")
    bob_id, _ = make_user("bob")

    assert toggle_membership(db, Follow, follower_id=ann_id, followee_id=bob_id) is True
    assert count_members(db, Follow, followee_id=bob_id) == 1
    assert toggle_membership(db, Follow, follower_id=ann_id, followee_id=bob_id) is False
    assert count_members(db, Follow, followee_id=bob_id) == 0
    assert toggle_membership(db, Follow, follower_id=ann_id, followee_id=bob_id) is True
    assert count_members(db, Follow) == 1


def test_add_member_rejects_duplicates(client, make_user, db):
    ann_id, ann = make_user("ann")
    post_id = client.post("/api/v1/posts/", json={"image": "http://img/1.jpg"}, headers=ann).json()["id"]

    assert add_member(db, PostLike, post_id=post_id, user_id=ann_id) is True
    assert add_member(db, PostLike, post_id=post_id, user_id=ann_id) is False
    assert count_members(db, PostLike, post_id=post_id) == 1


def test_story_view_is_idempotent(client, make_user, db):
    _, ann = make_user("ann")
    bob_id, bob = make_user("bob")
    story_id = client.post("/api/v1/stories/", json={"image": "http://img/s.jpg"}, headers=ann).json()["id"]

    for _ in range(3):
        resp = client.post(f"/api/v1/stories/{story_id}/view", headers=bob)
        assert resp.status_code == 200

    assert count_members(db, StoryView, story_id=story_id) == 1
    stories = client.get("/api/v1/stories/", headers=ann).json()
    assert [u["id"] for u in stories[0]["stories"][0]["views"]] == [bob_id]


def test_follow_edges_removed_with_account(client, make_user, db):
    ann_id, ann = make_user("ann")
    bob_id, bob = make_user("bob")
    follow(client, ann, bob_id)
    follow(client, bob, ann_id)

    assert client.delete("/api/v1/users/delete-account", headers=bob).status_code == 200
    assert db.query(Follow).count() == 0
    db.expire_all()
    ann_user = db.query(User).filter(User.id == ann_id).one()
    assert ann_user.followers_count == 0
    assert ann_user.following_count == 0


def test_toggle_that_loses_insert_race_reports_present(make_user, db, monkeypatch):
    ann_id, _ = make_user("ann")
    bob_id, _ = make_user("bob")
    add_member(db, Follow, follower_id=ann_id, followee_id=bob_id)

    # the edge appears between our DELETE and our INSERT
    monkeypatch.setattr(Query, "delete", lambda self, *args, **kwargs: 0)
    assert toggle_membership(db, Follow, follower_id=ann_id, followee_id=bob_id) is True
    monkeypatch.undo()

    assert count_members(db, Follow, follower_id=ann_id, followee_id=bob_id) == 1
