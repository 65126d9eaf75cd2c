import asyncio
import threading
from datetime import datetime, timedelta

import pytest

from app.core.config import settings
from app.db.base import utcnow
from app.models.social import StoryView
from app.models.story import Story
from app.services import story_service


def post_story(client, headers, image="http://img/s.jpg"):
    resp = client.post("/api/v1/stories/", json={"image": image}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def backdate(db, story_id, hours):
    """Move a story's whole lifetime into the past"""
    shift = timedelta(hours=hours)
    story = db.query(Story).filter(Story.id == story_id).one()
    db.query(Story).filter(Story.id == story_id).update(
        {Story.created_at: story.created_at - shift, Story.expires_at: story.expires_at - shift},
        synchronize_session=False,
    )
    db.commit()
    db.expire_all()


def test_story_expires_after_ttl(client, make_user):
    _, ann = make_user("ann")
    story = post_story(client, ann)
    assert story["user"]["username"] == "ann"
    assert story["views"] == []

    created = datetime.fromisoformat(story["created_at"])
    expires = datetime.fromisoformat(story["expires_at"])
    assert expires - created == timedelta(hours=settings.STORY_TTL_HOURS)


def test_expired_stories_hidden_from_every_read(client, make_user, db):
    ann_id, ann = make_user("ann")
    _, bob = make_user("bob")
    old = post_story(client, ann, "http://img/old.jpg")
    fresh = post_story(client, ann, "http://img/new.jpg")
    backdate(db, old["id"], 25)

    grouped = client.get("/api/v1/stories/", headers=bob).json()
    assert len(grouped) == 1
    assert [s["id"] for s in grouped[0]["stories"]] == [fresh["id"]]

    by_user = client.get(f"/api/v1/stories/user/{ann_id}", headers=bob).json()
    assert [s["id"] for s in by_user] == [fresh["id"]]

    view = client.post(f"/api/v1/stories/{old['id']}/view", headers=bob)
    assert view.status_code == 404
    assert db.query(StoryView).count() == 0


def test_story_just_inside_window_is_visible(client, make_user, db):
    _, ann = make_user("ann")
    story = post_story(client, ann)
    backdate(db, story["id"], settings.STORY_TTL_HOURS - 1)

    grouped = client.get("/api/v1/stories/", headers=ann).json()
    assert [s["id"] for s in grouped[0]["stories"]] == [story["id"]]


def test_stories_grouped_by_author_newest_first(client, make_user, db):
    ann_id, ann = make_user("ann")
    bob_id, bob = make_user("bob")
    a1 = post_story(client, ann)
    b1 = post_story(client, bob)
    a2 = post_story(client, ann)
    backdate(db, a1["id"], 3)
    backdate(db, b1["id"], 2)

    grouped = client.get("/api/v1/stories/", headers=ann).json()
    assert [g["user"]["id"] for g in grouped] == [ann_id, bob_id]
    assert [s["id"] for s in grouped[0]["stories"]] == [a2["id"], a1["id"]]
    assert [s["id"] for s in grouped[1]["stories"]] == [b1["id"]]


def test_only_owner_can_delete_story(client, make_user, db):
    _, ann = make_user("ann")
    _, bob = make_user("bob")
    story = post_story(client, ann)

    forbidden = client.delete(f"/api/v1/stories/{story['id']}", headers=bob)
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "FORBIDDEN"

    assert client.delete(f"/api/v1/stories/{story['id']}", headers=ann).status_code == 200
    assert client.delete(f"/api/v1/stories/{story['id']}", headers=ann).status_code == 404
    assert db.query(Story).count() == 0


def test_purge_removes_only_expired_stories(client, make_user, db):
    _, ann = make_user("ann")
    _, bob = make_user("bob")
    old = post_story(client, ann)
    fresh = post_story(client, ann)
    client.post(f"/api/v1/stories/{old['id']}/view", headers=bob)
    backdate(db, old["id"], 48)

    assert story_service.purge_expired_stories(db) == 1
    assert [s.id for s in db.query(Story).all()] == [fresh["id"]]
    assert db.query(StoryView).count() == 0
    assert story_service.purge_expired_stories(db) == 0


def test_sweep_once_uses_its_own_session(client, make_user, db):
    _, ann = make_user("ann")
    story = post_story(client, ann)
    backdate(db, story["id"], 30)

    assert story_service._sweep_once() == 1
    db.expire_all()
    assert db.query(Story).count() == 0


def test_expiry_cannot_be_moved(client, make_user, db):
    _, ann = make_user("ann")
    story_id = post_story(client, ann)["id"]
    story = db.query(Story).filter(Story.id == story_id).one()

    with pytest.raises(ValueError):
        story.expires_at = utcnow() + timedelta(days=7)


def test_story_validation(client, make_user):
    _, ann = make_user("ann")
    resp = client.post("/api/v1/stories/", json={"image": ""}, headers=ann)
    assert resp.status_code == 422


def test_sweeper_loop_survives_failures_until_cancelled(client, make_user, db, monkeypatch):
    _, ann = make_user("ann")
    story = post_story(client, ann)
    backdate(db, story["id"], 30)

    calls = []
    swept = threading.Event()
    real_sweep = story_service._sweep_once

    def flaky_sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("database unavailable")
        removed = real_sweep()
        swept.set()
        return removed

    monkeypatch.setattr(story_service, "_sweep_once", flaky_sweep)

    async def run_until_swept():
        task = asyncio.create_task(story_service.run_story_sweeper(0.01))
        try:
            while not swept.is_set():
                await asyncio.sleep(0.01)
        finally:
            task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(asyncio.wait_for(run_until_swept(), timeout=5))

    assert len(calls) >= 2
    db.expire_all()
    assert db.query(Story).count() == 0
