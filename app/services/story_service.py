"""Stories: creation, expiry-filtered reads and the background sweep"""
import asyncio
import logging
from collections import OrderedDict
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.db.base import utcnow
from app.db.session import SessionLocal
from app.errors.exceptions import ForbiddenException, NotFoundException
from app.models.story import Story
from app.models.user import User

logger = logging.getLogger(__name__)


def create_story(db: Session, owner: User, image: str) -> Story:
    created_at = utcnow()
    story = Story(
        user_id=owner.id,
        image=image,
        created_at=created_at,
        expires_at=created_at + timedelta(hours=settings.STORY_TTL_HOURS),
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    return story


def live_stories(db: Session, user_id: Optional[int] = None):
    """
    Query of stories still visible now, newest first.
    Every story read goes through here.
    """
    query = db.query(Story).filter(Story.expires_at > utcnow())
    if user_id is not None:
        query = query.filter(Story.user_id == user_id)
    return query.order_by(Story.created_at.desc(), Story.id.desc())


def get_live_story(db: Session, story_id: int) -> Story:
    story = live_stories(db).filter(Story.id == story_id).first()
    if not story:
        raise NotFoundException(detail="Story not found")
    return story


def group_by_author(stories: List[Story]) -> List[dict]:
    """
    [{user, stories}] in order of each author's most recent story
    """
    groups = OrderedDict()
    for story in stories:
        group = groups.setdefault(story.user_id, {"user": story.user, "stories": []})
        group["stories"].append(story)
    return list(groups.values())


def delete_story(db: Session, owner: User, story_id: int) -> None:
    story = db.query(Story).filter(Story.id == story_id).first()
    if not story:
        raise NotFoundException(detail="Story not found")
    if story.user_id != owner.id:
        raise ForbiddenException()
    db.delete(story)
    db.commit()


# ── Sweep ─────────────────────────────────────────────────────────────────────

def purge_expired_stories(db: Session) -> int:
    """Delete expired stories (views cascade). Returns the number removed."""
    removed = db.query(Story).filter(Story.expires_at <= utcnow()).delete(synchronize_session=False)
    db.commit()
    return removed


def _sweep_once() -> int:
    db = SessionLocal()
    try:
        return purge_expired_stories(db)
    finally:
        db.close()


async def run_story_sweeper(interval_seconds: float) -> None:
    """
    Periodically reclaim expired stories until cancelled.
    Read visibility never depends on this loop having run.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await run_in_threadpool(_sweep_once)
            if removed:
                logger.info(f"Story sweep removed {removed} expired stories")
        except Exception:
            logger.exception("Story sweep failed")
