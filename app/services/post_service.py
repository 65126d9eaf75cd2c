"""CRUD operations for posts and comments"""
from sqlalchemy.orm import Session
from typing import List

from app.errors.exceptions import ForbiddenException, NotFoundException
from app.models.post import Comment, Post
from app.models.user import User
from app.schemas.post_schemas import CommentCreate, PostCreate


def create_post(db: Session, owner: User, data: PostCreate) -> Post:
    post = Post(
        user_id=owner.id,
        image=data.image,
        caption=data.caption,
        location=data.location,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def get_posts(db: Session, skip: int = 0, limit: int = 100) -> List[Post]:
    """
    Feed: every post, newest first
    """
    return (
        db.query(Post)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundException(detail="Post not found")
    return post


def delete_post(db: Session, owner: User, post_id: int) -> None:
    """
    Delete a post the caller owns; its comments and likes go with it
    """
    post = get_post(db, post_id)
    if post.user_id != owner.id:
        raise ForbiddenException()
    db.delete(post)
    db.commit()


def create_comment(db: Session, author: User, data: CommentCreate) -> Comment:
    post = get_post(db, data.post_id)
    comment = Comment(post_id=post.id, user_id=author.id, text=data.text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def get_comments_for_post(db: Session, post_id: int) -> List[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def delete_comment(db: Session, author: User, comment_id: int) -> None:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFoundException(detail="Comment not found")
    if comment.user_id != author.id:
        raise ForbiddenException()
    db.delete(comment)
    db.commit()
