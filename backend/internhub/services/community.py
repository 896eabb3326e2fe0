"""Chat rooms, discussion forums and direct messages.

Counters (forum views, post upvotes) are bumped with a single UPDATE so two
readers never lose each other's increment.
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload

from internhub.core.errors import BadRequestError, ForbiddenError, NotFoundError
from internhub.models.entities import (
    ChatMessage,
    ChatParticipant,
    ChatRoom,
    DirectMessage,
    DiscussionForum,
    ForumPost,
    Internship,
    UserAccount,
)

DEFAULT_MESSAGE_LIMIT = 50
ROOM_TYPES = {"group", "direct", "internship"}


def create_room(
    db: Session,
    *,
    creator: UserAccount,
    name: str,
    room_type: str,
    internship_id: UUID | None,
    participant_ids: list[UUID],
) -> ChatRoom:
    name = (name or "").strip()
    if not name:
        raise BadRequestError("Room name is required")
    if room_type not in ROOM_TYPES:
        raise BadRequestError("Invalid room type")
    if internship_id and not db.get(Internship, internship_id):
        raise NotFoundError("Internship not found")

    member_ids = {pid for pid in participant_ids if pid != creator.id}
    if member_ids:
        found = db.query(UserAccount.id).filter(UserAccount.id.in_(member_ids)).count()
        if found != len(member_ids):
            raise NotFoundError("One or more participants not found")

    now = datetime.utcnow()
    room = ChatRoom(
        name=name,
        type=room_type,
        internship_id=internship_id,
        created_by=creator.id,
        created_at=now,
    )
    db.add(room)
    db.flush()
    db.add(ChatParticipant(chat_room_id=room.id, user_id=creator.id, role="admin", joined_at=now))
    for member_id in member_ids:
        db.add(ChatParticipant(chat_room_id=room.id, user_id=member_id, role="member", joined_at=now))
    db.commit()
    db.refresh(room)
    return room


def _participant(db: Session, room_id: UUID, user_id: UUID) -> ChatParticipant:
    if not db.get(ChatRoom, room_id):
        raise NotFoundError("Chat room not found")
    participant = (
        db.query(ChatParticipant)
        .filter(ChatParticipant.chat_room_id == room_id, ChatParticipant.user_id == user_id)
        .one_or_none()
    )
    if not participant:
        raise ForbiddenError("Not a participant of this room")
    return participant


def list_rooms(db: Session, user_id: UUID) -> list[tuple[ChatRoom, ChatMessage | None]]:
    rooms = (
        db.query(ChatRoom)
        .join(ChatParticipant, ChatParticipant.chat_room_id == ChatRoom.id)
        .filter(ChatParticipant.user_id == user_id)
        .order_by(ChatRoom.created_at.desc())
        .all()
    )
    result = []
    for room in rooms:
        last = (
            db.query(ChatMessage)
            .options(joinedload(ChatMessage.sender))
            .filter(ChatMessage.chat_room_id == room.id)
            .order_by(ChatMessage.created_at.desc())
            .first()
        )
        result.append((room, last))
    return result


def room_messages(
    db: Session,
    *,
    room_id: UUID,
    user_id: UUID,
    limit: int = DEFAULT_MESSAGE_LIMIT,
    before: datetime | None = None,
) -> list[ChatMessage]:
    participant = _participant(db, room_id, user_id)
    query = (
        db.query(ChatMessage)
        .options(joinedload(ChatMessage.sender))
        .filter(ChatMessage.chat_room_id == room_id)
    )
    if before:
        query = query.filter(ChatMessage.created_at < before)
    messages = query.order_by(ChatMessage.created_at.desc()).limit(limit).all()
    participant.last_read_at = datetime.utcnow()
    db.commit()
    return list(reversed(messages))


def send_room_message(db: Session, *, room_id: UUID, user_id: UUID, text: str) -> ChatMessage:
    _participant(db, room_id, user_id)
    text = (text or "").strip()
    if not text:
        raise BadRequestError("Message cannot be empty")
    message = ChatMessage(chat_room_id=room_id, sender_id=user_id, message=text, created_at=datetime.utcnow())
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def create_forum(
    db: Session,
    *,
    user_id: UUID,
    topic: str,
    description: str | None,
    category: str | None,
) -> DiscussionForum:
    topic = (topic or "").strip()
    if not topic:
        raise BadRequestError("Topic is required")
    forum = DiscussionForum(
        topic=topic,
        description=description,
        category=category,
        created_by=user_id,
        created_at=datetime.utcnow(),
    )
    db.add(forum)
    db.commit()
    db.refresh(forum)
    return forum


def list_forums(db: Session, *, category: str | None = None) -> list[tuple[DiscussionForum, int]]:
    post_counts = (
        db.query(ForumPost.forum_id, func.count(ForumPost.id).label("posts"))
        .group_by(ForumPost.forum_id)
        .subquery()
    )
    query = (
        db.query(DiscussionForum, func.coalesce(post_counts.c.posts, 0))
        .options(joinedload(DiscussionForum.creator))
        .outerjoin(post_counts, post_counts.c.forum_id == DiscussionForum.id)
    )
    if category:
        query = query.filter(DiscussionForum.category == category)
    rows = query.order_by(DiscussionForum.is_pinned.desc(), DiscussionForum.created_at.desc()).all()
    return [(forum, int(count)) for forum, count in rows]


def forum_posts(
    db: Session, forum_id: UUID
) -> tuple[DiscussionForum, list[ForumPost], dict[UUID, list[ForumPost]]]:
    """Record a view and return the forum's top-level posts and their replies."""
    result = db.execute(
        update(DiscussionForum)
        .where(DiscussionForum.id == forum_id)
        .values(view_count=DiscussionForum.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        db.rollback()
        raise NotFoundError("Forum not found")
    db.commit()

    forum = db.get(DiscussionForum, forum_id)
    db.refresh(forum)
    posts = (
        db.query(ForumPost)
        .options(joinedload(ForumPost.user))
        .filter(ForumPost.forum_id == forum_id)
        .order_by(ForumPost.created_at.desc())
        .all()
    )
    top_level = [post for post in posts if post.parent_post_id is None]
    replies: dict[UUID, list[ForumPost]] = {}
    for post in reversed(posts):
        if post.parent_post_id is not None:
            replies.setdefault(post.parent_post_id, []).append(post)
    return forum, top_level, replies


def create_post(
    db: Session,
    *,
    forum_id: UUID,
    user_id: UUID,
    content: str,
    parent_post_id: UUID | None,
) -> ForumPost:
    if not db.get(DiscussionForum, forum_id):
        raise NotFoundError("Forum not found")
    content = (content or "").strip()
    if not content:
        raise BadRequestError("Post content cannot be empty")
    if parent_post_id:
        parent = db.get(ForumPost, parent_post_id)
        if not parent or parent.forum_id != forum_id:
            raise BadRequestError("Parent post does not belong to this forum")
    post = ForumPost(
        forum_id=forum_id,
        user_id=user_id,
        parent_post_id=parent_post_id,
        content=content,
        created_at=datetime.utcnow(),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def upvote_post(db: Session, post_id: UUID) -> ForumPost:
    result = db.execute(
        update(ForumPost)
        .where(ForumPost.id == post_id)
        .values(upvotes=ForumPost.upvotes + 1)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        db.rollback()
        raise NotFoundError("Post not found")
    db.commit()
    post = db.get(ForumPost, post_id)
    db.refresh(post)
    return post


def send_direct_message(
    db: Session,
    *,
    sender_id: UUID,
    receiver_id: UUID,
    subject: str | None,
    body: str,
) -> DirectMessage:
    if receiver_id == sender_id:
        raise BadRequestError("Cannot message yourself")
    if not db.get(UserAccount, receiver_id):
        raise NotFoundError("Receiver not found")
    body = (body or "").strip()
    if not body:
        raise BadRequestError("Message cannot be empty")
    message = DirectMessage(
        sender_id=sender_id,
        receiver_id=receiver_id,
        subject=subject,
        body=body,
        created_at=datetime.utcnow(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def inbox(db: Session, user_id: UUID) -> list[DirectMessage]:
    return (
        db.query(DirectMessage)
        .options(joinedload(DirectMessage.sender))
        .filter(DirectMessage.receiver_id == user_id, DirectMessage.deleted_at.is_(None))
        .order_by(DirectMessage.created_at.desc())
        .all()
    )


def mark_direct_message_read(db: Session, *, user_id: UUID, message_id: UUID) -> DirectMessage:
    message = db.get(DirectMessage, message_id)
    if not message or message.deleted_at is not None:
        raise NotFoundError("Message not found")
    if message.receiver_id != user_id:
        raise ForbiddenError("Only the receiver can mark a message as read")
    message.is_read = True
    db.commit()
    db.refresh(message)
    return message
