from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_user, get_db, require_staff
from internhub.api.serializers import serialize_user_summary
from internhub.models.entities import (
    Announcement,
    ChatMessage,
    ChatParticipant,
    ChatRoom,
    DirectMessage,
    DiscussionForum,
    ForumPost,
    UserAccount,
)
from internhub.schemas.api import (
    AnnouncementIn,
    AnnouncementOut,
    ChatMessageIn,
    ChatMessageOut,
    ChatRoomIn,
    ChatRoomOut,
    DirectMessageIn,
    DirectMessageOut,
    ForumIn,
    ForumOut,
    ForumPostIn,
    ForumPostOut,
    ForumThreadOut,
)
from internhub.services import community, feeds

router = APIRouter(prefix="/chat")


def _serialize_message(message: ChatMessage) -> dict:
    return {
        "id": message.id,
        "chat_room_id": message.chat_room_id,
        "sender_id": message.sender_id,
        "sender": serialize_user_summary(message.sender, include_email=False),
        "message": message.message,
        "created_at": message.created_at,
    }


def _serialize_room(db: Session, room: ChatRoom, last: ChatMessage | None = None) -> dict:
    participant_ids = [
        row.user_id
        for row in db.query(ChatParticipant.user_id).filter(ChatParticipant.chat_room_id == room.id).all()
    ]
    return {
        "id": room.id,
        "name": room.name,
        "type": room.type,
        "internship_id": room.internship_id,
        "created_by": room.created_by,
        "participant_ids": participant_ids,
        "last_message": _serialize_message(last) if last else None,
        "created_at": room.created_at,
    }


def _serialize_forum(forum: DiscussionForum, posts_count: int | None = None) -> dict:
    return {
        "id": forum.id,
        "topic": forum.topic,
        "description": forum.description,
        "category": forum.category,
        "is_pinned": forum.is_pinned,
        "view_count": forum.view_count,
        "posts_count": posts_count,
        "creator": serialize_user_summary(forum.creator, include_email=False),
        "created_at": forum.created_at,
    }


def _serialize_post(post: ForumPost, replies: dict | None = None) -> dict:
    return {
        "id": post.id,
        "forum_id": post.forum_id,
        "parent_post_id": post.parent_post_id,
        "content": post.content,
        "upvotes": post.upvotes,
        "author": serialize_user_summary(post.user, include_email=False),
        "replies": [_serialize_post(reply) for reply in (replies or {}).get(post.id, [])],
        "created_at": post.created_at,
    }


def _serialize_direct_message(message: DirectMessage) -> dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "sender": serialize_user_summary(message.sender, include_email=False),
        "subject": message.subject,
        "body": message.body,
        "is_read": message.is_read,
        "created_at": message.created_at,
    }


def _serialize_announcement(announcement: Announcement) -> dict:
    return {
        "id": announcement.id,
        "title": announcement.title,
        "content": announcement.content,
        "target_audience": announcement.target_audience,
        "priority": announcement.priority,
        "is_active": announcement.is_active,
        "expires_at": announcement.expires_at,
        "poster": serialize_user_summary(announcement.poster, include_email=False),
        "created_at": announcement.created_at,
    }


@router.post("/rooms", response_model=ChatRoomOut, status_code=201)
def create_room(
    payload: ChatRoomIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    room = community.create_room(
        db,
        creator=user,
        name=payload.name,
        room_type=payload.type,
        internship_id=payload.internship_id,
        participant_ids=payload.participant_ids,
    )
    return _serialize_room(db, room)


@router.get("/rooms", response_model=list[ChatRoomOut])
def list_rooms(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_serialize_room(db, room, last) for room, last in community.list_rooms(db, user.id)]


@router.get("/rooms/{room_id}/messages", response_model=list[ChatMessageOut])
def room_messages(
    room_id: UUID,
    limit: int = Query(default=community.DEFAULT_MESSAGE_LIMIT, ge=1, le=200),
    before: datetime | None = None,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    messages = community.room_messages(db, room_id=room_id, user_id=user.id, limit=limit, before=before)
    return [_serialize_message(message) for message in messages]


@router.post("/rooms/{room_id}/messages", response_model=ChatMessageOut, status_code=201)
def send_room_message(
    room_id: UUID,
    payload: ChatMessageIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = community.send_room_message(db, room_id=room_id, user_id=user.id, text=payload.message)
    return _serialize_message(message)


@router.post("/forums", response_model=ForumOut, status_code=201)
def create_forum(
    payload: ForumIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    forum = community.create_forum(
        db,
        user_id=user.id,
        topic=payload.topic,
        description=payload.description,
        category=payload.category,
    )
    return _serialize_forum(forum, posts_count=0)


@router.get("/forums", response_model=list[ForumOut])
def list_forums(category: str | None = None, db: Session = Depends(get_db)):
    return [_serialize_forum(forum, count) for forum, count in community.list_forums(db, category=category)]


@router.get("/forums/{forum_id}/posts", response_model=ForumThreadOut)
def forum_posts(forum_id: UUID, db: Session = Depends(get_db)):
    forum, posts, replies = community.forum_posts(db, forum_id)
    return {
        "forum": _serialize_forum(forum),
        "posts": [_serialize_post(post, replies) for post in posts],
    }


@router.post("/forums/{forum_id}/posts", response_model=ForumPostOut, status_code=201)
def create_post(
    forum_id: UUID,
    payload: ForumPostIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    post = community.create_post(
        db,
        forum_id=forum_id,
        user_id=user.id,
        content=payload.content,
        parent_post_id=payload.parent_post_id,
    )
    return _serialize_post(post)


@router.post("/posts/{post_id}/upvote", response_model=ForumPostOut)
def upvote_post(
    post_id: UUID,
    _: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _serialize_post(community.upvote_post(db, post_id))


@router.post("/messages", response_model=DirectMessageOut, status_code=201)
def send_direct_message(
    payload: DirectMessageIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = community.send_direct_message(
        db,
        sender_id=user.id,
        receiver_id=payload.receiver_id,
        subject=payload.subject,
        body=payload.body,
    )
    return _serialize_direct_message(message)


@router.get("/messages/inbox", response_model=list[DirectMessageOut])
def inbox(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_serialize_direct_message(message) for message in community.inbox(db, user.id)]


@router.patch("/messages/{message_id}/read", response_model=DirectMessageOut)
def mark_message_read(
    message_id: UUID,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = community.mark_direct_message_read(db, user_id=user.id, message_id=message_id)
    return _serialize_direct_message(message)


@router.post("/announcements", response_model=AnnouncementOut, status_code=201)
def create_announcement(
    payload: AnnouncementIn,
    user: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    announcement = feeds.create_announcement(
        db,
        posted_by=user.id,
        title=payload.title,
        content=payload.content,
        target_audience=payload.target_audience,
        priority=payload.priority,
        expires_at=payload.expires_at,
    )
    return _serialize_announcement(announcement)


@router.get("/announcements", response_model=list[AnnouncementOut])
def list_announcements(db: Session = Depends(get_db)):
    return [_serialize_announcement(announcement) for announcement in feeds.active_announcements(db)]


@router.delete("/announcements/{announcement_id}", response_model=AnnouncementOut)
def deactivate_announcement(
    announcement_id: UUID,
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return _serialize_announcement(feeds.deactivate_announcement(db, announcement_id))
