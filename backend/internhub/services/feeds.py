from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, update
from sqlalchemy.orm import Session, joinedload

from internhub.core.config import settings
from internhub.core.errors import NotFoundError
from internhub.models.entities import Announcement, UserNotification


def active_announcements(db: Session, *, now: datetime | None = None) -> list[Announcement]:
    now = now or datetime.utcnow()
    return (
        db.query(Announcement)
        .options(joinedload(Announcement.poster))
        .filter(Announcement.is_active.is_(True))
        .filter(or_(Announcement.expires_at.is_(None), Announcement.expires_at > now))
        .order_by(Announcement.priority.desc(), Announcement.created_at.desc())
        .all()
    )


def create_announcement(
    db: Session,
    *,
    posted_by: UUID,
    title: str,
    content: str,
    target_audience: str | None,
    priority: int,
    expires_at: datetime | None,
) -> Announcement:
    announcement = Announcement(
        posted_by=posted_by,
        title=title.strip(),
        content=content,
        target_audience=target_audience,
        priority=priority,
        expires_at=expires_at,
        is_active=True,
        created_at=datetime.utcnow(),
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


def deactivate_announcement(db: Session, announcement_id: UUID) -> Announcement:
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise NotFoundError("Announcement not found")
    announcement.is_active = False
    db.commit()
    db.refresh(announcement)
    return announcement


def recent_notifications(db: Session, user_id: UUID, *, limit: int | None = None) -> list[UserNotification]:
    return (
        db.query(UserNotification)
        .filter(UserNotification.user_id == user_id)
        .order_by(UserNotification.created_at.desc())
        .limit(limit or settings.notifications_limit)
        .all()
    )


def mark_notification_read(db: Session, *, user_id: UUID, notification_id: UUID) -> UserNotification:
    notification = (
        db.query(UserNotification)
        .filter(UserNotification.id == notification_id, UserNotification.user_id == user_id)
        .one_or_none()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_notifications_read(db: Session, user_id: UUID) -> int:
    result = db.execute(
        update(UserNotification)
        .where(UserNotification.user_id == user_id, UserNotification.is_read.is_(False))
        .values(is_read=True, read_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount
