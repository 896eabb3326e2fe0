from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_user, get_db
from internhub.models.entities import UserAccount, UserNotification
from internhub.schemas.api import NotificationOut
from internhub.services import feeds

router = APIRouter(prefix="/notifications")


def _serialize_notification(notification: UserNotification) -> dict:
    return {
        "id": notification.id,
        "kind": notification.kind,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "read_at": notification.read_at,
        "metadata": notification.metadata_json if isinstance(notification.metadata_json, dict) else None,
        "created_at": notification.created_at,
    }


@router.get("/my", response_model=list[NotificationOut])
def my_notifications(
    limit: int | None = Query(default=None, ge=1, le=200),
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        _serialize_notification(notification)
        for notification in feeds.recent_notifications(db, user.id, limit=limit)
    ]


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: UUID,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = feeds.mark_notification_read(db, user_id=user.id, notification_id=notification_id)
    return _serialize_notification(notification)


@router.post("/read-all")
def mark_all_read(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"updated": feeds.mark_all_notifications_read(db, user.id)}
