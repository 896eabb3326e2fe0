from datetime import datetime, timedelta

from internhub.core import config
from internhub.models.entities import Announcement, UserNotification
from internhub.services import feeds
from internhub.services.notifications import create_notification

from conftest import auth_headers, make_user


def _announce(db_session, poster, title, *, priority=0, is_active=True, expires_at=None, created_at=None):
    announcement = Announcement(
        posted_by=poster.id,
        title=title,
        content=f"{title} body",
        priority=priority,
        is_active=is_active,
        expires_at=expires_at,
        created_at=created_at or datetime.utcnow(),
    )
    db_session.add(announcement)
    db_session.commit()
    return announcement


def test_active_announcements_filter_and_order(db_session):
    poster = make_user(db_session, role="faculty")
    now = datetime(2026, 3, 1, 12, 0, 0)
    _announce(db_session, poster, "old normal", priority=1, created_at=now - timedelta(days=3))
    _announce(db_session, poster, "new normal", priority=1, created_at=now - timedelta(days=1))
    _announce(db_session, poster, "urgent", priority=5, created_at=now - timedelta(days=5))
    _announce(db_session, poster, "inactive", priority=9, is_active=False)
    _announce(db_session, poster, "expired", priority=9, expires_at=now - timedelta(minutes=1))
    _announce(db_session, poster, "still open", priority=0, expires_at=now + timedelta(days=1))

    titles = [a.title for a in feeds.active_announcements(db_session, now=now)]

    assert titles == ["urgent", "new normal", "old normal", "still open"]


def test_announcement_endpoints_are_staff_only_for_writes(client, db_session):
    staff = make_user(db_session, role="admin")
    student = make_user(db_session)

    denied = client.post(
        "/api/chat/announcements",
        json={"title": "Career fair", "content": "Hall A"},
        headers=auth_headers(student),
    )
    assert denied.status_code == 403

    created = client.post(
        "/api/chat/announcements",
        json={"title": "Career fair", "content": "Hall A", "priority": 3},
        headers=auth_headers(staff),
    )
    assert created.status_code == 201
    announcement_id = created.json()["id"]

    assert [row["title"] for row in client.get("/api/chat/announcements").json()] == ["Career fair"]

    removed = client.delete(f"/api/chat/announcements/{announcement_id}", headers=auth_headers(staff))
    assert removed.status_code == 200
    assert removed.json()["is_active"] is False
    assert client.get("/api/chat/announcements").json() == []


def test_notifications_capped_and_newest_first(db_session, monkeypatch):
    user = make_user(db_session)
    monkeypatch.setattr(config.settings, "notifications_limit", 3)
    base = datetime(2026, 1, 1)
    for index in range(5):
        db_session.add(
            UserNotification(
                user_id=user.id,
                kind="info",
                title=f"n{index}",
                message="hello",
                created_at=base + timedelta(hours=index),
            )
        )
    db_session.commit()

    titles = [n.title for n in feeds.recent_notifications(db_session, user.id)]

    assert titles == ["n4", "n3", "n2"]


def test_mark_read_only_touches_own_notifications(client, db_session):
    owner = make_user(db_session)
    other = make_user(db_session)
    notification = create_notification(
        db_session,
        user_id=owner.id,
        kind="info",
        title="Welcome",
        message="Hello there",
    )
    notification_id = notification.id

    foreign = client.patch(f"/api/notifications/{notification_id}/read", headers=auth_headers(other))
    assert foreign.status_code == 404

    marked = client.patch(f"/api/notifications/{notification_id}/read", headers=auth_headers(owner))
    assert marked.status_code == 200
    assert marked.json()["is_read"] is True
    assert marked.json()["read_at"] is not None


def test_mark_all_read(client, db_session):
    owner = make_user(db_session)
    for index in range(3):
        create_notification(db_session, user_id=owner.id, kind="info", title=f"t{index}", message="m")

    response = client.post("/api/notifications/read-all", headers=auth_headers(owner))

    assert response.json() == {"updated": 3}
    assert all(row["is_read"] for row in client.get("/api/notifications/my", headers=auth_headers(owner)).json())
