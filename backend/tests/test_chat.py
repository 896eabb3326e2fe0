from datetime import datetime, timedelta
from uuid import UUID

from internhub.models.entities import ChatMessage

from conftest import auth_headers, make_user


def _room(client, owner, members, name="Study group"):
    return client.post(
        "/api/chat/rooms",
        json={"name": name, "type": "group", "participant_ids": [str(m.id) for m in members]},
        headers=auth_headers(owner),
    )


def test_room_membership_controls_access(client, db_session):
    owner = make_user(db_session)
    member = make_user(db_session)
    outsider = make_user(db_session)
    room = _room(client, owner, [member])
    assert room.status_code == 201
    room_id = room.json()["id"]
    assert set(room.json()["participant_ids"]) == {str(owner.id), str(member.id)}

    sent = client.post(f"/api/chat/rooms/{room_id}/messages", json={"message": "hi all"}, headers=auth_headers(member))
    assert sent.status_code == 201

    blocked_read = client.get(f"/api/chat/rooms/{room_id}/messages", headers=auth_headers(outsider))
    blocked_send = client.post(
        f"/api/chat/rooms/{room_id}/messages",
        json={"message": "let me in"},
        headers=auth_headers(outsider),
    )
    assert blocked_read.status_code == 403
    assert blocked_send.status_code == 403

    rooms = client.get("/api/chat/rooms", headers=auth_headers(owner)).json()
    assert rooms[0]["last_message"]["message"] == "hi all"
    assert client.get("/api/chat/rooms", headers=auth_headers(outsider)).json() == []


def test_room_rejects_unknown_type_and_participants(client, db_session):
    owner = make_user(db_session)

    bad_type = client.post(
        "/api/chat/rooms",
        json={"name": "x", "type": "broadcast"},
        headers=auth_headers(owner),
    )
    unknown_member = client.post(
        "/api/chat/rooms",
        json={"name": "x", "participant_ids": ["00000000-0000-0000-0000-000000000000"]},
        headers=auth_headers(owner),
    )

    assert bad_type.status_code == 400
    assert unknown_member.status_code == 404


def test_room_messages_are_chronological_and_paged(client, db_session):
    owner = make_user(db_session)
    room_id = _room(client, owner, []).json()["id"]
    base = datetime(2026, 5, 1, 9, 0, 0)
    for index in range(5):
        db_session.add(
            ChatMessage(
                chat_room_id=UUID(room_id),
                sender_id=owner.id,
                message=f"m{index}",
                created_at=base + timedelta(minutes=index),
            )
        )
    db_session.commit()

    latest = client.get(f"/api/chat/rooms/{room_id}/messages", params={"limit": 3}, headers=auth_headers(owner))
    assert [m["message"] for m in latest.json()] == ["m2", "m3", "m4"]

    older = client.get(
        f"/api/chat/rooms/{room_id}/messages",
        params={"limit": 3, "before": (base + timedelta(minutes=2)).isoformat()},
        headers=auth_headers(owner),
    )
    assert [m["message"] for m in older.json()] == ["m0", "m1"]


def test_forum_threads_views_and_upvotes(client, db_session):
    author = make_user(db_session)
    headers = auth_headers(author)
    forum = client.post(
        "/api/chat/forums",
        json={"topic": "Interview prep", "category": "careers"},
        headers=headers,
    ).json()
    other_forum = client.post("/api/chat/forums", json={"topic": "Off topic"}, headers=headers).json()

    root = client.post(f"/api/chat/forums/{forum['id']}/posts", json={"content": "Share tips"}, headers=headers)
    assert root.status_code == 201
    root_id = root.json()["id"]
    reply = client.post(
        f"/api/chat/forums/{forum['id']}/posts",
        json={"content": "Practice DSA", "parent_post_id": root_id},
        headers=headers,
    )
    assert reply.status_code == 201

    wrong_forum = client.post(
        f"/api/chat/forums/{other_forum['id']}/posts",
        json={"content": "misplaced", "parent_post_id": root_id},
        headers=headers,
    )
    assert wrong_forum.status_code == 400

    client.get(f"/api/chat/forums/{forum['id']}/posts")
    thread = client.get(f"/api/chat/forums/{forum['id']}/posts").json()
    assert thread["forum"]["view_count"] == 2
    assert [post["id"] for post in thread["posts"]] == [root_id]
    assert [r["content"] for r in thread["posts"][0]["replies"]] == ["Practice DSA"]

    for _ in range(2):
        upvoted = client.post(f"/api/chat/posts/{root_id}/upvote", headers=headers)
    assert upvoted.json()["upvotes"] == 2

    careers = client.get("/api/chat/forums", params={"category": "careers"}).json()
    assert [(f["topic"], f["posts_count"]) for f in careers] == [("Interview prep", 2)]

    assert client.get("/api/chat/forums/00000000-0000-0000-0000-000000000000/posts").status_code == 404


def test_direct_messages(client, db_session):
    sender = make_user(db_session, name="Sender")
    receiver = make_user(db_session, name="Receiver")

    to_self = client.post(
        "/api/chat/messages",
        json={"receiver_id": str(sender.id), "body": "note to self"},
        headers=auth_headers(sender),
    )
    assert to_self.status_code == 400

    sent = client.post(
        "/api/chat/messages",
        json={"receiver_id": str(receiver.id), "subject": "Hello", "body": "Are you free?"},
        headers=auth_headers(sender),
    )
    assert sent.status_code == 201
    message_id = sent.json()["id"]

    inbox = client.get("/api/chat/messages/inbox", headers=auth_headers(receiver)).json()
    assert [m["sender"]["name"] for m in inbox] == ["Sender"]
    assert client.get("/api/chat/messages/inbox", headers=auth_headers(sender)).json() == []

    assert client.patch(f"/api/chat/messages/{message_id}/read", headers=auth_headers(sender)).status_code == 403
    marked = client.patch(f"/api/chat/messages/{message_id}/read", headers=auth_headers(receiver))
    assert marked.json()["is_read"] is True
