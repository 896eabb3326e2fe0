from datetime import datetime, timedelta
from uuid import UUID

import pytest

from internhub.core.errors import BadRequestError, NotFoundError
from internhub.models.entities import Mentor, UserAccount
from internhub.services import mentoring

from conftest import auth_headers, make_student, make_user


def _mentor(db_session, **fields):
    user = make_user(db_session, name=fields.pop("name", "Maya Mentor"))
    return mentoring.register_mentor(
        db_session,
        user=user,
        expertise=fields.pop("expertise", ["Python", "Data Science"]),
        bio="Ten years in industry",
    )


def test_register_promotes_student_role_and_rejects_duplicates(client, db_session):
    user = make_user(db_session)

    first = client.post(
        "/api/mentor/register",
        json={"expertise": ["React", " react ", "Node.js"], "bio": "Frontend lead"},
        headers=auth_headers(user),
    )
    second = client.post("/api/mentor/register", json={}, headers=auth_headers(user))

    assert first.status_code == 201
    assert first.json()["expertise"] == ["React", "Node.js"]
    assert first.json()["rating"] == 0.0
    assert second.status_code == 409
    db_session.expire_all()
    assert db_session.get(UserAccount, user.id).role == "mentor"


def test_rating_is_mean_of_all_reviews(db_session):
    mentor = _mentor(db_session)
    ratings = [5, 4, 2, 3]
    for value in ratings:
        reviewer = make_student(db_session, make_user(db_session))
        mentoring.add_review(
            db_session,
            student=reviewer,
            mentor_id=mentor.id,
            rating=value,
            review_text="helpful",
        )

    db_session.expire_all()
    stored = db_session.get(Mentor, mentor.id)
    assert stored.rating == pytest.approx(sum(ratings) / len(ratings))


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_out_of_range_rating_is_rejected(db_session, rating):
    mentor = _mentor(db_session)
    reviewer = make_student(db_session, make_user(db_session))

    with pytest.raises(BadRequestError):
        mentoring.add_review(db_session, student=reviewer, mentor_id=mentor.id, rating=rating, review_text=None)


def test_review_requires_student_profile(client, db_session):
    mentor = _mentor(db_session)
    no_profile = make_user(db_session)

    response = client.post(
        "/api/mentor/reviews",
        json={"mentor_id": str(mentor.id), "rating": 4, "reviews": "nice"},
        headers=auth_headers(no_profile),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Student profile required"


@pytest.mark.parametrize("rating", [4.0, True])
def test_review_rating_must_be_a_json_integer(client, db_session, rating):
    mentor = _mentor(db_session)
    reviewer_user = make_user(db_session)
    make_student(db_session, reviewer_user)

    response = client.post(
        "/api/mentor/reviews",
        json={"mentor_id": str(mentor.id), "rating": rating},
        headers=auth_headers(reviewer_user),
    )

    assert response.status_code == 422
    db_session.expire_all()
    assert db_session.get(Mentor, mentor.id).rating == 0.0


def test_review_for_unknown_mentor_is_not_found(db_session):
    reviewer = make_student(db_session, make_user(db_session))

    with pytest.raises(NotFoundError):
        mentoring.add_review(
            db_session,
            student=reviewer,
            mentor_id=UUID(int=0),
            rating=3,
            review_text=None,
        )


def test_review_endpoint_updates_listing_order(client, db_session):
    low = _mentor(db_session, name="Low Rated", expertise=["Go"])
    high = _mentor(db_session, name="High Rated", expertise=["Python"])
    reviewer_user = make_user(db_session)
    make_student(db_session, reviewer_user)
    headers = auth_headers(reviewer_user)

    for mentor_id, rating in ((low.id, 2), (high.id, 5)):
        response = client.post(
            "/api/mentor/reviews",
            json={"mentor_id": str(mentor_id), "rating": rating, "reviews": "ok"},
            headers=headers,
        )
        assert response.status_code == 201
        assert response.json()["reviews"] == "ok"

    listing = client.get("/api/mentor").json()
    assert [row["user"]["name"] for row in listing] == ["High Rated", "Low Rated"]

    filtered = client.get("/api/mentor", params={"expertise": "pyth"}).json()
    assert [row["id"] for row in filtered] == [str(high.id)]

    detail = client.get(f"/api/mentor/{high.id}").json()
    assert detail["reviews_count"] == 1
    assert detail["rating"] == 5.0

    reviews = client.get(f"/api/mentor/{high.id}/reviews").json()
    assert reviews[0]["rating"] == 5


def test_book_and_complete_session(client, db_session):
    mentor = _mentor(db_session)
    student_user = make_user(db_session)
    make_student(db_session, student_user)
    when = (datetime.utcnow() + timedelta(days=2)).isoformat()

    booked = client.post(
        "/api/mentor/sessions",
        json={"mentor_id": str(mentor.id), "scheduled_at": when, "meeting_link": "https://meet.example.com/x"},
        headers=auth_headers(student_user),
    )
    assert booked.status_code == 201
    session_id = booked.json()["id"]

    mine = client.get("/api/mentor/sessions/my", headers=auth_headers(student_user)).json()
    assert [row["id"] for row in mine] == [session_id]

    mentor_user = db_session.get(UserAccount, mentor.user_id)
    completed = client.patch(
        f"/api/mentor/sessions/{session_id}/status",
        json={"status": "completed"},
        headers=auth_headers(mentor_user),
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"

    stranger = make_user(db_session)
    blocked = client.patch(
        f"/api/mentor/sessions/{session_id}/status",
        json={"status": "cancelled"},
        headers=auth_headers(stranger),
    )
    assert blocked.status_code == 403


def test_only_owner_can_edit_mentor_profile(client, db_session):
    mentor = _mentor(db_session)
    stranger = make_user(db_session)

    response = client.put(f"/api/mentor/{mentor.id}", json={"bio": "hijacked"}, headers=auth_headers(stranger))

    assert response.status_code == 403
