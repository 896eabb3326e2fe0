from uuid import UUID

import pytest

from internhub.core.errors import BadRequestError, NotFoundError
from internhub.models.entities import Credit, CreditAward
from internhub.services import credits as ledger

from conftest import auth_headers, make_student, make_user


def test_get_or_create_starts_at_zero(db_session):
    student = make_student(db_session, make_user(db_session))

    credit = ledger.get_or_create_credits(db_session, student.id)
    again = ledger.get_or_create_credits(db_session, student.id)

    assert credit.credits_earned == 0
    assert again.id == credit.id
    assert db_session.query(Credit).count() == 1


def test_awards_accumulate(db_session):
    student = make_student(db_session, make_user(db_session))

    ledger.award_credits(db_session, student_id=student.id, amount=10, reason="Hackathon", awarded_by=None)
    credit = ledger.award_credits(db_session, student_id=student.id, amount=5, reason="Workshop", awarded_by=None)

    assert credit.credits_earned == 15
    history = ledger.list_awards(db_session, student.id)
    assert sorted(award.amount for award in history) == [5, 10]


def test_award_after_lazy_create_increments_existing_row(db_session):
    student = make_student(db_session, make_user(db_session))
    ledger.get_or_create_credits(db_session, student.id)

    credit = ledger.award_credits(db_session, student_id=student.id, amount=7, reason=None, awarded_by=None)

    assert credit.credits_earned == 7
    assert db_session.query(Credit).count() == 1


@pytest.mark.parametrize("amount", [0, -5, True, 2.5])
def test_non_positive_or_non_integer_award_is_rejected(db_session, amount):
    student = make_student(db_session, make_user(db_session))

    with pytest.raises(BadRequestError):
        ledger.award_credits(db_session, student_id=student.id, amount=amount, reason=None, awarded_by=None)

    assert db_session.query(CreditAward).count() == 0


def test_award_to_unknown_student_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        ledger.award_credits(db_session, student_id=UUID(int=0), amount=3, reason=None, awarded_by=None)


def test_credit_endpoints(client, db_session):
    staff = make_user(db_session, role="admin")
    student_user = make_user(db_session)
    student = make_student(db_session, student_user)

    mine = client.get("/api/mentor/credits/my", headers=auth_headers(student_user))
    assert mine.status_code == 200
    assert mine.json()["credits_earned"] == 0

    denied = client.post(
        f"/api/mentor/credits/{student.id}/add",
        json={"amount": 10, "reason": "self-award"},
        headers=auth_headers(student_user),
    )
    assert denied.status_code == 403

    negative = client.post(
        f"/api/mentor/credits/{student.id}/add",
        json={"amount": -3},
        headers=auth_headers(staff),
    )
    assert negative.status_code == 400

    for amount in (10, 5):
        awarded = client.post(
            f"/api/mentor/credits/{student.id}/add",
            json={"amount": amount, "reason": "Mentoring session"},
            headers=auth_headers(staff),
        )
        assert awarded.status_code == 200

    assert awarded.json()["credits_earned"] == 15
    history = client.get("/api/mentor/credits/my/history", headers=auth_headers(student_user)).json()
    assert len(history) == 2
    assert all(row["awarded_by"] == str(staff.id) for row in history)


@pytest.mark.parametrize("amount", [True, 2.0, "4"])
def test_award_endpoint_requires_a_json_integer(client, db_session, amount):
    staff = make_user(db_session, role="faculty")
    student = make_student(db_session, make_user(db_session))

    response = client.post(
        f"/api/mentor/credits/{student.id}/add",
        json={"amount": amount},
        headers=auth_headers(staff),
    )

    assert response.status_code == 422
    assert db_session.query(CreditAward).count() == 0
    assert db_session.query(Credit).count() == 0
