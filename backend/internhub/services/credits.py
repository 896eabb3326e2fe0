"""Per-student credits ledger.

``credits.credits_earned`` only ever grows. Awards are applied with a single
``UPDATE ... SET credits_earned = credits_earned + :amount`` and the first row
for a student is inserted inside a savepoint, falling back to the increment if
another transaction inserted it first.
"""
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from internhub.core.errors import BadRequestError, NotFoundError
from internhub.models.entities import Credit, CreditAward, Student

logger = logging.getLogger(__name__)


def _find_credit(db: Session, student_id: UUID) -> Credit | None:
    return db.query(Credit).filter(Credit.student_id == student_id).one_or_none()


def _insert_credit(db: Session, student_id: UUID, amount: int) -> bool:
    now = datetime.utcnow()
    try:
        with db.begin_nested():
            db.add(Credit(student_id=student_id, credits_earned=amount, created_at=now, updated_at=now))
    except IntegrityError:
        return False
    return True


def _increment(db: Session, student_id: UUID, amount: int) -> int:
    result = db.execute(
        update(Credit)
        .where(Credit.student_id == student_id)
        .values(
            credits_earned=Credit.credits_earned + amount,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def get_or_create_credits(db: Session, student_id: UUID) -> Credit:
    credit = _find_credit(db, student_id)
    if credit:
        return credit
    _insert_credit(db, student_id, 0)
    db.commit()
    return _find_credit(db, student_id)


def award_credits(
    db: Session,
    *,
    student_id: UUID,
    amount: int,
    reason: str | None,
    awarded_by: UUID | None,
) -> Credit:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise BadRequestError("Amount must be a positive integer")
    if not db.get(Student, student_id):
        raise NotFoundError("Student not found")

    if not _increment(db, student_id, amount):
        if not _insert_credit(db, student_id, amount):
            _increment(db, student_id, amount)

    db.add(
        CreditAward(
            student_id=student_id,
            amount=amount,
            reason=reason,
            awarded_by=awarded_by,
            created_at=datetime.utcnow(),
        )
    )
    db.commit()

    credit = _find_credit(db, student_id)
    db.refresh(credit)
    logger.info("awarded %s credits to student %s (total %s)", amount, student_id, credit.credits_earned)
    return credit


def list_awards(db: Session, student_id: UUID) -> list[CreditAward]:
    return (
        db.query(CreditAward)
        .filter(CreditAward.student_id == student_id)
        .order_by(CreditAward.created_at.desc())
        .all()
    )
