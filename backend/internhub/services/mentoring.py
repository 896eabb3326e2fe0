"""Mentors, mentoring sessions and reviews.

A mentor's ``rating`` is always the mean of every review stored for that
mentor. It is recomputed in the database on each new review while the mentor
row is locked, so concurrent reviews cannot overwrite each other's result.
"""
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from internhub.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from internhub.models.entities import (
    Mentor,
    MentorReview,
    MentorSession,
    SessionStatus,
    Student,
    UserAccount,
    UserRole,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
VALID_SESSION_STATUSES = {status.value for status in SessionStatus}


def _normalize_expertise(expertise: list[str] | str | None) -> list[str]:
    if expertise is None:
        return []
    if isinstance(expertise, str):
        expertise = expertise.split(",")
    tags: list[str] = []
    for raw in expertise:
        tag = (raw or "").strip()
        if tag and tag.lower() not in {t.lower() for t in tags}:
            tags.append(tag)
    return tags


def register_mentor(
    db: Session,
    *,
    user: UserAccount,
    expertise: list[str] | str | None,
    bio: str | None,
) -> Mentor:
    existing = db.query(Mentor).filter(Mentor.user_id == user.id).one_or_none()
    if existing:
        raise ConflictError("Already registered as mentor")
    mentor = Mentor(
        user_id=user.id,
        expertise=_normalize_expertise(expertise),
        bio=bio,
        rating=0.0,
        created_at=datetime.utcnow(),
    )
    db.add(mentor)
    if user.role == UserRole.student.value:
        user.role = UserRole.mentor.value
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Already registered as mentor") from exc
    db.refresh(mentor)
    return mentor


def list_mentors(db: Session, *, expertise: str | None = None) -> list[Mentor]:
    mentors = (
        db.query(Mentor)
        .options(joinedload(Mentor.user))
        .order_by(Mentor.rating.desc(), Mentor.created_at.asc())
        .all()
    )
    if not expertise:
        return mentors
    needle = expertise.strip().lower()
    return [
        mentor
        for mentor in mentors
        if any(needle in (tag or "").lower() for tag in (mentor.expertise or []))
    ]


def get_mentor(db: Session, mentor_id: UUID) -> Mentor:
    mentor = db.query(Mentor).options(joinedload(Mentor.user)).filter(Mentor.id == mentor_id).one_or_none()
    if not mentor:
        raise NotFoundError("Mentor not found")
    return mentor


def update_mentor(
    db: Session,
    *,
    user: UserAccount,
    mentor_id: UUID,
    expertise: list[str] | str | None,
    bio: str | None,
) -> Mentor:
    mentor = get_mentor(db, mentor_id)
    if mentor.user_id != user.id:
        raise ForbiddenError("Only the mentor can edit this profile")
    if expertise is not None:
        mentor.expertise = _normalize_expertise(expertise)
    if bio is not None:
        mentor.bio = bio
    db.commit()
    db.refresh(mentor)
    return mentor


def mentor_counts(db: Session, mentor_id: UUID) -> dict[str, int]:
    sessions = db.query(func.count(MentorSession.id)).filter(MentorSession.mentor_id == mentor_id).scalar()
    reviews = db.query(func.count(MentorReview.id)).filter(MentorReview.mentor_id == mentor_id).scalar()
    return {"sessions": int(sessions or 0), "reviews": int(reviews or 0)}


def book_session(
    db: Session,
    *,
    student: Student,
    mentor_id: UUID,
    scheduled_at: datetime,
    meeting_link: str | None,
) -> MentorSession:
    mentor = db.get(Mentor, mentor_id)
    if not mentor:
        raise NotFoundError("Mentor not found")
    if mentor.user_id == student.user_id:
        raise BadRequestError("Mentors cannot book sessions with themselves")
    session = MentorSession(
        mentor_id=mentor_id,
        student_id=student.id,
        scheduled_at=scheduled_at,
        meeting_link=meeting_link,
        status=SessionStatus.scheduled.value,
        created_at=datetime.utcnow(),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def list_student_sessions(db: Session, student: Student) -> list[MentorSession]:
    return (
        db.query(MentorSession)
        .options(joinedload(MentorSession.mentor).joinedload(Mentor.user))
        .filter(MentorSession.student_id == student.id)
        .order_by(MentorSession.scheduled_at.desc())
        .all()
    )


def update_session_status(
    db: Session,
    *,
    user: UserAccount,
    session_id: UUID,
    status: str,
) -> MentorSession:
    if status not in VALID_SESSION_STATUSES:
        raise BadRequestError("Invalid status")
    session = (
        db.query(MentorSession)
        .options(joinedload(MentorSession.mentor), joinedload(MentorSession.student))
        .filter(MentorSession.id == session_id)
        .one_or_none()
    )
    if not session:
        raise NotFoundError("Session not found")
    is_mentor = session.mentor is not None and session.mentor.user_id == user.id
    is_student = session.student is not None and session.student.user_id == user.id
    if not is_mentor and not is_student:
        raise ForbiddenError("Only the session mentor or student can update it")
    session.status = status
    db.commit()
    db.refresh(session)
    return session


def recompute_mentor_rating(db: Session, mentor_id: UUID) -> None:
    average = (
        select(func.coalesce(func.avg(MentorReview.rating), 0.0))
        .where(MentorReview.mentor_id == mentor_id)
        .scalar_subquery()
    )
    db.execute(
        update(Mentor)
        .where(Mentor.id == mentor_id)
        .values(rating=average)
        .execution_options(synchronize_session=False)
    )


def add_review(
    db: Session,
    *,
    student: Student | None,
    mentor_id: UUID,
    rating: int,
    review_text: str | None,
) -> MentorReview:
    if rating < MIN_RATING or rating > MAX_RATING:
        raise BadRequestError("Rating must be between 1 and 5")
    if student is None:
        raise BadRequestError("Student profile required")

    mentor = db.query(Mentor).filter(Mentor.id == mentor_id).with_for_update().one_or_none()
    if not mentor:
        raise NotFoundError("Mentor not found")
    if mentor.user_id == student.user_id:
        raise BadRequestError("Mentors cannot review themselves")

    review = MentorReview(
        mentor_id=mentor_id,
        student_id=student.id,
        rating=rating,
        review_text=review_text,
        created_at=datetime.utcnow(),
    )
    db.add(review)
    db.flush()
    recompute_mentor_rating(db, mentor_id)
    db.commit()
    db.refresh(review)
    db.refresh(mentor)
    logger.info("review %s stored for mentor %s; rating now %.3f", review.id, mentor_id, mentor.rating)
    return review


def list_reviews(db: Session, mentor_id: UUID) -> list[MentorReview]:
    return (
        db.query(MentorReview)
        .options(joinedload(MentorReview.student).joinedload(Student.user))
        .filter(MentorReview.mentor_id == mentor_id)
        .order_by(MentorReview.created_at.desc())
        .all()
    )
