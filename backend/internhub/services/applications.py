"""Internship application lifecycle.

Status moves through an explicit transition table. ``pending`` is the only
non-terminal state unless reopening withdrawn applications is enabled in
settings, in which case ``withdrawn -> pending`` is also allowed.
"""
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from internhub.core.config import settings
from internhub.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from internhub.models.entities import (
    STAFF_ROLES,
    Application,
    ApplicationStatus,
    Internship,
    Student,
    UserAccount,
)
from internhub.services.notifications import notify_application_status

logger = logging.getLogger(__name__)

VALID_STATUSES = {status.value for status in ApplicationStatus}

APPLICATION_TRANSITIONS: dict[str, set[str]] = {
    ApplicationStatus.pending.value: {
        ApplicationStatus.accepted.value,
        ApplicationStatus.rejected.value,
        ApplicationStatus.withdrawn.value,
    },
    ApplicationStatus.accepted.value: set(),
    ApplicationStatus.rejected.value: set(),
    ApplicationStatus.withdrawn.value: set(),
}


def allowed_transitions(current: str, *, allow_reopen_withdrawn: bool | None = None) -> set[str]:
    if allow_reopen_withdrawn is None:
        allow_reopen_withdrawn = settings.allow_reopen_withdrawn_applications
    allowed = set(APPLICATION_TRANSITIONS.get(current, set()))
    if allow_reopen_withdrawn and current == ApplicationStatus.withdrawn.value:
        allowed.add(ApplicationStatus.pending.value)
    return allowed


def can_transition(current: str, target: str, *, allow_reopen_withdrawn: bool | None = None) -> bool:
    return target in allowed_transitions(current, allow_reopen_withdrawn=allow_reopen_withdrawn)


def _load_application(db: Session, application_id: UUID) -> Application:
    application = (
        db.query(Application)
        .options(
            joinedload(Application.student).joinedload(Student.user),
            joinedload(Application.internship),
        )
        .filter(Application.id == application_id)
        .one_or_none()
    )
    if not application:
        raise NotFoundError("Application not found")
    return application


def submit_application(
    db: Session,
    *,
    actor: UserAccount,
    student_id: UUID,
    internship_id: UUID,
    cover_letter: str | None,
    resume_url: str | None,
) -> Application:
    student = db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    if student.user_id != actor.id and actor.role not in STAFF_ROLES:
        raise ForbiddenError("Applications can only be submitted for your own student profile")

    internship = db.get(Internship, internship_id)
    if not internship:
        raise NotFoundError("Internship not found")
    if not internship.is_active:
        raise ConflictError("Internship is not accepting applications")

    existing = (
        db.query(Application.id)
        .filter(Application.student_id == student_id, Application.internship_id == internship_id)
        .first()
    )
    if existing:
        raise ConflictError("Already applied to this internship")

    now = datetime.utcnow()
    application = Application(
        student_id=student_id,
        internship_id=internship_id,
        cover_letter=cover_letter,
        resume_url=resume_url,
        status=ApplicationStatus.pending.value,
        applied_at=now,
        updated_at=now,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent submit for the same pair won the unique constraint.
        db.rollback()
        raise ConflictError("Already applied to this internship") from exc

    logger.info("application %s submitted for internship %s", application.id, internship_id)
    return _load_application(db, application.id)


def list_applications(
    db: Session,
    *,
    student_id: UUID | None = None,
    internship_id: UUID | None = None,
    status: str | None = None,
) -> list[Application]:
    if status is not None and status not in VALID_STATUSES:
        raise BadRequestError("Invalid status")
    query = db.query(Application).options(
        joinedload(Application.student).joinedload(Student.user),
        joinedload(Application.internship),
    )
    if student_id:
        query = query.filter(Application.student_id == student_id)
    if internship_id:
        query = query.filter(Application.internship_id == internship_id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc()).all()


def get_application(db: Session, application_id: UUID) -> Application:
    return _load_application(db, application_id)


def _apply_transition(db: Session, application: Application, target: str) -> None:
    current = application.status
    if not can_transition(current, target):
        raise ConflictError(f"Cannot move application from {current} to {target}")
    application.status = target
    application.updated_at = datetime.utcnow()


def update_status(
    db: Session,
    *,
    actor: UserAccount,
    application_id: UUID,
    status: str,
    rejection_reason: str | None = None,
) -> Application:
    if status not in VALID_STATUSES:
        raise BadRequestError("Invalid status")

    application = _load_application(db, application_id)
    posted_by = application.internship.posted_by if application.internship else None
    if actor.role not in STAFF_ROLES and posted_by != actor.id:
        raise ForbiddenError("Only staff or the internship poster can review applications")

    previous = application.status
    _apply_transition(db, application, status)
    application.reviewed_at = datetime.utcnow()
    if status == ApplicationStatus.rejected.value and rejection_reason:
        application.rejection_reason = rejection_reason
    db.commit()

    logger.info("application %s moved %s -> %s by %s", application.id, previous, status, actor.id)
    notify_application_status(db, application)
    return _load_application(db, application.id)


def withdraw_application(db: Session, *, actor: UserAccount, application_id: UUID) -> Application:
    application = _load_application(db, application_id)
    if not application.student or application.student.user_id != actor.id:
        raise ForbiddenError("Only the applicant can withdraw an application")

    previous = application.status
    _apply_transition(db, application, ApplicationStatus.withdrawn.value)
    db.commit()

    logger.info("application %s withdrawn (was %s)", application.id, previous)
    return _load_application(db, application.id)
