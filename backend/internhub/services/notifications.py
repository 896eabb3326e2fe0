import logging
from datetime import datetime

from sqlalchemy.orm import Session

from internhub.models.entities import Application, UserNotification
from internhub.services.mailer import mail_is_configured, send_application_status_email

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    user_id,
    kind: str,
    title: str,
    message: str,
    metadata: dict | None = None,
) -> UserNotification:
    notification = UserNotification(
        user_id=user_id,
        kind=kind,
        title=title,
        message=message,
        metadata_json=metadata,
        is_read=False,
        created_at=datetime.utcnow(),
    )
    db.add(notification)
    db.commit()
    return notification


def notify_application_status(db: Session, application: Application) -> None:
    """Tell the applicant about a status change; failures never reach the caller."""
    student = application.student
    internship = application.internship
    if not student or not internship:
        return
    title = f"Application {application.status}"
    message = f"Your application for {internship.title} at {internship.company_name} is now {application.status}."
    if application.rejection_reason:
        message += f" Reason: {application.rejection_reason}"
    try:
        create_notification(
            db,
            user_id=student.user_id,
            kind="application_status",
            title=title,
            message=message,
            metadata={"application_id": str(application.id), "status": application.status},
        )
    except Exception:
        db.rollback()
        logger.exception("failed to store status notification for application %s", application.id)
        return

    if not mail_is_configured() or not student.user or not student.user.email:
        return
    try:
        send_application_status_email(
            to_email=student.user.email,
            name=student.user.name,
            internship_title=internship.title,
            company_name=internship.company_name,
            status=application.status,
            rejection_reason=application.rejection_reason,
        )
    except Exception:
        logger.exception("failed to email status change for application %s", application.id)
