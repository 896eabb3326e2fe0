from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_user, get_db, is_staff
from internhub.api.serializers import serialize_application
from internhub.models.entities import Student, UserAccount
from internhub.schemas.api import ApplicationIn, ApplicationOut, ApplicationStatusIn
from internhub.services import applications as workflow

router = APIRouter(prefix="/applications")


@router.post("", response_model=ApplicationOut, status_code=201)
def submit_application(
    payload: ApplicationIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = workflow.submit_application(
        db,
        actor=user,
        student_id=payload.student_id,
        internship_id=payload.internship_id,
        cover_letter=payload.cover_letter,
        resume_url=payload.resume_url,
    )
    return serialize_application(application)


@router.get("", response_model=list[ApplicationOut])
def list_applications(
    student_id: UUID | None = None,
    internship_id: UUID | None = None,
    status: str | None = None,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not is_staff(user):
        own = db.query(Student).filter(Student.user_id == user.id).one_or_none()
        if not own:
            return []
        if student_id and student_id != own.id:
            raise HTTPException(status_code=403, detail="Not allowed")
        student_id = own.id
    applications = workflow.list_applications(
        db,
        student_id=student_id,
        internship_id=internship_id,
        status=status,
    )
    return [serialize_application(application) for application in applications]


@router.get("/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: UUID,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = workflow.get_application(db, application_id)
    is_owner = application.student is not None and application.student.user_id == user.id
    is_poster = application.internship is not None and application.internship.posted_by == user.id
    if not (is_owner or is_poster or is_staff(user)):
        raise HTTPException(status_code=403, detail="Not allowed")
    return serialize_application(application)


@router.patch("/{application_id}/status", response_model=ApplicationOut)
def update_application_status(
    application_id: UUID,
    payload: ApplicationStatusIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = workflow.update_status(
        db,
        actor=user,
        application_id=application_id,
        status=payload.status.strip().lower(),
        rejection_reason=payload.rejection_reason,
    )
    return serialize_application(application)


@router.delete("/{application_id}", response_model=ApplicationOut)
def withdraw_application(
    application_id: UUID,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = workflow.withdraw_application(db, actor=user, application_id=application_id)
    return serialize_application(application)
