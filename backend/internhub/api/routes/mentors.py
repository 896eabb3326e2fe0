from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_student, get_current_user, get_db, require_staff
from internhub.api.serializers import serialize_mentor, serialize_user_summary
from internhub.models.entities import (
    Credit,
    CreditAward,
    MentorReview,
    MentorSession,
    Student,
    UserAccount,
)
from internhub.schemas.api import (
    CreditAwardIn,
    CreditAwardOut,
    CreditOut,
    MentorOut,
    MentorRegisterIn,
    MentorReviewIn,
    MentorReviewOut,
    MentorSessionIn,
    MentorSessionOut,
    MentorSessionStatusIn,
    MentorUpdateIn,
)
from internhub.services import credits as ledger
from internhub.services import mentoring

router = APIRouter(prefix="/mentor")


def _serialize_session(session: MentorSession) -> dict:
    mentor = session.mentor
    return {
        "id": session.id,
        "mentor_id": session.mentor_id,
        "student_id": session.student_id,
        "scheduled_at": session.scheduled_at,
        "meeting_link": session.meeting_link,
        "status": session.status,
        "mentor": serialize_user_summary(mentor.user, include_email=False) if mentor else None,
        "created_at": session.created_at,
    }


def _serialize_review(review: MentorReview) -> dict:
    student = review.student
    return {
        "id": review.id,
        "mentor_id": review.mentor_id,
        "student_id": review.student_id,
        "rating": review.rating,
        "reviews": review.review_text,
        "student_name": student.user.name if student and student.user else None,
        "created_at": review.created_at,
    }


def _serialize_credit(credit: Credit) -> dict:
    return {
        "id": credit.id,
        "student_id": credit.student_id,
        "credits_earned": credit.credits_earned,
        "created_at": credit.created_at,
        "updated_at": credit.updated_at,
    }


def _serialize_award(award: CreditAward) -> dict:
    return {
        "id": award.id,
        "student_id": award.student_id,
        "amount": award.amount,
        "reason": award.reason,
        "awarded_by": award.awarded_by,
        "created_at": award.created_at,
    }


@router.post("/register", response_model=MentorOut, status_code=201)
def register_mentor(
    payload: MentorRegisterIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    mentor = mentoring.register_mentor(db, user=user, expertise=payload.expertise, bio=payload.bio)
    return serialize_mentor(mentor, counts={"sessions": 0, "reviews": 0})


@router.get("", response_model=list[MentorOut])
def list_mentors(expertise: str | None = None, db: Session = Depends(get_db)):
    return [serialize_mentor(mentor) for mentor in mentoring.list_mentors(db, expertise=expertise)]


@router.post("/sessions", response_model=MentorSessionOut, status_code=201)
def book_session(
    payload: MentorSessionIn,
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    session = mentoring.book_session(
        db,
        student=student,
        mentor_id=payload.mentor_id,
        scheduled_at=payload.scheduled_at,
        meeting_link=payload.meeting_link,
    )
    return _serialize_session(session)


@router.get("/sessions/my", response_model=list[MentorSessionOut])
def my_sessions(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return [_serialize_session(session) for session in mentoring.list_student_sessions(db, student)]


@router.patch("/sessions/{session_id}/status", response_model=MentorSessionOut)
def update_session_status(
    session_id: UUID,
    payload: MentorSessionStatusIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = mentoring.update_session_status(
        db,
        user=user,
        session_id=session_id,
        status=payload.status.strip().lower(),
    )
    return _serialize_session(session)


@router.post("/reviews", response_model=MentorReviewOut, status_code=201)
def add_review(
    payload: MentorReviewIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = db.query(Student).filter(Student.user_id == user.id).one_or_none()
    review = mentoring.add_review(
        db,
        student=student,
        mentor_id=payload.mentor_id,
        rating=payload.rating,
        review_text=payload.reviews,
    )
    return _serialize_review(review)


@router.get("/credits/my", response_model=CreditOut)
def my_credits(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return _serialize_credit(ledger.get_or_create_credits(db, student.id))


@router.get("/credits/my/history", response_model=list[CreditAwardOut])
def my_credit_history(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return [_serialize_award(award) for award in ledger.list_awards(db, student.id)]


@router.post("/credits/{student_id}/add", response_model=CreditOut)
def award_credits(
    student_id: UUID,
    payload: CreditAwardIn,
    user: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    credit = ledger.award_credits(
        db,
        student_id=student_id,
        amount=payload.amount,
        reason=payload.reason,
        awarded_by=user.id,
    )
    return _serialize_credit(credit)


@router.get("/{mentor_id}", response_model=MentorOut)
def get_mentor(mentor_id: UUID, db: Session = Depends(get_db)):
    mentor = mentoring.get_mentor(db, mentor_id)
    return serialize_mentor(mentor, counts=mentoring.mentor_counts(db, mentor.id))


@router.put("/{mentor_id}", response_model=MentorOut)
def update_mentor(
    mentor_id: UUID,
    payload: MentorUpdateIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    mentor = mentoring.update_mentor(
        db,
        user=user,
        mentor_id=mentor_id,
        expertise=payload.expertise,
        bio=payload.bio,
    )
    return serialize_mentor(mentor, counts=mentoring.mentor_counts(db, mentor.id))


@router.get("/{mentor_id}/reviews", response_model=list[MentorReviewOut])
def list_reviews(mentor_id: UUID, db: Session = Depends(get_db)):
    mentoring.get_mentor(db, mentor_id)
    return [_serialize_review(review) for review in mentoring.list_reviews(db, mentor_id)]
