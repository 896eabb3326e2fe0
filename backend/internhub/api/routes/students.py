from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from internhub.api.deps import get_current_user, get_db, is_staff, require_staff
from internhub.api.serializers import serialize_student, serialize_student_detail
from internhub.models.entities import Student, StudentDetail, UserAccount
from internhub.schemas.api import (
    StudentApprovalIn,
    StudentDetailIn,
    StudentDetailOut,
    StudentIn,
    StudentOut,
    StudentUpdateIn,
)

router = APIRouter(prefix="/students")


def _load_student(db: Session, student_id: UUID) -> Student:
    student = (
        db.query(Student)
        .options(joinedload(Student.user), joinedload(Student.detail))
        .filter(Student.id == student_id)
        .one_or_none()
    )
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


def _ensure_owner_or_staff(student: Student, user: UserAccount) -> None:
    if student.user_id != user.id and not is_staff(user):
        raise HTTPException(status_code=403, detail="Not allowed")


@router.post("", response_model=StudentOut, status_code=201)
def create_student(
    payload: StudentIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if db.query(Student.id).filter(Student.user_id == user.id).first():
        raise HTTPException(status_code=409, detail="Student profile already exists")
    roll_number = payload.roll_number.strip()
    if not roll_number:
        raise HTTPException(status_code=400, detail="Roll number is required")
    if db.query(Student.id).filter(Student.roll_number == roll_number).first():
        raise HTTPException(status_code=409, detail="Roll number already registered")

    now = datetime.utcnow()
    student = Student(
        user_id=user.id,
        roll_number=roll_number,
        department=payload.department,
        semester=payload.semester,
        cgpa=payload.cgpa,
        date_of_birth=payload.date_of_birth,
        phone=payload.phone,
        approved=False,
        created_at=now,
        updated_at=now,
    )
    db.add(student)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail="Student profile already exists") from exc
    return serialize_student(_load_student(db, student.id))


@router.get("", response_model=list[StudentOut])
def list_students(
    department: str | None = None,
    approved: bool | None = None,
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    query = db.query(Student).options(joinedload(Student.user))
    if department:
        query = query.filter(Student.department == department)
    if approved is not None:
        query = query.filter(Student.approved.is_(approved))
    students = query.order_by(Student.created_at.desc()).all()
    return [serialize_student(student) for student in students]


@router.get("/me", response_model=StudentOut)
def get_my_student(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = (
        db.query(Student)
        .options(joinedload(Student.user), joinedload(Student.detail))
        .filter(Student.user_id == user.id)
        .one_or_none()
    )
    if not student:
        raise HTTPException(status_code=404, detail="Student profile not found")
    return serialize_student(student, include_detail=True)


@router.get("/{student_id}", response_model=StudentOut)
def get_student(
    student_id: UUID,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = _load_student(db, student_id)
    _ensure_owner_or_staff(student, user)
    return serialize_student(student, include_detail=True)


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: UUID,
    payload: StudentUpdateIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = _load_student(db, student_id)
    _ensure_owner_or_staff(student, user)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    roll_number = changes.get("roll_number")
    if roll_number is not None:
        roll_number = roll_number.strip()
        clash = (
            db.query(Student.id)
            .filter(Student.roll_number == roll_number, Student.id != student.id)
            .first()
        )
        if not roll_number or clash:
            raise HTTPException(status_code=409, detail="Roll number already registered")
        changes["roll_number"] = roll_number
    for field, value in changes.items():
        setattr(student, field, value)
    student.updated_at = datetime.utcnow()
    db.commit()
    return serialize_student(_load_student(db, student.id), include_detail=True)


@router.post("/{student_id}/approve", response_model=StudentOut)
def set_student_approval(
    student_id: UUID,
    payload: StudentApprovalIn | None = None,
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    student = _load_student(db, student_id)
    student.approved = payload.approved if payload else True
    student.updated_at = datetime.utcnow()
    db.commit()
    return serialize_student(_load_student(db, student.id))


@router.post("/{student_id}/profile", response_model=StudentDetailOut)
def upsert_student_detail(
    student_id: UUID,
    payload: StudentDetailIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = _load_student(db, student_id)
    _ensure_owner_or_staff(student, user)

    detail = student.detail
    if detail is None:
        detail = StudentDetail(student_id=student.id)
        db.add(detail)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(detail, field, value)
    detail.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(detail)
    return serialize_student_detail(detail)
