from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from internhub.api.deps import get_db, require_staff
from internhub.api.serializers import serialize_internship
from internhub.models.entities import Application, Internship, UserAccount
from internhub.schemas.api import InternshipIn, InternshipOut, InternshipUpdateIn

router = APIRouter(prefix="/internships")


def _clean_skills(skills: list[str] | None) -> list[str]:
    return [skill.strip() for skill in (skills or []) if skill and skill.strip()]


def _get_internship(db: Session, internship_id: UUID) -> Internship:
    internship = db.get(Internship, internship_id)
    if not internship:
        raise HTTPException(status_code=404, detail="Internship not found")
    return internship


def _applications_count(db: Session, internship_id: UUID) -> int:
    count = db.query(func.count(Application.id)).filter(Application.internship_id == internship_id).scalar()
    return int(count or 0)


@router.post("", response_model=InternshipOut, status_code=201)
def create_internship(
    payload: InternshipIn,
    user: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    title = payload.title.strip()
    company_name = payload.company_name.strip()
    if not title or not company_name:
        raise HTTPException(status_code=400, detail="Title and company name are required")

    now = datetime.utcnow()
    internship = Internship(
        title=title,
        description=payload.description,
        company_name=company_name,
        location=payload.location,
        type=payload.type,
        duration=payload.duration,
        stipend=payload.stipend,
        required_skills=_clean_skills(payload.required_skills),
        start_date=payload.start_date,
        end_date=payload.end_date,
        application_deadline=payload.application_deadline,
        posted_by=user.id,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(internship)
    db.commit()
    db.refresh(internship)
    return serialize_internship(internship, applications_count=0)


@router.get("", response_model=list[InternshipOut])
def list_internships(
    location: str | None = None,
    type: str | None = None,
    is_active: bool | None = None,
    db: Session = Depends(get_db),
):
    counts = (
        db.query(Application.internship_id, func.count(Application.id).label("applications"))
        .group_by(Application.internship_id)
        .subquery()
    )
    query = db.query(Internship, func.coalesce(counts.c.applications, 0)).outerjoin(
        counts, counts.c.internship_id == Internship.id
    )
    if location:
        query = query.filter(Internship.location.ilike(f"%{location.strip()}%"))
    if type:
        query = query.filter(Internship.type == type)
    if is_active is not None:
        query = query.filter(Internship.is_active.is_(is_active))
    rows = query.order_by(Internship.created_at.desc()).all()
    return [serialize_internship(internship, applications_count=int(count)) for internship, count in rows]


@router.get("/{internship_id}", response_model=InternshipOut)
def get_internship(internship_id: UUID, db: Session = Depends(get_db)):
    internship = _get_internship(db, internship_id)
    return serialize_internship(internship, applications_count=_applications_count(db, internship.id))


@router.put("/{internship_id}", response_model=InternshipOut)
def update_internship(
    internship_id: UUID,
    payload: InternshipUpdateIn,
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    internship = _get_internship(db, internship_id)
    changes = payload.model_dump(exclude_unset=True)
    if "required_skills" in changes:
        changes["required_skills"] = _clean_skills(changes["required_skills"])
    for field in ("title", "company_name", "type", "is_active"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    for field, value in changes.items():
        setattr(internship, field, value)
    internship.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(internship)
    return serialize_internship(internship, applications_count=_applications_count(db, internship.id))


@router.delete("/{internship_id}", response_model=InternshipOut)
def delete_internship(
    internship_id: UUID,
    _: UserAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    internship = _get_internship(db, internship_id)
    internship.is_active = False
    internship.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(internship)
    return serialize_internship(internship, applications_count=_applications_count(db, internship.id))
