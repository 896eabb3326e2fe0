import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, RedirectResponse
from sqlalchemy.orm import Session, joinedload

from internhub.api.deps import get_current_student, get_db
from internhub.core.ratelimit import ai_rate_limiter
from internhub.models.entities import (
    Application,
    Certification,
    CVGeneration,
    PortfolioProject,
    Student,
)
from internhub.schemas.api import CVGenerateOut, CVOut
from internhub.services.ai import ai_is_configured, generate_cv_html
from internhub.services.storage import (
    create_presigned_download_url,
    local_path_for,
    resolve_file_view_url,
    store_file,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cv")

DEFAULT_TEMPLATE = "default"


def _serialize_cv(cv: CVGeneration) -> dict:
    return {
        "id": cv.id,
        "student_id": cv.student_id,
        "template_name": cv.template_name,
        "file_url": cv.file_url,
        "format": cv.format,
        "generated_at": cv.generated_at,
    }


def _student_cv_data(db: Session, student: Student) -> dict:
    detail = student.detail
    projects = (
        db.query(PortfolioProject)
        .filter(PortfolioProject.student_id == student.id)
        .order_by(PortfolioProject.stars.desc())
        .all()
    )
    certifications = (
        db.query(Certification)
        .filter(Certification.student_id == student.id)
        .order_by(Certification.created_at.desc())
        .all()
    )
    applications = (
        db.query(Application)
        .options(joinedload(Application.internship))
        .filter(Application.student_id == student.id)
        .order_by(Application.applied_at.desc())
        .all()
    )
    return {
        "name": student.user.name if student.user else None,
        "email": student.user.email if student.user else None,
        "phone": student.phone,
        "department": student.department,
        "cgpa": student.cgpa,
        "roll_number": student.roll_number,
        "bio": detail.bio if detail else None,
        "skills": (detail.skills or []) if detail else [],
        "projects": [{"title": p.title, "description": p.description} for p in projects],
        "certifications": [{"title": c.title, "issuer": c.issuer} for c in certifications],
        "internships": [
            {
                "title": a.internship.title,
                "company": a.internship.company_name,
                "status": a.status,
            }
            for a in applications
            if a.internship
        ],
    }


@router.post("/generate", response_model=CVGenerateOut, status_code=201)
def generate_cv(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    if not ai_is_configured():
        raise HTTPException(status_code=503, detail="AI is not configured")
    ai_rate_limiter.check(f"cv:{student.user_id}")

    data = _student_cv_data(db, student)
    try:
        html = generate_cv_html(data)
    except RuntimeError as exc:
        logger.warning("CV generation failed for student %s: %s", student.id, exc)
        raise HTTPException(status_code=503, detail="CV generation is unavailable right now") from exc

    try:
        file_url = store_file(
            str(student.user_id),
            f"cv-{datetime.utcnow():%Y%m%d%H%M%S}.html",
            "text/html",
            html.encode("utf-8"),
            prefix="cvs",
        )
    except RuntimeError as exc:
        logger.exception("failed to store CV for student %s", student.id)
        raise HTTPException(status_code=502, detail="Unable to store the generated CV") from exc

    cv = CVGeneration(
        student_id=student.id,
        template_name=DEFAULT_TEMPLATE,
        file_url=file_url,
        format="html",
        generated_at=datetime.utcnow(),
    )
    db.add(cv)
    db.commit()
    db.refresh(cv)
    logger.info("generated CV %s for student %s", cv.id, student.id)
    return {"cv": _serialize_cv(cv), "preview_url": resolve_file_view_url(file_url)}


@router.get("/history", response_model=list[CVOut])
def cv_history(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(CVGeneration)
        .filter(CVGeneration.student_id == student.id)
        .order_by(CVGeneration.generated_at.desc())
        .all()
    )
    return [_serialize_cv(cv) for cv in rows]


@router.get("/download/{cv_id}")
def download_cv(
    cv_id: UUID,
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    cv = db.get(CVGeneration, cv_id)
    if not cv or cv.student_id != student.id:
        raise HTTPException(status_code=404, detail="CV not found")

    path = local_path_for(cv.file_url)
    if path is not None:
        if not path.is_file():
            raise HTTPException(status_code=404, detail="CV file is missing")
        return FileResponse(path, media_type="text/html", filename=f"cv-{cv.id}.html")

    presigned = create_presigned_download_url(cv.file_url)
    if not presigned:
        raise HTTPException(status_code=404, detail="CV file is missing")
    return RedirectResponse(presigned)
