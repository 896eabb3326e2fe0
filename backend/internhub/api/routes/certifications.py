import logging
import os
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_student, get_db
from internhub.core.config import settings
from internhub.models.entities import Certification, Student
from internhub.schemas.api import CertificationOut, CertificationUpdateIn
from internhub.services.ai import ai_is_configured, extract_certificate_with_llm
from internhub.services.documents import extract_certificate_fields, extract_pdf_text, parse_date
from internhub.services.storage import resolve_file_view_url, store_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/certifications")

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf", ".doc", ".docx"}
DEFAULT_TITLE = "Untitled Certificate"
EDITABLE_FIELDS = ("title", "issuer", "issue_date", "credential_id", "credential_url")


def _serialize_certification(certification: Certification) -> dict:
    return {
        "id": certification.id,
        "student_id": certification.student_id,
        "title": certification.title,
        "issuer": certification.issuer,
        "issue_date": certification.issue_date,
        "credential_id": certification.credential_id,
        "credential_url": certification.credential_url,
        "document_url": certification.document_url,
        "document_view_url": resolve_file_view_url(certification.document_url),
        "source": certification.source,
        "created_at": certification.created_at,
    }


def _extract_fields(content: bytes) -> tuple[dict | None, str | None]:
    text = extract_pdf_text(content)
    if not text:
        return None, None
    if ai_is_configured():
        try:
            extracted = extract_certificate_with_llm(text)
        except RuntimeError as exc:
            logger.warning("certificate extraction by LLM failed, using rules: %s", exc)
        else:
            if extracted:
                return extracted, "ai"
    extracted = extract_certificate_fields(text)
    if any(extracted.values()):
        return extracted, "pdf"
    return None, None


def _get_owned(db: Session, student: Student, certification_id: UUID) -> Certification:
    certification = (
        db.query(Certification)
        .filter(Certification.id == certification_id, Certification.student_id == student.id)
        .one_or_none()
    )
    if not certification:
        raise HTTPException(status_code=404, detail="Certification not found")
    return certification


@router.post("/upload", response_model=CertificationOut, status_code=201)
def upload_certificate(
    certificate: UploadFile = File(...),
    title: str | None = Form(default=None),
    issuer: str | None = Form(default=None),
    issue_date: str | None = Form(default=None),
    credential_id: str | None = Form(default=None),
    credential_url: str | None = Form(default=None),
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    filename = os.path.basename(certificate.filename or "certificate")
    extension = os.path.splitext(filename)[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only images, PDFs, and documents are allowed")
    content = certificate.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        document_url = store_file(
            str(student.user_id),
            filename,
            certificate.content_type or "application/octet-stream",
            content,
            prefix="certificates",
        )
    except RuntimeError as exc:
        logger.exception("failed to store certificate for student %s", student.id)
        raise HTTPException(status_code=502, detail="Unable to store the uploaded file") from exc

    data = {
        "title": (title or "").strip() or DEFAULT_TITLE,
        "issuer": issuer or None,
        "issue_date": parse_date(issue_date),
        "credential_id": credential_id or None,
        "credential_url": credential_url or None,
    }
    source = "manual"
    if extension == ".pdf":
        extracted, extracted_source = _extract_fields(content)
        if extracted:
            for field in ("title", "issuer", "issue_date", "credential_id"):
                if extracted.get(field):
                    data[field] = extracted[field]
            source = extracted_source

    certification = Certification(
        student_id=student.id,
        document_url=document_url,
        source=source,
        created_at=datetime.utcnow(),
        **data,
    )
    db.add(certification)
    db.commit()
    db.refresh(certification)
    logger.info("certification %s stored for student %s (source=%s)", certification.id, student.id, source)
    return _serialize_certification(certification)


@router.get("", response_model=list[CertificationOut])
def list_certifications(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    certifications = (
        db.query(Certification)
        .filter(Certification.student_id == student.id)
        .order_by(Certification.issue_date.desc().nullslast(), Certification.created_at.desc())
        .all()
    )
    return [_serialize_certification(certification) for certification in certifications]


@router.put("/{certification_id}", response_model=CertificationOut)
def update_certification(
    certification_id: UUID,
    payload: CertificationUpdateIn,
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    certification = _get_owned(db, student, certification_id)
    changes = payload.model_dump(exclude_unset=True)
    if "title" in changes and not (changes["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Title cannot be empty")
    for field in EDITABLE_FIELDS:
        if field in changes:
            setattr(certification, field, changes[field])
    db.commit()
    db.refresh(certification)
    return _serialize_certification(certification)


@router.delete("/{certification_id}")
def delete_certification(
    certification_id: UUID,
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    certification = _get_owned(db, student, certification_id)
    db.delete(certification)
    db.commit()
    return {"ok": True}
