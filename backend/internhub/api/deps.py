from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from internhub.core.config import settings
from internhub.core.database import SessionLocal
from internhub.models.entities import STAFF_ROLES, Student, UserAccount
from internhub.services.auth import verify_auth_token


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user_id(
    authorization: str | None = Header(default=None),
    x_auth_token: str | None = Header(default=None),
) -> UUID:
    token = _bearer_token(authorization) or x_auth_token
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    user_id = verify_auth_token(token)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired auth token")
    try:
        return UUID(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid or expired auth token") from exc


def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> UserAccount:
    user = db.get(UserAccount, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Account not found or inactive")
    return user


def is_staff(user: UserAccount) -> bool:
    return user.role in STAFF_ROLES


def require_staff(user: UserAccount = Depends(get_current_user)) -> UserAccount:
    if not is_staff(user):
        raise HTTPException(status_code=403, detail="Faculty or admin role required")
    return user


def get_current_student(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Student:
    student = db.query(Student).filter(Student.user_id == user.id).one_or_none()
    if not student:
        raise HTTPException(status_code=404, detail="Student profile not found")
    return student


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    if not settings.admin_token:
        raise HTTPException(status_code=500, detail="Admin token not configured")
    if not x_admin_token or x_admin_token != settings.admin_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")
