import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from internhub.api.deps import get_db
from internhub.core.config import settings
from internhub.core.ratelimit import auth_login_rate_limiter
from internhub.models.entities import AuthSession, UserAccount, UserRole
from internhub.schemas.api import (
    AuthActionOut,
    AuthLoginIn,
    AuthLogoutIn,
    AuthOut,
    AuthRefreshIn,
    AuthRegisterIn,
)
from internhub.services.auth import (
    create_access_token,
    create_refresh_token,
    expiry_from_now,
    hash_password,
    hash_token,
    is_valid_email,
    password_policy_issues,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _request_context(request: Request) -> tuple[str | None, str | None]:
    ip_address = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    return ip_address, user_agent


def _issue_session_tokens(db: Session, *, user: UserAccount, request: Request) -> dict:
    refresh_raw = create_refresh_token()
    now = datetime.utcnow()
    refresh_expires_at = expiry_from_now(settings.auth_refresh_token_ttl_seconds)
    ip_address, user_agent = _request_context(request)

    db.add(
        AuthSession(
            user_id=user.id,
            refresh_token_hash=hash_token(refresh_raw),
            created_at=now,
            expires_at=refresh_expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    )
    db.commit()

    return {
        "user_id": user.id,
        "role": user.role,
        "auth_token": create_access_token(str(user.id)),
        "refresh_token": refresh_raw,
        "access_expires_at": expiry_from_now(settings.auth_token_ttl_seconds),
        "refresh_expires_at": refresh_expires_at,
    }


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: AuthRegisterIn,
    request: Request,
    x_admin_token: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    email = _normalize_email(payload.email)
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="A valid email is required")
    issues = password_policy_issues(payload.password)
    if issues:
        raise HTTPException(status_code=400, detail="Password needs " + ", ".join(issues))
    if payload.role != UserRole.student.value:
        if not settings.admin_token or x_admin_token != settings.admin_token:
            raise HTTPException(status_code=403, detail="Staff accounts require a valid admin token")

    if db.query(UserAccount.id).filter(UserAccount.email == email).first():
        raise HTTPException(status_code=409, detail="Email already exists")

    salt, digest = hash_password(payload.password)
    account = UserAccount(
        email=email,
        name=name,
        role=payload.role,
        password_salt=salt,
        password_hash=digest,
        created_at=datetime.utcnow(),
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already exists") from exc
    db.refresh(account)
    logger.info("registered %s account %s", account.role, account.id)
    return _issue_session_tokens(db, user=account, request=request)


@router.post("/login", response_model=AuthOut)
def login(payload: AuthLoginIn, request: Request, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    ip_address, _ = _request_context(request)
    throttle_key = f"{email}:{ip_address}"
    auth_login_rate_limiter.check(throttle_key)

    account = db.query(UserAccount).filter(UserAccount.email == email).one_or_none()
    if not account or not account.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not verify_password(payload.password, account.password_salt, account.password_hash):
        logger.info("failed login for account %s", account.id)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    auth_login_rate_limiter.clear(throttle_key)
    account.last_login_at = datetime.utcnow()
    db.commit()
    return _issue_session_tokens(db, user=account, request=request)


@router.post("/refresh", response_model=AuthOut)
def refresh_token(payload: AuthRefreshIn, request: Request, db: Session = Depends(get_db)):
    session = (
        db.query(AuthSession)
        .filter(AuthSession.refresh_token_hash == hash_token(payload.refresh_token))
        .one_or_none()
    )
    if not session or session.revoked_at is not None or session.expires_at < datetime.utcnow():
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    account = db.get(UserAccount, session.user_id)
    if not account or not account.is_active:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    session.revoked_at = datetime.utcnow()
    db.commit()
    return _issue_session_tokens(db, user=account, request=request)


@router.post("/logout", response_model=AuthActionOut)
def logout(payload: AuthLogoutIn, db: Session = Depends(get_db)):
    session = (
        db.query(AuthSession)
        .filter(AuthSession.refresh_token_hash == hash_token(payload.refresh_token))
        .one_or_none()
    )
    if not session or session.revoked_at is not None:
        return {"ok": True, "message": "Session already ended."}
    session.revoked_at = datetime.utcnow()
    db.commit()
    return {"ok": True, "message": "Logged out."}
