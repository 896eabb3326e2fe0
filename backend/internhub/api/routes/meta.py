import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from internhub.core.config import settings
from internhub.core.database import engine
from internhub.services.ai import ai_is_configured, get_active_ai_model, get_active_ai_provider
from internhub.services.github_client import oauth_is_configured
from internhub.services.mailer import mail_is_configured
from internhub.services.storage import s3_is_enabled

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meta")


@router.get("/ai")
def ai_meta():
    return {
        "ai_enabled": ai_is_configured(),
        "model": get_active_ai_model(),
        "provider": get_active_ai_provider(),
    }


@router.get("/storage")
def storage_meta():
    return {
        "s3_enabled": s3_is_enabled(),
        "s3_bucket": settings.s3_bucket,
        "s3_region": settings.s3_region,
        "local_enabled": True,
    }


@router.get("/health")
def health_meta():
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        logger.exception("database health check failed")
    return {
        "ok": db_ok,
        "database": {"ok": db_ok},
        "ai": {
            "enabled": ai_is_configured(),
            "provider": get_active_ai_provider(),
            "model": get_active_ai_model(),
        },
        "storage": {
            "s3_enabled": s3_is_enabled(),
            "local_enabled": True,
        },
        "mail": {"enabled": mail_is_configured()},
        "github_oauth": {"enabled": oauth_is_configured()},
    }
