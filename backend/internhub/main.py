import logging
from contextlib import asynccontextmanager
from pathlib import Path
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from internhub.api.routes import (
    applications,
    auth,
    certifications,
    chat,
    cv,
    github,
    internships,
    mentors,
    meta,
    notifications,
    students,
    users,
)
from internhub.core.config import settings
from internhub.core.database import engine
from internhub.core.errors import AppError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("internhub")


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        yield
    finally:
        engine.dispose()


app = FastAPI(title="InternHub API", version="0.1.0", lifespan=lifespan)

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "X-Auth-Token",
        "X-Admin-Token",
        "X-Request-Id",
    ],
)

upload_dir = Path(settings.local_upload_dir)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid4().hex
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Runs outside add_request_id, so the header has to be set here.
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-Id") or uuid4().hex
    logger.exception(
        "unhandled error on %s %s request_id=%s", request.method, request.url.path, request_id, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
        headers={"X-Request-Id": request_id},
    )


for module, tag in (
    (auth, "auth"),
    (users, "users"),
    (students, "students"),
    (internships, "internships"),
    (applications, "applications"),
    (mentors, "mentor"),
    (notifications, "notifications"),
    (chat, "chat"),
    (certifications, "certifications"),
    (cv, "cv"),
    (github, "github"),
    (meta, "meta"),
):
    app.include_router(module.router, tags=[tag], prefix="/api")
