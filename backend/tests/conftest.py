from datetime import datetime
from pathlib import Path
from uuid import uuid4
import os
import sys
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("AUTH_SECRET", "test-auth-secret")
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="internhub-uploads-"))

from internhub.api.deps import get_db
from internhub.core.database import Base, build_engine
from internhub.main import app
from internhub.models.entities import Internship, Student, UserAccount
from internhub.services.auth import create_access_token, hash_password

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]
TEST_PASSWORD = "Password123!"


@pytest.fixture
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'internhub-test.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def make_user(db, *, role: str = "student", name: str = "Test User", email: str | None = None) -> UserAccount:
    salt, digest = hash_password(TEST_PASSWORD)
    user = UserAccount(
        email=email or f"{uuid4().hex[:10]}@example.com",
        name=name,
        role=role,
        password_salt=salt,
        password_hash=digest,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_student(db, user: UserAccount, **fields) -> Student:
    now = datetime.utcnow()
    student = Student(
        user_id=user.id,
        roll_number=fields.pop("roll_number", f"CS{uuid4().hex[:8].upper()}"),
        department=fields.pop("department", "Computer Science"),
        approved=fields.pop("approved", True),
        created_at=now,
        updated_at=now,
        **fields,
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


def make_internship(db, *, posted_by=None, is_active: bool = True, **fields) -> Internship:
    now = datetime.utcnow()
    internship = Internship(
        title=fields.pop("title", "Backend Intern"),
        company_name=fields.pop("company_name", "Acme Labs"),
        location=fields.pop("location", "Pune"),
        type=fields.pop("type", "onsite"),
        required_skills=fields.pop("required_skills", ["Python"]),
        posted_by=posted_by,
        is_active=is_active,
        created_at=now,
        updated_at=now,
        **fields,
    )
    db.add(internship)
    db.commit()
    db.refresh(internship)
    return internship


def auth_headers(user: UserAccount) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
