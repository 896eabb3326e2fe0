"""GitHub account linking and portfolio sync for students."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from internhub.api.deps import get_current_student, get_current_user, get_db
from internhub.models.entities import PortfolioProject, Student, UserAccount
from internhub.schemas.api import GithubConnectIn, PortfolioProjectOut
from internhub.services import github_client, portfolio

router = APIRouter(prefix="/github")


def _serialize_project(project: PortfolioProject) -> dict:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "github_url": project.github_url,
        "live_url": project.live_url,
        "tags": project.tags or [],
        "source": project.source,
        "stars": project.stars or 0,
        "forks": project.forks or 0,
        "language": project.language,
        "last_synced_at": project.last_synced_at,
    }


@router.get("/auth-url")
def github_auth_url(user: UserAccount = Depends(get_current_user)):
    return {"url": github_client.oauth_url(state=str(user.id))}


@router.get("/callback")
def github_callback(code: str | None = None):
    if not code:
        raise HTTPException(status_code=400, detail="Code required")
    access_token = github_client.exchange_code(code)
    github_user = github_client.get_user(access_token)
    return {
        "github_username": github_user["login"],
        "token": access_token,
        "message": "Use this token with the /connect endpoint",
    }


@router.post("/connect")
def github_connect(
    payload: GithubConnectIn,
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token = payload.github_token.strip()
    if not token:
        raise HTTPException(status_code=400, detail="GitHub token required")
    username = portfolio.connect_account(db, user, token)
    return {"ok": True, "username": username}


@router.post("/sync-repos")
def github_sync_repos(
    user: UserAccount = Depends(get_current_user),
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return {"ok": True, **portfolio.sync_repositories(db, user, student)}


@router.get("/projects", response_model=list[PortfolioProjectOut])
def github_projects(
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return [_serialize_project(project) for project in portfolio.list_projects(db, student)]


@router.post("/disconnect")
def github_disconnect(
    user: UserAccount = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    portfolio.disconnect_account(db, user)
    return {"ok": True}
