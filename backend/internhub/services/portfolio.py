import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from internhub.core.errors import BadRequestError
from internhub.models.entities import PortfolioProject, Student, UserAccount
from internhub.services import github_client

logger = logging.getLogger(__name__)

SYNCED_REPO_LIMIT = 10


def connect_account(db: Session, user: UserAccount, access_token: str) -> str:
    github_user = github_client.get_user(access_token)
    user.github_username = github_user["login"]
    user.github_token = access_token
    user.github_connected_at = datetime.utcnow()
    db.commit()
    logger.info("user %s connected GitHub account %s", user.id, user.github_username)
    return user.github_username


def disconnect_account(db: Session, user: UserAccount) -> None:
    user.github_username = None
    user.github_token = None
    user.github_connected_at = None
    user.last_github_sync = None
    db.commit()


def _apply_repo(project: PortfolioProject, repo: dict[str, Any], now: datetime) -> None:
    project.title = repo.get("name") or "Untitled repository"
    project.description = repo.get("description") or "No description"
    project.github_url = repo.get("html_url")
    project.live_url = repo.get("homepage") or None
    project.tags = list(repo.get("topics") or [])
    project.stars = int(repo.get("stargazers_count") or 0)
    project.forks = int(repo.get("forks_count") or 0)
    project.language = repo.get("language")
    project.last_synced_at = now


def sync_repositories(db: Session, user: UserAccount, student: Student) -> dict[str, Any]:
    """Upsert the student's most-starred repositories as portfolio projects."""
    if not user.github_token or not user.github_username:
        raise BadRequestError("GitHub not connected. Use /connect first")

    repos = github_client.list_repos(user.github_token, user.github_username)
    top = github_client.top_repos(repos, limit=SYNCED_REPO_LIMIT)
    now = datetime.utcnow()

    for repo in top:
        repo_id = str(repo.get("id") or "")
        if not repo_id:
            continue
        project = (
            db.query(PortfolioProject).filter(PortfolioProject.github_repo_id == repo_id).one_or_none()
        )
        if project is None:
            project = PortfolioProject(
                student_id=student.id,
                github_repo_id=repo_id,
                source="github",
                created_at=now,
            )
            db.add(project)
        _apply_repo(project, repo, now)

    user.last_github_sync = now
    db.commit()
    logger.info("synced %s GitHub repositories for student %s", len(top), student.id)
    return {
        "projects_count": len(top),
        "repos": [
            {
                "name": repo.get("name"),
                "stars": int(repo.get("stargazers_count") or 0),
                "language": repo.get("language"),
            }
            for repo in top
        ],
        "skills": github_client.extract_skills_from_repos(repos),
    }


def list_projects(db: Session, student: Student) -> list[PortfolioProject]:
    return (
        db.query(PortfolioProject)
        .filter(PortfolioProject.student_id == student.id)
        .order_by(PortfolioProject.stars.desc(), PortfolioProject.created_at.desc())
        .all()
    )
