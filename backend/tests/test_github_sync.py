from internhub.models.entities import PortfolioProject, UserAccount
from internhub.services import github_client

from conftest import auth_headers, make_student, make_user


def _repo(repo_id, stars, language="Python", **extra):
    return {
        "id": repo_id,
        "name": f"repo-{repo_id}",
        "description": extra.get("description"),
        "html_url": f"https://github.com/octo/repo-{repo_id}",
        "homepage": extra.get("homepage"),
        "topics": extra.get("topics", []),
        "stargazers_count": stars,
        "forks_count": 1,
        "language": language,
    }


def _connected(client, db_session, monkeypatch):
    monkeypatch.setattr(github_client, "get_user", lambda token: {"login": "octo"})
    user = make_user(db_session)
    student = make_student(db_session, user)
    headers = auth_headers(user)
    connected = client.post("/api/github/connect", json={"github_token": "gho_test"}, headers=headers)
    assert connected.json() == {"ok": True, "username": "octo"}
    return user, student, headers


def test_sync_keeps_top_ten_by_stars(client, db_session, monkeypatch):
    _, student, headers = _connected(client, db_session, monkeypatch)
    repos = [_repo(i, stars=i) for i in range(1, 13)]
    monkeypatch.setattr(github_client, "list_repos", lambda token, username: repos)

    synced = client.post("/api/github/sync-repos", headers=headers)

    assert synced.status_code == 200
    assert synced.json()["projects_count"] == 10
    projects = client.get("/api/github/projects", headers=headers).json()
    assert [p["stars"] for p in projects] == list(range(12, 2, -1))
    assert projects[0]["description"] == "No description"
    assert all(p["source"] == "github" for p in projects)


def test_resync_updates_existing_projects(client, db_session, monkeypatch):
    _, student, headers = _connected(client, db_session, monkeypatch)
    first = [_repo(7, stars=3, description="v1")]
    second = [_repo(7, stars=30, description="v2")]

    monkeypatch.setattr(github_client, "list_repos", lambda token, username: first)
    client.post("/api/github/sync-repos", headers=headers)
    monkeypatch.setattr(github_client, "list_repos", lambda token, username: second)
    client.post("/api/github/sync-repos", headers=headers)

    rows = db_session.query(PortfolioProject).filter(PortfolioProject.student_id == student.id).all()
    assert len(rows) == 1
    assert rows[0].stars == 30
    assert rows[0].description == "v2"


def test_skill_proficiency_from_language_counts():
    repos = [_repo(i, 0, "Python") for i in range(5)] + [_repo(9, 0, "Go"), _repo(10, 0, None)]

    skills = github_client.extract_skills_from_repos(repos)

    assert skills == [
        {"name": "Python", "proficiency_level": 3, "source": "github"},
        {"name": "Go", "proficiency_level": 1, "source": "github"},
    ]


def test_sync_requires_connection(client, db_session):
    user = make_user(db_session)
    make_student(db_session, user)

    response = client.post("/api/github/sync-repos", headers=auth_headers(user))

    assert response.status_code == 400


def test_disconnect_clears_credentials(client, db_session, monkeypatch):
    user, _, headers = _connected(client, db_session, monkeypatch)

    assert client.post("/api/github/disconnect", headers=headers).json() == {"ok": True}

    db_session.expire_all()
    stored = db_session.get(UserAccount, user.id)
    assert stored.github_username is None
    assert stored.github_token is None


def test_callback_requires_code(client):
    assert client.get("/api/github/callback").status_code == 400
