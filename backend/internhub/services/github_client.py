"""Thin GitHub OAuth + REST client used by portfolio sync."""
from __future__ import annotations

import math
from collections import Counter
from typing import Any
from urllib.parse import urlencode

import httpx

from internhub.core.config import settings
from internhub.core.errors import ServiceUnavailableError, UpstreamError

GITHUB_API_BASE = "https://api.github.com"
GITHUB_OAUTH_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_OAUTH_TOKEN_URL = "https://github.com/login/oauth/access_token"
OAUTH_SCOPE = "read:user,user:email,repo"
REQUEST_TIMEOUT = 10.0
HEADERS = {
    "Accept": "application/vnd.github+json",
    "User-Agent": "InternHubPortfolioSync/1.0",
}


def oauth_is_configured() -> bool:
    return bool(settings.github_client_id and settings.github_client_secret)


def oauth_url(state: str | None = None) -> str:
    if not settings.github_client_id:
        raise ServiceUnavailableError("GitHub OAuth is not configured")
    params = {
        "client_id": settings.github_client_id,
        "scope": OAUTH_SCOPE,
    }
    if settings.github_callback_url:
        params["redirect_uri"] = settings.github_callback_url
    if state:
        params["state"] = state
    return f"{GITHUB_OAUTH_AUTHORIZE_URL}?{urlencode(params)}"


def exchange_code(code: str) -> str:
    if not oauth_is_configured():
        raise ServiceUnavailableError("GitHub OAuth is not configured")
    try:
        with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
            resp = client.post(
                GITHUB_OAUTH_TOKEN_URL,
                headers={"Accept": "application/json"},
                json={
                    "client_id": settings.github_client_id,
                    "client_secret": settings.github_client_secret,
                    "code": code,
                },
            )
            resp.raise_for_status()
            token = resp.json().get("access_token")
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamError("Failed to get GitHub access token") from exc
    if not token:
        raise UpstreamError("Failed to get GitHub access token")
    return token


def _auth_headers(access_token: str) -> dict[str, str]:
    return {**HEADERS, "Authorization": f"Bearer {access_token}"}


def get_user(access_token: str) -> dict[str, Any]:
    try:
        with httpx.Client(timeout=REQUEST_TIMEOUT, headers=_auth_headers(access_token)) as client:
            resp = client.get(f"{GITHUB_API_BASE}/user")
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamError("Failed to fetch GitHub user data") from exc
    if not isinstance(data, dict) or not data.get("login"):
        raise UpstreamError("Failed to fetch GitHub user data")
    return data


def list_repos(access_token: str, username: str) -> list[dict[str, Any]]:
    try:
        with httpx.Client(timeout=REQUEST_TIMEOUT, headers=_auth_headers(access_token)) as client:
            resp = client.get(
                f"{GITHUB_API_BASE}/users/{username}/repos",
                params={"sort": "updated", "per_page": 100},
            )
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamError("Failed to fetch repositories") from exc
    return data if isinstance(data, list) else []


def top_repos(repos: list[dict[str, Any]], limit: int = 10) -> list[dict[str, Any]]:
    return sorted(repos, key=lambda repo: repo.get("stargazers_count") or 0, reverse=True)[:limit]


def extract_skills_from_repos(repos: list[dict[str, Any]]) -> list[dict[str, Any]]:
    counts = Counter(repo["language"] for repo in repos if repo.get("language"))
    return [
        {
            "name": language,
            "proficiency_level": min(5, math.ceil(count / 2)),
            "source": "github",
        }
        for language, count in counts.most_common()
    ]
