"""LLM-backed helpers: CV drafting and certificate field extraction.

Both Groq and OpenAI expose the same chat-completions API, so a provider is
just a base URL, a key and a model name.
"""
import json
import logging
import re
import time
from typing import Any, NamedTuple

import httpx

from internhub.core.config import settings
from internhub.services.documents import parse_date

logger = logging.getLogger(__name__)

LLM_TIMEOUT_SECONDS = 45.0
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
MAX_CERTIFICATE_PROMPT_CHARS = 6000
HTML_FENCE_PATTERN = re.compile(r"^```(?:html)?\s*|\s*```$", re.IGNORECASE)
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

CV_SYSTEM_PROMPT = (
    "You write student CVs. Return a single complete HTML document with CSS in a <style> tag. "
    "The CV must be clean, professional, ATS-friendly and print-friendly, and contain the "
    "sections Header, Summary, Education, Skills, Projects, Certifications and Experience. "
    "Only use facts present in the input."
)

CERTIFICATE_SYSTEM_PROMPT = (
    "You extract certification details from document text. Respond with a JSON object with the "
    'keys "title", "issuer", "issueDate" (YYYY-MM-DD) and "credentialId". Use null for anything '
    "that is not present."
)


class LLMProvider(NamedTuple):
    name: str
    api_key: str | None
    model: str
    api_base: str


def active_provider() -> LLMProvider:
    if (settings.llm_provider or "").strip().lower() == "openai":
        return LLMProvider("openai", settings.openai_api_key, settings.openai_model, settings.openai_api_base)
    return LLMProvider("groq", settings.groq_api_key, settings.groq_model, settings.groq_api_base)


def ai_is_configured() -> bool:
    provider = active_provider()
    return bool(settings.ai_enabled and provider.api_key and provider.model)


def get_active_ai_provider() -> str:
    return active_provider().name


def get_active_ai_model() -> str:
    return active_provider().model


def _chat_completion(system_prompt: str, user_prompt: str, *, json_mode: bool, max_tokens: int) -> str:
    """Run one chat completion, retrying once on throttling, 5xx or transport errors."""
    if not ai_is_configured():
        raise RuntimeError("AI is not configured")
    provider = active_provider()
    body: dict[str, Any] = {
        "model": provider.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": 0.2,
        "max_tokens": max_tokens,
    }
    if json_mode and provider.name == "openai":
        body["response_format"] = {"type": "json_object"}

    url = f"{provider.api_base.rstrip('/')}/chat/completions"
    headers = {"Authorization": f"Bearer {provider.api_key}"}
    with httpx.Client(timeout=LLM_TIMEOUT_SECONDS) as client:
        for attempt in (1, 2):
            try:
                response = client.post(url, headers=headers, json=body)
                response.raise_for_status()
                return response.json()["choices"][0]["message"]["content"]
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if attempt == 1 and status in RETRYABLE_STATUS_CODES:
                    logger.info("%s returned %s, retrying", provider.name, status)
                    time.sleep(1.5)
                    continue
                raise RuntimeError(f"{provider.name} request failed with status {status}") from exc
            except (httpx.TransportError, KeyError, IndexError, ValueError) as exc:
                if attempt == 1:
                    time.sleep(1.0)
                    continue
                raise RuntimeError(f"{provider.name} request failed: {exc}") from exc
    raise RuntimeError(f"{provider.name} request failed")


def _first_json_object(text: str) -> dict[str, Any] | None:
    candidates = [text or ""]
    match = JSON_OBJECT_PATTERN.search(text or "")
    if match:
        candidates.append(match.group(0))
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def build_cv_prompt(data: dict[str, Any]) -> str:
    def lines(items: list[str]) -> str:
        return "\n".join(items) if items else "None"

    projects = [f"- {p['title']}: {p.get('description') or ''}".rstrip(": ") for p in data.get("projects", [])]
    certifications = [
        f"- {c['title']}" + (f" by {c['issuer']}" if c.get("issuer") else "")
        for c in data.get("certifications", [])
    ]
    internships = [
        f"- {i['title']} at {i['company']} ({i['status']})" for i in data.get("internships", [])
    ]
    return (
        "Generate a professional CV in HTML for the following student.\n\n"
        f"Name: {data.get('name') or 'N/A'}\n"
        f"Email: {data.get('email') or 'N/A'}\n"
        f"Phone: {data.get('phone') or 'N/A'}\n"
        f"Department: {data.get('department') or 'N/A'}\n"
        f"CGPA: {data.get('cgpa') or 'N/A'}\n"
        f"Roll Number: {data.get('roll_number') or 'N/A'}\n"
        f"Bio: {data.get('bio') or 'N/A'}\n\n"
        f"Skills: {json.dumps(data.get('skills') or [])}\n\n"
        f"Portfolio Projects:\n{lines(projects)}\n\n"
        f"Certifications:\n{lines(certifications)}\n\n"
        f"Internships Applied:\n{lines(internships)}\n"
    )


def generate_cv_html(student_data: dict[str, Any]) -> str:
    raw = _chat_completion(
        CV_SYSTEM_PROMPT,
        build_cv_prompt(student_data),
        json_mode=False,
        max_tokens=4000,
    )
    html = HTML_FENCE_PATTERN.sub("", raw.strip())
    if "<" not in html:
        raise RuntimeError("LLM returned no HTML")
    return html


def extract_certificate_with_llm(document_text: str) -> dict[str, Any] | None:
    raw = _chat_completion(
        CERTIFICATE_SYSTEM_PROMPT,
        document_text[:MAX_CERTIFICATE_PROMPT_CHARS],
        json_mode=True,
        max_tokens=1000,
    )
    parsed = _first_json_object(raw)
    if not parsed:
        return None
    return {
        "title": parsed.get("title") or None,
        "issuer": parsed.get("issuer") or None,
        "issue_date": parse_date(parsed.get("issueDate")),
        "credential_id": parsed.get("credentialId") or None,
    }
