"""Outbound email for application status changes.

Transports are tried in ``MAIL_PROVIDER_ORDER``; unconfigured ones are skipped
and the first successful send wins.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Callable

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from internhub.core.config import settings

logger = logging.getLogger(__name__)

KNOWN_TRANSPORTS = ("smtp", "resend", "ses")


@dataclass
class OutgoingMail:
    to_email: str
    subject: str
    text_body: str
    html_body: str | None = None


@dataclass
class MailSendResult:
    provider: str
    provider_message_id: str | None = None


def _transport_order() -> list[str]:
    requested = [part.strip().lower() for part in (settings.mail_provider_order or "").split(",")]
    order = [name for i, name in enumerate(requested) if name in KNOWN_TRANSPORTS and name not in requested[:i]]
    return order or list(KNOWN_TRANSPORTS)


def _ses_region() -> str | None:
    return settings.ses_region or settings.s3_region


def _smtp_ready() -> bool:
    return bool(settings.smtp_host and settings.smtp_port)


def _resend_ready() -> bool:
    return bool(settings.resend_api_key)


def _ses_ready() -> bool:
    return bool(_ses_region())


def _send_smtp(mail: OutgoingMail) -> MailSendResult:
    message = EmailMessage()
    message["From"] = settings.mail_from
    message["To"] = mail.to_email
    message["Subject"] = mail.subject
    message.set_content(mail.text_body)
    if mail.html_body:
        message.add_alternative(mail.html_body, subtype="html")

    connect = smtplib.SMTP_SSL if settings.smtp_use_ssl else smtplib.SMTP
    with connect(host=settings.smtp_host, port=settings.smtp_port, timeout=settings.smtp_timeout_seconds) as smtp:
        if settings.smtp_use_tls and not settings.smtp_use_ssl:
            smtp.starttls()
        if settings.smtp_username:
            smtp.login(settings.smtp_username, settings.smtp_password or "")
        smtp.send_message(message)
    return MailSendResult(provider="smtp")


def _send_resend(mail: OutgoingMail) -> MailSendResult:
    body = {
        "from": settings.mail_from,
        "to": [mail.to_email],
        "subject": mail.subject,
        "text": mail.text_body,
    }
    if mail.html_body:
        body["html"] = mail.html_body
    with httpx.Client(timeout=float(settings.smtp_timeout_seconds)) as client:
        response = client.post(
            f"{settings.resend_api_base.rstrip('/')}/emails",
            headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            json=body,
        )
    response.raise_for_status()
    message_id = response.json().get("id") if response.content else None
    return MailSendResult(provider="resend", provider_message_id=message_id)


def _send_ses(mail: OutgoingMail) -> MailSendResult:
    credentials = {}
    if settings.ses_access_key_id and settings.ses_secret_access_key:
        credentials = {
            "aws_access_key_id": settings.ses_access_key_id,
            "aws_secret_access_key": settings.ses_secret_access_key,
            "aws_session_token": settings.ses_session_token,
        }
    client = boto3.client("ses", region_name=_ses_region(), **credentials)
    content = {"Text": {"Data": mail.text_body, "Charset": "UTF-8"}}
    if mail.html_body:
        content["Html"] = {"Data": mail.html_body, "Charset": "UTF-8"}
    extra = {"ConfigurationSetName": settings.ses_configuration_set} if settings.ses_configuration_set else {}
    response = client.send_email(
        Source=settings.mail_from,
        Destination={"ToAddresses": [mail.to_email]},
        Message={"Subject": {"Data": mail.subject, "Charset": "UTF-8"}, "Body": content},
        **extra,
    )
    return MailSendResult(provider="ses", provider_message_id=response.get("MessageId"))


TRANSPORTS: dict[str, tuple[Callable[[], bool], Callable[[OutgoingMail], MailSendResult]]] = {
    "smtp": (_smtp_ready, _send_smtp),
    "resend": (_resend_ready, _send_resend),
    "ses": (_ses_ready, _send_ses),
}


def mail_is_configured() -> bool:
    if not settings.mail_enabled or not settings.mail_from:
        return False
    return any(TRANSPORTS[name][0]() for name in _transport_order())


def send_email(mail: OutgoingMail) -> MailSendResult:
    if not mail_is_configured():
        raise RuntimeError("Email delivery is not configured")

    failures: list[str] = []
    for name in _transport_order():
        ready, send = TRANSPORTS[name]
        if not ready():
            continue
        try:
            return send(mail)
        except (smtplib.SMTPException, OSError, httpx.HTTPError, BotoCoreError, ClientError) as exc:
            logger.warning("mail transport %s failed: %s", name, exc)
            failures.append(name)
    raise RuntimeError(f"All mail transports failed: {', '.join(failures)}")


STATUS_HEADLINES = {
    "accepted": "Congratulations, your application was accepted",
    "rejected": "Update on your application",
    "withdrawn": "Your application was withdrawn",
    "pending": "Your application is under review again",
}


def send_application_status_email(
    *,
    to_email: str,
    name: str,
    internship_title: str,
    company_name: str,
    status: str,
    rejection_reason: str | None = None,
) -> MailSendResult:
    headline = STATUS_HEADLINES.get(status, "Your application status changed")
    lines = [
        f"Hi {name},",
        "",
        f"Your application for {internship_title} at {company_name} is now {status}.",
    ]
    if rejection_reason:
        lines.append(f"Reason: {rejection_reason}")
    lines += ["", "You can follow all of your applications from your dashboard."]

    html = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Your application for <strong>{escape(internship_title)}</strong> at "
        f"{escape(company_name)} is now <strong>{escape(status)}</strong>.</p>"
    )
    if rejection_reason:
        html += f"<p>Reason: {escape(rejection_reason)}</p>"

    return send_email(
        OutgoingMail(
            to_email=to_email,
            subject=f"{headline}: {internship_title}",
            text_body="\n".join(lines) + "\n",
            html_body=html,
        )
    )
