"""Upload storage: S3 when ``S3_BUCKET`` is set, otherwise the local upload dir.

Stored files are identified by their URL. Local files use ``/uploads/<key>``
(served by the static mount in ``main``); S3 objects use the bucket's
virtual-hosted URL and are handed out as presigned links.
"""
import os
from pathlib import Path
from urllib.parse import unquote, urlparse
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from internhub.core.config import settings

LOCAL_URL_PREFIX = "/uploads/"


def s3_is_enabled() -> bool:
    return bool(settings.s3_bucket)


def _s3_client():
    options = {
        "region_name": settings.s3_region,
        "endpoint_url": settings.s3_endpoint_url,
    }
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        options.update(
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token,
        )
    return boto3.client("s3", **{name: value for name, value in options.items() if value})


def _s3_host() -> str:
    region = settings.s3_region
    if not region or region == "us-east-1":
        return f"{settings.s3_bucket}.s3.amazonaws.com"
    return f"{settings.s3_bucket}.s3.{region}.amazonaws.com"


def _object_key(prefix: str, owner_id: str, filename: str) -> str:
    safe_name = os.path.basename(filename or "").replace(" ", "_") or "file"
    return f"{prefix.strip('/')}/{owner_id}/{uuid4().hex}_{safe_name}"


def store_file(
    owner_id: str,
    filename: str,
    content_type: str,
    content: bytes,
    *,
    prefix: str,
) -> str:
    """Persist an upload and return its file URL.

    Raises ``RuntimeError`` when the S3 upload fails.
    """
    key = _object_key(prefix, str(owner_id), filename)
    if s3_is_enabled():
        try:
            _s3_client().put_object(
                Bucket=settings.s3_bucket,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(f"S3 upload failed for {key}") from exc
        return f"https://{_s3_host()}/{key}"

    target = Path(settings.local_upload_dir) / key
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return LOCAL_URL_PREFIX + key


def local_path_for(file_url: str) -> Path | None:
    """Map a ``/uploads/...`` URL back to a path inside the upload dir."""
    if not file_url or not file_url.startswith(LOCAL_URL_PREFIX):
        return None
    root = Path(settings.local_upload_dir).resolve()
    path = (root / file_url[len(LOCAL_URL_PREFIX):]).resolve()
    return path if root in path.parents else None


def _s3_key(file_url: str) -> str | None:
    if not file_url or not s3_is_enabled():
        return None
    parsed = urlparse(file_url)
    if parsed.scheme not in ("http", "https"):
        return None
    host = parsed.netloc.lower()
    path = unquote(parsed.path.lstrip("/"))
    if host.startswith(f"{settings.s3_bucket.lower()}.s3"):
        return path or None
    # path-style: s3.<region>.amazonaws.com/<bucket>/<key>
    if host.startswith("s3.") or host == "s3.amazonaws.com":
        bucket, _, key = path.partition("/")
        if bucket == settings.s3_bucket and key:
            return key
    return None


def create_presigned_download_url(file_url: str, expires_in: int | None = None) -> str | None:
    key = _s3_key(file_url)
    if not key:
        return None
    try:
        return _s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.s3_bucket, "Key": key},
            ExpiresIn=expires_in or settings.s3_presign_expiry_seconds,
        )
    except (BotoCoreError, ClientError):
        return None


def resolve_file_view_url(file_url: str | None) -> str | None:
    if not file_url:
        return file_url
    return create_presigned_download_url(file_url) or file_url
