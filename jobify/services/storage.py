# jobify/services/storage.py
"""
Resume file storage.

`ResumeStorage` talks to an S3-compatible bucket (AWS, Cloudflare R2, MinIO)
through boto3 when credentials are configured, and otherwise writes to a local
upload directory. Blocking boto3 calls run in the threadpool.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from jobify.core.config import Settings, settings as default_settings
from jobify.core.errors import PolicyError
from jobify.db.documents import ResumeRef

logger = logging.getLogger(__name__)

PRESIGNED_URL_TTL = 3600


class StorageError(Exception):
    pass


def _get_s3_client(cfg: Settings):
    """
    Return a boto3 S3 client, or None when no endpoint/credentials are configured.
    """
    if not cfg.S3_BUCKET or not cfg.S3_ACCESS_KEY or not cfg.S3_SECRET_KEY:
        return None

    client_kwargs = {
        "aws_access_key_id": cfg.S3_ACCESS_KEY,
        "aws_secret_access_key": cfg.S3_SECRET_KEY,
        "config": Config(signature_version="s3v4"),
        "region_name": cfg.S3_REGION or None,
    }
    if cfg.S3_ENDPOINT:
        client_kwargs["endpoint_url"] = str(cfg.S3_ENDPOINT)
    return boto3.client("s3", **client_kwargs)


def validate_resume_upload(filename: Optional[str], size: int, cfg: Settings = default_settings) -> str:
    """Server-side extension and size checks. Returns the lowercased extension."""
    if not filename:
        raise PolicyError(400, "Please select a resume file to upload.")
    ext = Path(filename).suffix.lower()
    allowed = cfg.resume_extensions
    if ext not in allowed:
        raise PolicyError(400, f"Unsupported file type. Allowed: {', '.join(allowed)}")
    if size <= 0:
        raise PolicyError(400, "Uploaded resume is empty.")
    if size > cfg.RESUME_MAX_BYTES:
        raise PolicyError(400, f"Resume exceeds the maximum size of {cfg.RESUME_MAX_BYTES // (1024 * 1024)}MB.")
    return ext


class ResumeStorage:
    def __init__(self, cfg: Settings = default_settings, client=None):
        self.settings = cfg
        self.bucket = cfg.S3_BUCKET
        self.prefix = cfg.RESUME_PREFIX.strip("/")
        self.local_dir = Path(cfg.LOCAL_UPLOAD_DIR)
        self.client = client if client is not None else _get_s3_client(cfg)

    @property
    def uses_s3(self) -> bool:
        return self.client is not None

    def _new_key(self, filename: str) -> str:
        ext = Path(filename).suffix.lower()
        return f"{self.prefix}/{uuid.uuid4().hex}{ext}"

    def _object_url(self, key: str) -> str:
        """Durable locator kept on the profile and on application snapshots."""
        base = self.settings.S3_PUBLIC_BASE_URL
        if base:
            return f"{base.rstrip('/')}/{key}"
        return f"s3://{self.bucket}/{key}"

    def resolve_url(self, ref: ResumeRef) -> str:
        """
        URL handed to clients. Private buckets get a fresh presigned GET per
        response, so stored references never go stale.
        """
        if self.uses_s3 and not self.settings.S3_PUBLIC_BASE_URL:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": ref.public_id},
                ExpiresIn=PRESIGNED_URL_TTL,
            )
        return ref.url

    def _put(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    async def save(self, data: bytes, filename: str, content_type: Optional[str] = None) -> ResumeRef:
        key = self._new_key(filename)
        content_type = content_type or "application/octet-stream"

        if self.uses_s3:
            try:
                await run_in_threadpool(self._put, key, data, content_type)
            except (BotoCoreError, ClientError) as exc:
                raise StorageError(f"S3 upload failed for {key}") from exc
            logger.info("Stored resume in bucket=%s key=%s", self.bucket, key)
            return ResumeRef(public_id=key, url=self._object_url(key))

        local_path = self.local_dir / key
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(local_path, "wb") as out:
                await out.write(data)
        except OSError as exc:
            raise StorageError(f"Local write failed for {local_path}") from exc
        logger.info("Stored resume locally at %s", local_path)
        return ResumeRef(public_id=key, url=local_path.resolve().as_uri())

    async def delete(self, public_id: str) -> bool:
        """
        Delete a stored resume. Returns True on success; failures are logged, not raised.
        """
        if self.uses_s3:
            try:
                await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=public_id)
                return True
            except (BotoCoreError, ClientError):
                logger.warning("S3 delete failed for key %s", public_id, exc_info=True)
                return False

        p = self.local_dir / public_id
        try:
            if p.exists():
                p.unlink()
            return True
        except OSError:
            logger.warning("Local delete failed for %s", p, exc_info=True)
            return False


def get_storage(request: Request) -> ResumeStorage:
    return request.app.state.storage
