# This project was developed with assistance from AI tools.
"""Founder document store on S3-compatible object storage (MinIO in dev).

Every verification document lives under ``founders/<user id>/<doc key>/``.
Only the object key is kept on the account row; reviewers open a file
through a short-lived presigned link and never receive the bytes from the
API itself.

boto3 is synchronous, so each call runs in the default thread-pool executor.
The bucket is checked (and created in dev) on the first write rather than
at startup, so the API starts even while object storage is down.
"""

import asyncio
import logging
import os
from functools import partial

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from ..core.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/png",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
)

KEY_PREFIX = "founders"


class DocumentStore:
    """Writes founder documents and hands out presigned read links."""

    def __init__(self, client, bucket: str):
        self._client = client
        self._bucket = bucket
        self._bucket_ready = False

    @classmethod
    def from_settings(cls, cfg: Settings) -> "DocumentStore":
        client = boto3.client(
            "s3",
            endpoint_url=cfg.S3_ENDPOINT,
            aws_access_key_id=cfg.S3_ACCESS_KEY,
            aws_secret_access_key=cfg.S3_SECRET_KEY,
            region_name=cfg.S3_REGION,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        return cls(client, cfg.S3_BUCKET)

    @staticmethod
    def object_key_for(founder_id: int, doc_key: str, filename: str) -> str:
        """``founders/<id>/<doc key>/<file name>``; directory parts of the upload name are dropped."""
        safe_name = os.path.basename(filename.replace("\\", "/")) or doc_key
        return f"{KEY_PREFIX}/{founder_id}/{doc_key}/{safe_name}"

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except ClientError:
            logger.info("Creating document bucket %s", self._bucket)
            self._client.create_bucket(Bucket=self._bucket)
        self._bucket_ready = True

    def _put(self, object_key: str, data: bytes, content_type: str) -> None:
        self._ensure_bucket()
        self._client.put_object(
            Bucket=self._bucket,
            Key=object_key,
            Body=data,
            ContentType=content_type,
        )

    async def put_document(
        self,
        founder_id: int,
        doc_key: str,
        filename: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """Store one checklist file and return its object key.

        A later upload for the same slot and file name overwrites the object.
        """
        object_key = self.object_key_for(founder_id, doc_key, filename)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(self._put, object_key, data, content_type))
        logger.info("Stored %s for founder %s (%d bytes)", doc_key, founder_id, len(data))
        return object_key

    def _delete(self, object_keys: list[str]) -> None:
        self._client.delete_objects(
            Bucket=self._bucket,
            Delete={"Objects": [{"Key": key} for key in object_keys], "Quiet": True},
        )

    async def delete_documents(self, object_keys: list[str]) -> None:
        """Remove objects written for an upload whose database change was discarded."""
        if not object_keys:
            return
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(self._delete, list(object_keys)))
        logger.info("Deleted %d orphaned document object(s)", len(object_keys))

    async def presigned_url(self, object_key: str, expires_in: int = 900) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            partial(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._bucket, "Key": object_key},
                ExpiresIn=expires_in,
            ),
        )


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_store: DocumentStore | None = None


def init_document_store(cfg: Settings) -> DocumentStore:
    """Build the singleton (called once from app lifespan)."""
    global _store  # noqa: PLW0603
    _store = DocumentStore.from_settings(cfg)
    logger.info("Document store ready (bucket=%s)", cfg.S3_BUCKET)
    return _store


def get_document_store() -> DocumentStore:
    if _store is None:
        raise RuntimeError("Document store not initialised -- call init_document_store() first")
    return _store
