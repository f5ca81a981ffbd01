"""Object storage for cover images.

Two buckets share one interface: ``upload`` stores bytes under a path and
``public_url`` turns that path into a URL the browser can load.
``LocalBucket`` writes to a directory served by the app itself;
``RemoteBucket`` talks to a Supabase-style storage REST API.
"""
import logging
import os
import re
import secrets
import time
from typing import Dict, Optional

import requests

from app.utils import config

logger = logging.getLogger(__name__)

COVER_PREFIX = "covers"

# Pillow format names whose usual extension differs from the lowercased name
_FORMAT_EXTENSIONS = {"JPEG": "jpg", "TIFF": "tif"}
_SAFE_EXTENSION = re.compile(r"[a-z0-9]{1,8}")


class StorageError(Exception):
    pass


def _safe_extension(candidate: Optional[str]) -> str:
    candidate = (candidate or "").strip().lower()
    return candidate if _SAFE_EXTENSION.fullmatch(candidate) else ""


def unique_object_path(
    filename: Optional[str],
    content_type: Optional[str] = None,
    prefix: str = COVER_PREFIX,
    image_format: Optional[str] = None,
) -> str:
    """Build ``<prefix>/<epoch-ms>-<random>.<ext>`` for an uploaded file.

    The extension comes from the decoded image format when known, then the
    original filename, then the content type subtype (``image/png`` -> ``png``).
    Anything but a short alphanumeric token is ignored; the last resort is ``bin``.
    """
    ext = ""
    if image_format:
        ext = _safe_extension(_FORMAT_EXTENSIONS.get(image_format.upper(), image_format))
    if not ext:
        ext = _safe_extension(os.path.splitext(filename or "")[1].lstrip("."))
    if not ext and content_type and "/" in content_type:
        ext = _safe_extension(content_type.split("/", 1)[1].split(";", 1)[0])
    ext = ext or "bin"
    name = "%d-%s.%s" % (int(time.time() * 1000), secrets.token_hex(6), ext)
    return f"{prefix}/{name}"


class LocalBucket:
    def __init__(self, root: str, bucket: str, public_base_url: str = "/storage"):
        self.root = root
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def local_file(self, path: str) -> str:
        full = os.path.normpath(os.path.join(self.root, self.bucket, path))
        bucket_dir = os.path.normpath(os.path.join(self.root, self.bucket))
        if not full.startswith(bucket_dir + os.sep):
            raise StorageError(f"object path escapes bucket: {path}")
        return full

    def upload(self, path: str, content: bytes, content_type: Optional[str] = None) -> str:
        full = self.local_file(path)
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            # "x" refuses to overwrite an existing object
            with open(full, "xb") as fh:
                fh.write(content)
        except OSError as e:
            logger.exception("Failed to write object bucket=%s path=%s: %s", self.bucket, path, e)
            raise StorageError(f"failed to store {path}") from e
        logger.info("Stored object bucket=%s path=%s size=%s", self.bucket, path, len(content))
        return path

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{path}"


class RemoteBucket:
    def __init__(self, base_url: str, bucket: str, api_key: Optional[str] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.api_key = api_key
        self.timeout = timeout
        logger.debug("RemoteBucket initialized with base_url=%s bucket=%s", self.base_url, self.bucket)

    def _headers(self, content_type: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": content_type or "application/octet-stream", "x-upsert": "false"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def upload(self, path: str, content: bytes, content_type: Optional[str] = None) -> str:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{path}"
        try:
            resp = requests.post(url, data=content, headers=self._headers(content_type), timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception("Failed to upload object url=%s: %s", url, e)
            raise StorageError(f"failed to upload {path}") from e
        logger.info("Uploaded object bucket=%s path=%s status=%s", self.bucket, path, resp.status_code)
        return path

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"


def get_storage():
    """Return the bucket selected by configuration."""
    remote = config.storage_url()
    if remote:
        return RemoteBucket(remote, config.storage_bucket(), config.storage_key(), config.storage_timeout())
    return LocalBucket(config.storage_root(), config.storage_bucket(), config.public_storage_base_url())
