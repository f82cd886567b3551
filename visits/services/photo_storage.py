"""
Visit Photo Storage

Stores photos attached to farm visits and hands back their public URLs.
Backed by a Django storage (default_storage unless one is injected), so the
same code runs against the filesystem, S3 or the in-memory test storage.
"""
import logging
import os
import secrets
import time

from django.conf import settings
from django.core.files.storage import default_storage

from visits.exceptions import UploadFailed

logger = logging.getLogger(__name__)


def normalize_photo_urls(photo_urls=None, photo_url=None):
    """
    Collapse the legacy single `photo_url` and the `photo_urls` list into one
    ordered list.

    A non-empty `photo_urls` wins. Otherwise a non-empty `photo_url` becomes
    a one-element list. Blank entries are dropped.
    """
    urls = [url for url in (photo_urls or []) if url]
    if urls:
        return urls
    if photo_url:
        return [photo_url]
    return []


class VisitPhotoStorage:
    """Saves visit photos under a unique path in the configured photo folder."""

    def __init__(self, storage=None, folder=None):
        self.storage = storage or default_storage
        self.folder = folder or settings.VISIT_PHOTO_DIR

    def build_path(self, filename):
        """
        Unique storage path: <folder>/<random>_<millis><ext>.

        Only the extension of the client filename is kept.
        """
        ext = os.path.splitext(filename or '')[1].lower()
        millis = int(time.time() * 1000)
        return f"{self.folder}/{secrets.token_hex(6)}_{millis}{ext}"

    def upload(self, uploaded_file):
        """
        Store `uploaded_file` and return its URL.

        Raises UploadFailed when the storage backend rejects the file.
        """
        path = self.build_path(getattr(uploaded_file, 'name', ''))
        try:
            saved_path = self.storage.save(path, uploaded_file)
            url = self.storage.url(saved_path)
        except OSError as e:
            logger.error(f"Photo upload failed for {path}: {e}")
            raise UploadFailed() from e

        logger.info(f"Visit photo stored at {saved_path}")
        return url
