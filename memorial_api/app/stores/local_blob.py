"""
Filesystem blob store.

Images are written under ``media_dir`` and served by the application
at ``/media/<filename>``.  Files are created exclusively, so an
existing asset is never overwritten, and are made world-readable so
anyone holding the URL can view them.
"""

import logging
import os
from pathlib import Path

from ..core.exceptions import BlobStoreError
from .base import BlobStore

MEDIA_URL_PREFIX = "/media"


class LocalBlobStore(BlobStore):
    """Blob store writing assets to a local directory."""

    def __init__(self, media_dir: str, public_base_url: str = "") -> None:
        self.media_dir = Path(media_dir)
        self.public_base_url = public_base_url.rstrip("/")

    def initialize(self) -> None:
        self.media_dir.mkdir(parents=True, exist_ok=True)

    def put(self, filename: str, content: bytes, content_type: str) -> str:
        logger = logging.getLogger(__name__)
        if not filename or os.path.basename(filename) != filename or filename.startswith("."):
            raise BlobStoreError(f"Invalid asset name: {filename!r}")
        try:
            self.media_dir.mkdir(parents=True, exist_ok=True)
            path = self.media_dir / filename
            with open(path, "xb") as f:
                f.write(content)
            os.chmod(path, 0o644)
        except FileExistsError as e:
            raise BlobStoreError(f"Asset {filename} already exists") from e
        except OSError as e:
            raise BlobStoreError(f"Cannot write asset {filename}: {e}") from e
        logger.info("Stored %s (%s, %d bytes) in %s", filename, content_type, len(content), self.media_dir)
        return f"{self.public_base_url}{MEDIA_URL_PREFIX}/{filename}"
