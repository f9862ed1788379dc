"""
Google Drive blob store.

Each asset becomes a new Drive file inside the guestbook image folder
(a configured folder id, or a folder found or created by name), shared
as "anyone with the link can view".  The returned URL is Drive's
direct-view link so it can be used as an ``<img>`` source.
"""

import logging
from typing import Optional

from ..core.exceptions import BlobStoreError
from .base import BlobStore
from .google_api import GoogleAPIClient, GoogleAPIError

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
VIEW_URL_TEMPLATE = "https://drive.google.com/uc?export=view&id={file_id}"


class DriveBlobStore(BlobStore):
    """Blob store uploading assets to Google Drive."""

    def __init__(
        self,
        client: GoogleAPIClient,
        folder_id: str = "",
        folder_name: str = "Guestbook_Images",
    ) -> None:
        self.client = client
        self.folder_id = folder_id
        self.folder_name = folder_name
        self._resolved_folder_id: Optional[str] = None

    def put(self, filename: str, content: bytes, content_type: str) -> str:
        logger = logging.getLogger(__name__)
        try:
            folder_id = self._folder()
            created = self.client.request(
                "POST",
                DRIVE_FILES_URL,
                params={"fields": "id"},
                json_body={"name": filename, "mimeType": content_type, "parents": [folder_id]},
            )
            file_id = created["id"]
            self.client.request(
                "PATCH",
                f"{DRIVE_UPLOAD_URL}/{file_id}",
                params={"uploadType": "media"},
                data=content,
                headers={"Content-Type": content_type},
            )
            self.client.request(
                "POST",
                f"{DRIVE_FILES_URL}/{file_id}/permissions",
                json_body={"role": "reader", "type": "anyone"},
            )
        except GoogleAPIError as e:
            raise BlobStoreError(f"Google Drive error: {e.message}") from e
        logger.info("Uploaded %s to Drive as %s", filename, file_id)
        return VIEW_URL_TEMPLATE.format(file_id=file_id)

    def _folder(self) -> str:
        """Return the id of the folder new assets go into.

        A configured folder id wins.  Otherwise the folder is looked up
        by name and created on first use; the result is cached.
        """
        if self.folder_id:
            return self.folder_id
        if self._resolved_folder_id:
            return self._resolved_folder_id
        escaped = self.folder_name.replace("\\", "\\\\").replace("'", "\\'")
        found = self.client.request(
            "GET",
            DRIVE_FILES_URL,
            params={
                "q": f"name = '{escaped}' and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false",
                "fields": "files(id)",
                "pageSize": 1,
            },
        ) or {}
        files = found.get("files", [])
        if files:
            self._resolved_folder_id = files[0]["id"]
        else:
            created = self.client.request(
                "POST",
                DRIVE_FILES_URL,
                params={"fields": "id"},
                json_body={"name": self.folder_name, "mimeType": FOLDER_MIME_TYPE},
            )
            self._resolved_folder_id = created["id"]
            logging.getLogger(__name__).info("Created Drive folder %s", self.folder_name)
        return self._resolved_folder_id
