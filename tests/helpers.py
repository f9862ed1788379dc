"""Shared fixtures for the test modules."""

import json
import os
from datetime import datetime, timedelta, timezone

import requests

from memorial_api.app.core.config import Settings

CLASS_HEADER = ["ID", "Name", "Class", "VideoLink", "LetterText"]


def make_settings(tmp_dir: str, **overrides) -> Settings:
    values = dict(
        database_url=os.path.join(tmp_dir, "memorial.db"),
        media_dir=os.path.join(tmp_dir, "media"),
        public_base_url="http://testserver",
        data_tab_names=("6_1", "6_2", "6_3"),
        guestbook_tab_name="Guestbook",
        record_store_backend="sqlite",
        blob_store_backend="local",
        log_level="WARNING",
        log_file="",
        time_zone="Asia/Bangkok",
        guestbook_recent_limit=50,
        lock_timeout_seconds=2.0,
        max_image_bytes=1024 * 1024,
        page_path=os.path.join(tmp_dir, "index.html"),
        page_title="Memory of SWC 2568",
    )
    values.update(overrides)
    return Settings(**values)


class StepClock:
    """Deterministic clock advancing by ``step`` on every call."""

    def __init__(self, start: datetime = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2026, 10, 18, 3, 0, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def make_response(status_code: int = 200, body=None) -> requests.Response:
    """Build a real ``requests.Response`` carrying a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.url = "https://example.test/"
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    return response
