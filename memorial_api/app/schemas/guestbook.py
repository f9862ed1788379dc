"""
Pydantic schemas for the guestbook.

The JSON field names (``dateStr``, ``imageUrl``) are those the website
script already consumes; Python code uses the snake_case attribute
names and the aliases are applied when responses are serialised.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class GuestbookSubmission(BaseModel):
    """Inbound guestbook post.

    Every field is optional here so that missing or empty values are
    reported by the guestbook service with its own messages rather
    than rejected by request parsing.
    """

    name: Optional[str] = Field(None, description="Author name, at most 50 characters")
    role: Optional[str] = Field(None, description="Free-text role label, defaults to 'friend'")
    message: Optional[str] = Field(None, description="Message text, at most 500 characters")
    image: Optional[str] = Field(
        None, description="Optional base64 image, with or without a data URL header"
    )


class GuestbookEntry(BaseModel):
    """A guestbook entry as displayed on the site."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    name: str
    role: str = "friend"
    message: str = ""
    date_str: str = Field("", alias="dateStr")
    image_url: str = Field("", alias="imageUrl")


class SubmissionResponse(BaseModel):
    """Wire result of a guestbook submission."""

    result: Literal["success", "error"]
    error: Optional[str] = None
