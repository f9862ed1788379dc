"""
Pydantic schemas for the private student content lookup.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StudentRecord(BaseModel):
    """A student row decoded from one of the class partitions."""

    student_id: str
    partition: str
    name: str = ""
    class_name: str = ""
    video_link: str = ""
    letter_text: str = ""


class StudentData(BaseModel):
    """The four fields the website shows to a student."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    class_name: str = Field(..., alias="class")
    video_link: str = Field(..., alias="teacherVtrLink")
    letter_text: str = Field(..., alias="privateLetterText")

    @classmethod
    def from_record(cls, record: StudentRecord) -> "StudentData":
        return cls(
            name=record.name,
            class_name=record.class_name,
            video_link=record.video_link,
            letter_text=record.letter_text,
        )


class StudentLookupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: Union[str, int] = Field("", alias="studentId")


class StudentLookupResponse(BaseModel):
    """``success`` carries ``data``; ``not_found`` and ``error`` carry ``message``."""

    status: Literal["success", "not_found", "error"]
    data: Optional[StudentData] = None
    message: Optional[str] = None
