from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.models import JobRecord


class CreateJobRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str = Field(min_length=1)
    image_location: str = Field(default="", alias="imageLocation")


class JobResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    description: str
    image_location: str = Field(alias="imageLocation")
    author: str
    runner: str = ""

    @classmethod
    def from_record(cls, rec: JobRecord) -> "JobResponse":
        return cls(
            id=rec.id,
            description=rec.description,
            image_location=rec.image_location,
            author=rec.author,
            runner=rec.runner,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "success"


class CreatedResponse(MessageResponse):
    created_id: str = Field(alias="createdId")


class CheckedResponse(MessageResponse):
    checked_id: str = Field(alias="checkedId")


class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None


ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
