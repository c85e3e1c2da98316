from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmitRequest(BaseModel):
    # phone format is not checked here; an empty string is a valid key
    phone: str = ""
    name: str
    correct: int = Field(ge=0)
    wrong: int = Field(ge=0)
    score: float
    answers: Any = None


class SubmitResponse(BaseModel):
    ok: bool
    message: str
    result_id: int | None = None
    retake: bool = False


class ResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    phone: str
    correct: int
    wrong: int
    score: float
    answers: Any = None
    created_at: datetime | None
    allowed_retake: bool = False
    retake_allowed_at: datetime | None = None
    retake_disallowed_at: datetime | None = None


class RetakeStatusOut(BaseModel):
    allowed_retake: bool
    result: ResultOut | None = None
    message: str | None = None


class MessageOut(BaseModel):
    ok: bool = True
    message: str
