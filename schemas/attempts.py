from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models import AttemptAction


class TrackAttemptRequest(BaseModel):
    phone: str = ""
    action: AttemptAction
    # falls back to the request's User-Agent header
    user_agent: str | None = None


class TrackAttemptResponse(BaseModel):
    ok: bool
    id: int | None = None


class AttemptEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    phone: str
    action: AttemptAction
    created_at: datetime | None
    user_agent: str | None = None
