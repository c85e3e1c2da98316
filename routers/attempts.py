# routers/attempts.py
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from deps.services import get_attempt_log
from schemas.attempts import AttemptEventOut, TrackAttemptRequest, TrackAttemptResponse
from services.attempt_log import AttemptLog

router = APIRouter(prefix="/api/attempts", tags=["attempts"])


@router.post("", response_model=TrackAttemptResponse)
def track_attempt(
    req: TrackAttemptRequest,
    attempt_log: Annotated[AttemptLog, Depends(get_attempt_log)],
    user_agent: Annotated[str | None, Header()] = None,
):
    event = attempt_log.record(req.phone, req.action, req.user_agent or user_agent)
    if event is None:
        raise HTTPException(status_code=500, detail="Failed to record attempt")
    return TrackAttemptResponse(ok=True, id=event.id)


@router.get("/{phone}", response_model=list[AttemptEventOut])
def list_attempts(phone: str, attempt_log: Annotated[AttemptLog, Depends(get_attempt_log)]):
    # public diagnostics endpoint, newest first
    return attempt_log.list_for_phone(phone)
