from __future__ import annotations

import enum
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class AttemptAction(str, enum.Enum):
    START = "start"
    REFRESH = "refresh"
    SUBMIT = "submit"
    REFRESH_AUTO_SUBMIT = "refresh_auto_submit"


class QuizResult(Base):
    __tablename__ = "quiz_results"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    # participant identity; uniqueness is kept by the admission controller, not the table
    phone: Mapped[str] = mapped_column(String(64), index=True)
    correct: Mapped[int] = mapped_column(Integer)
    wrong: Mapped[int] = mapped_column(Integer)
    score: Mapped[float] = mapped_column(Float)
    answers: Mapped[Any] = mapped_column(JSON, nullable=True)  # opaque client payload
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    allowed_retake: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sa.false()
    )
    retake_allowed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    retake_disallowed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class AttemptEvent(Base):
    __tablename__ = "attempt_events"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone: Mapped[str] = mapped_column(String(64), index=True)
    action: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
