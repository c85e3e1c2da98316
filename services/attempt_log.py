# services/attempt_log.py
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import AttemptAction, AttemptEvent, utcnow

logger = logging.getLogger(__name__)


class AttemptLog:
    """
    Append-only record of what a participant did (start, refresh, submit...).

    Uses its own sessions so a failed insert here can never roll back, or be
    rolled back by, the request's result transaction.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def record(
        self, phone: str, action: AttemptAction, user_agent: str | None = None
    ) -> AttemptEvent | None:
        try:
            with self._session_factory() as db:
                event = AttemptEvent(
                    phone=phone,
                    action=AttemptAction(action).value,
                    user_agent=user_agent,
                    created_at=utcnow(),
                )
                db.add(event)
                db.commit()
                db.refresh(event)
                db.expunge(event)
                return event
        except SQLAlchemyError:
            logger.error(
                "attempt log write failed",
                exc_info=True,
                extra={"phone": phone, "action": AttemptAction(action).value},
            )
            return None

    def list_for_phone(self, phone: str) -> list[AttemptEvent]:
        with self._session_factory() as db:
            stmt = (
                select(AttemptEvent)
                .where(AttemptEvent.phone == phone)
                .order_by(AttemptEvent.created_at.desc(), AttemptEvent.id.desc())
            )
            return list(db.scalars(stmt))
