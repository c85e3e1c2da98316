# services/retakes.py
from __future__ import annotations

import logging

from models import QuizResult, utcnow
from services.result_store import ResultStore

logger = logging.getLogger(__name__)


class RetakeAuthorizationManager:
    """Admin toggles for one concrete stored result (by id, not by phone)."""

    def __init__(self, store: ResultStore):
        self.store = store

    def allow(self, result_id: int) -> QuizResult:
        result = self.store.get(result_id)
        result.allowed_retake = True
        result.retake_allowed_at = utcnow()
        self.store.commit()
        logger.info("retake allowed for result %s", result_id)
        return self.store.refresh(result)

    def disallow(self, result_id: int) -> QuizResult:
        result = self.store.get(result_id)
        result.allowed_retake = False
        result.retake_disallowed_at = utcnow()
        self.store.commit()
        logger.info("retake disallowed for result %s", result_id)
        return self.store.refresh(result)
