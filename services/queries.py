# services/queries.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from models import QuizResult
from services.result_store import ResultStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetakeStatus:
    allowed_retake: bool
    result: QuizResult | None = None


class ResultQueryService:
    def __init__(self, store: ResultStore):
        self.store = store

    def list_results(self) -> list[QuizResult]:
        return self.store.list_newest_first()

    def check_retake(self, phone: str) -> RetakeStatus:
        # read-only: duplicates are reported via the newest one, never repaired here
        latest = self.store.latest_for_phone(phone)
        if latest is None:
            return RetakeStatus(allowed_retake=False)
        return RetakeStatus(allowed_retake=bool(latest.allowed_retake), result=latest)

    def delete_result(self, result_id: int) -> None:
        self.store.delete(result_id)
        logger.info("result %s deleted", result_id)
