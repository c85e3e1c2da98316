# services/result_store.py
from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import QuizResult, utcnow


class StoreFailure(Exception):
    """A persistence call failed; the session has been rolled back."""

    def __init__(self, operation: str):
        super().__init__(f"store operation failed: {operation}")
        self.operation = operation


class ResultNotFound(Exception):
    def __init__(self, result_id: int):
        super().__init__(f"result {result_id} not found")
        self.result_id = result_id


# newest first; id breaks exact-timestamp ties so the pick is deterministic
NEWEST_FIRST = (QuizResult.created_at.desc(), QuizResult.id.desc())


class ResultStore:
    """
    Thin repository over the quiz_results table.

    Writes are staged on the session and only land on commit(), so a retake's
    delete-then-insert is one transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure(operation) from e

    def find_by_phone(self, phone: str) -> list[QuizResult]:
        with self._guard("find_by_phone"):
            stmt = select(QuizResult).where(QuizResult.phone == phone).order_by(*NEWEST_FIRST)
            return list(self.db.scalars(stmt))

    def latest_for_phone(self, phone: str) -> QuizResult | None:
        rows = self.find_by_phone(phone)
        return rows[0] if rows else None

    def list_newest_first(self) -> list[QuizResult]:
        with self._guard("list"):
            return list(self.db.scalars(select(QuizResult).order_by(*NEWEST_FIRST)))

    def get(self, result_id: int) -> QuizResult:
        with self._guard("get"):
            result = self.db.get(QuizResult, result_id)
        if result is None:
            raise ResultNotFound(result_id)
        return result

    def add(
        self,
        *,
        name: str,
        phone: str,
        correct: int,
        wrong: int,
        score: float,
        answers: Any = None,
    ) -> QuizResult:
        result = QuizResult(
            name=name,
            phone=phone,
            correct=correct,
            wrong=wrong,
            score=score,
            answers=answers,
            created_at=utcnow(),
            allowed_retake=False,
        )
        self.db.add(result)
        return result

    def delete_all(self, results: Iterable[QuizResult]) -> None:
        with self._guard("delete_all"):
            for r in results:
                self.db.delete(r)

    def delete(self, result_id: int) -> None:
        result = self.get(result_id)
        self.delete_all([result])
        self.commit()

    def flush(self) -> None:
        with self._guard("flush"):
            self.db.flush()

    def commit(self) -> None:
        with self._guard("commit"):
            self.db.commit()

    def release(self) -> None:
        """End a read-only transaction so its pooled connection goes back to the pool."""
        with self._guard("release"):
            self.db.rollback()

    def refresh(self, result: QuizResult) -> QuizResult:
        with self._guard("refresh"):
            self.db.refresh(result)
        return result
