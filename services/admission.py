# services/admission.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from models import AttemptAction
from services.attempt_log import AttemptLog
from services.locks import KeyedLock, NoLock
from services.result_store import ResultStore

logger = logging.getLogger(__name__)

ALREADY_SUBMITTED = "You have already submitted the quiz. Contact admin to retake."


@dataclass(frozen=True)
class Submission:
    phone: str
    name: str
    correct: int
    wrong: int
    score: float
    answers: Any = None


@dataclass(frozen=True)
class Admission:
    accepted: bool
    reason: str | None = None
    result_id: int | None = None
    retake: bool = False


class AdmissionController:
    """
    Decides whether a submission is stored.

    A phone gets one result. A second submission is rejected unless the
    newest stored result carries allowed_retake, in which case every stored
    result for that phone is dropped and the new one inserted in the same
    transaction. Dropping all of them (not just the newest) also collapses
    duplicates left behind by an earlier race.
    """

    def __init__(
        self,
        store: ResultStore,
        attempt_log: AttemptLog,
        locks: KeyedLock | NoLock | None = None,
    ):
        self.store = store
        self.attempt_log = attempt_log
        self.locks = locks if locks is not None else NoLock()

    def submit(self, submission: Submission, user_agent: str | None = None) -> Admission:
        # _admit always ends its transaction, so the attempt log's own session
        # never waits on a pool slot this request is still holding
        try:
            with self.locks.hold(submission.phone):
                return self._admit(submission)
        finally:
            self.attempt_log.record(submission.phone, AttemptAction.SUBMIT, user_agent)

    def _admit(self, submission: Submission) -> Admission:
        existing = self.store.find_by_phone(submission.phone)
        retake = False
        if existing:
            latest = existing[0]
            if not latest.allowed_retake:
                self.store.release()
                logger.info("rejected duplicate submission for phone=%r", submission.phone)
                return Admission(accepted=False, reason=ALREADY_SUBMITTED)
            if len(existing) > 1:
                logger.warning(
                    "repairing %d duplicate results for phone=%r", len(existing), submission.phone
                )
            self.store.delete_all(existing)
            retake = True

        result = self.store.add(
            name=submission.name,
            phone=submission.phone,
            correct=submission.correct,
            wrong=submission.wrong,
            score=submission.score,
            answers=submission.answers,
        )
        self.store.flush()
        result_id = result.id
        # no refresh after commit: that would check out a connection again
        self.store.commit()
        return Admission(accepted=True, result_id=result_id, retake=retake)
