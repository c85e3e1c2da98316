import os
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from services.admission import AdmissionController
from services.attempt_log import AttemptLog
from services.locks import KeyedLock, NoLock
from services.queries import ResultQueryService
from services.result_store import ResultStore
from services.retakes import RetakeAuthorizationManager

# process-wide: every request must see the same per-phone locks
submission_locks = KeyedLock()


def _serialize_submissions() -> bool:
    return os.getenv("SERIALIZE_SUBMISSIONS", "1").lower() not in ("0", "false", "no")


def get_result_store(db: Annotated[Session, Depends(get_db)]) -> ResultStore:
    return ResultStore(db)


def get_attempt_log() -> AttemptLog:
    return AttemptLog(SessionLocal)


def get_admission_controller(
    store: Annotated[ResultStore, Depends(get_result_store)],
    attempt_log: Annotated[AttemptLog, Depends(get_attempt_log)],
) -> AdmissionController:
    locks = submission_locks if _serialize_submissions() else NoLock()
    return AdmissionController(store, attempt_log, locks)


def get_retake_manager(
    store: Annotated[ResultStore, Depends(get_result_store)],
) -> RetakeAuthorizationManager:
    return RetakeAuthorizationManager(store)


def get_query_service(
    store: Annotated[ResultStore, Depends(get_result_store)],
) -> ResultQueryService:
    return ResultQueryService(store)
