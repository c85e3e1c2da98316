import threading
import time

import pytest

from db import SessionLocal
from deps.services import get_admission_controller, submission_locks
from models import AttemptAction, AttemptEvent
from services.admission import AdmissionController, Submission
from services.attempt_log import AttemptLog
from services.locks import KeyedLock, NoLock
from services.result_store import ResultStore, StoreFailure
from services.retakes import RetakeAuthorizationManager


class RecordingLog:
    def __init__(self):
        self.calls = []

    def record(self, phone, action, user_agent=None):
        self.calls.append((phone, action, user_agent))


class DeleteFailsStore(ResultStore):
    def delete_all(self, results):
        raise StoreFailure("delete_all")


def _sub(phone="555", score=5):
    return Submission(phone=phone, name="Sam", correct=5, wrong=5, score=score)


def test_store_failure_propagates_and_attempt_still_logged(insert_result):
    insert_result(phone="555", allowed_retake=True)
    log = RecordingLog()
    with SessionLocal() as db:
        controller = AdmissionController(DeleteFailsStore(db), log)
        with pytest.raises(StoreFailure):
            controller.submit(_sub(), user_agent="ua")
    assert log.calls == [("555", AttemptAction.SUBMIT, "ua")]


def test_rejection_outcome_carries_reason(insert_result):
    insert_result(phone="555")
    with SessionLocal() as db:
        admission = AdmissionController(ResultStore(db), RecordingLog()).submit(_sub())
    assert admission.accepted is False
    assert "already submitted" in admission.reason
    assert admission.result_id is None


def test_attempt_log_record_returns_event():
    event = AttemptLog(SessionLocal).record("12", AttemptAction.START, "ua")
    assert event is not None and event.id is not None
    with SessionLocal() as db:
        assert db.get(AttemptEvent, event.id).action == "start"


def _run_threads(target, n):
    errors = []

    def guarded(i):
        try:
            target(i)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=guarded, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


class LinedUpAttemptLog(AttemptLog):
    """Makes every submitter reach record() before any of them writes."""

    def __init__(self, barrier):
        super().__init__(SessionLocal)
        self.barrier = barrier

    def record(self, phone, action, user_agent=None):
        self.barrier.wait(timeout=10)
        return super().record(phone, action, user_agent)


def _submit_events(phone_prefix):
    with SessionLocal() as db:
        return (
            db.query(AttemptEvent)
            .filter(AttemptEvent.phone.startswith(phone_prefix), AttemptEvent.action == "submit")
            .count()
        )


def test_more_concurrent_submits_than_pool_slots_all_logged():
    # more submitters than the engine's pool_size=5
    n = 8
    attempt_log = LinedUpAttemptLog(threading.Barrier(n))
    outcomes = []

    def worker(i):
        with SessionLocal() as db:
            controller = AdmissionController(ResultStore(db), attempt_log, submission_locks)
            outcomes.append(controller.submit(_sub(phone=f"pool-{i}")).accepted)

    assert _run_threads(worker, n) == []
    assert outcomes == [True] * n
    assert _submit_events("pool-") == n


def test_concurrent_rejections_release_their_connections(insert_result):
    n = 8
    for i in range(n):
        insert_result(phone=f"dup-{i}")
    attempt_log = LinedUpAttemptLog(threading.Barrier(n))
    outcomes = []

    def worker(i):
        with SessionLocal() as db:
            controller = AdmissionController(ResultStore(db), attempt_log, submission_locks)
            outcomes.append(controller.submit(_sub(phone=f"dup-{i}")).accepted)

    assert _run_threads(worker, n) == []
    assert outcomes == [False] * n
    assert _submit_events("dup-") == n


def test_serialized_concurrent_first_submissions_store_one_result():
    n = 6
    barrier = threading.Barrier(n)
    locks = KeyedLock()
    outcomes = []

    def worker(i):
        barrier.wait(timeout=10)
        with SessionLocal() as db:
            controller = AdmissionController(ResultStore(db), AttemptLog(SessionLocal), locks)
            outcomes.append(controller.submit(_sub(phone="race")).accepted)

    assert _run_threads(worker, n) == []
    assert sorted(outcomes) == [False] * (n - 1) + [True]
    with SessionLocal() as db:
        assert len(ResultStore(db).find_by_phone("race")) == 1
    assert _submit_events("race") == n


def test_default_provider_serializes_submissions(monkeypatch):
    monkeypatch.delenv("SERIALIZE_SUBMISSIONS", raising=False)
    with SessionLocal() as db:
        controller = get_admission_controller(ResultStore(db), AttemptLog(SessionLocal))
    assert controller.locks is submission_locks


class LinedUpReadStore(ResultStore):
    """Holds each reader after its lookup until the other reader has looked too."""

    def __init__(self, db, barrier):
        super().__init__(db)
        self.barrier = barrier

    def find_by_phone(self, phone):
        rows = super().find_by_phone(phone)
        self.barrier.wait(timeout=10)
        return rows


def test_unserialized_submissions_can_race_and_retake_collapses(monkeypatch):
    monkeypatch.setenv("SERIALIZE_SUBMISSIONS", "0")
    barrier = threading.Barrier(2)
    outcomes = []

    def worker(i):
        with SessionLocal() as db:
            controller = get_admission_controller(
                LinedUpReadStore(db, barrier), AttemptLog(SessionLocal)
            )
            assert isinstance(controller.locks, NoLock)
            outcomes.append(controller.submit(_sub(phone="racy", score=i)).accepted)

    assert _run_threads(worker, 2) == []
    # both saw an empty slot, so both were stored
    assert outcomes == [True, True]
    with SessionLocal() as db:
        rows = ResultStore(db).find_by_phone("racy")
        assert len(rows) == 2
        RetakeAuthorizationManager(ResultStore(db)).allow(rows[0].id)

    with SessionLocal() as db:
        controller = AdmissionController(ResultStore(db), AttemptLog(SessionLocal))
        assert controller.submit(_sub(phone="racy", score=9)).accepted is True

    with SessionLocal() as db:
        rows = ResultStore(db).find_by_phone("racy")
    assert [r.score for r in rows] == [9]
    assert _submit_events("racy") == 3


def test_keyed_lock_serializes_same_key():
    locks = KeyedLock()
    inside = []
    overlap = []

    def worker():
        with locks.hold("k"):
            if inside:
                overlap.append(True)
            inside.append(True)
            time.sleep(0.02)
            inside.pop()

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlap == []
    assert len(locks) == 0


def test_keyed_lock_different_keys_do_not_block():
    locks = KeyedLock()
    entered = threading.Event()

    def other():
        with locks.hold("b"):
            entered.set()

    with locks.hold("a"):
        t = threading.Thread(target=other)
        t.start()
        assert entered.wait(timeout=2)
        t.join()
    assert len(locks) == 0
