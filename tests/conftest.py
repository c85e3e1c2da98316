import os
import tempfile
from datetime import UTC, datetime, timedelta

import bcrypt
import pytest

# must be set before db.py is imported anywhere
_tmpdir = tempfile.mkdtemp(prefix="quiz-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD_HASH"] = bcrypt.hashpw(b"hunter2", bcrypt.gensalt(rounds=4)).decode()

from db import Base, SessionLocal, engine  # noqa: E402
from deps.auth import create_access_token  # noqa: E402
from main import app  # noqa: E402
from models import QuizResult  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin')}"}


@pytest.fixture
def insert_result():
    """Write a result row directly, bypassing admission (e.g. to fake a race)."""

    def _insert(phone="555", score=5.0, minutes_ago=0, allowed_retake=False, name="Sam"):
        with SessionLocal() as db:
            r = QuizResult(
                name=name,
                phone=phone,
                correct=int(score),
                wrong=10 - int(score),
                score=score,
                created_at=datetime.now(UTC) - timedelta(minutes=minutes_ago),
                allowed_retake=allowed_retake,
            )
            db.add(r)
            db.commit()
            return r.id

    return _insert


def results_for(phone):
    with SessionLocal() as db:
        return db.query(QuizResult).filter(QuizResult.phone == phone).all()
