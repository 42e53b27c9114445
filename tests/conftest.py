import os
import tempfile
from datetime import date, datetime, timezone

_tmpdir = tempfile.mkdtemp(prefix="goal-tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmpdir}/test.db"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["RESEND_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["REQUIRE_SIGNED_LINKS"] = "false"

import httpx
import pytest

from goal_tracker.database import AsyncSessionLocal, Base, engine
from goal_tracker.main import app, rate_limiter
from goal_tracker.models.goal import Goal
from goal_tracker.models.user import User
from goal_tracker.services.email import get_mailer


class FakeMailer:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    async def send(self, to, subject, html):
        if to in self.fail_for:
            raise RuntimeError(f"provider rejected {to}")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return "msg-id"


@pytest.fixture(autouse=True)
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    rate_limiter.reset()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def mailer():
    fake = FakeMailer()
    app.dependency_overrides[get_mailer] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def make_user(db):
    async def _make(email="alice@example.com", name=None):
        user = User(email=email, name=name)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_goal(db):
    async def _make(user, description="Run a 5k", target_date=None, status="pending", created_at=None):
        goal = Goal(
            user_id=user.id,
            description=description,
            target_date=target_date or date(2099, 1, 1),
            status=status,
        )
        if created_at is not None:
            goal.created_at = created_at
        db.add(goal)
        await db.commit()
        await db.refresh(goal)
        return goal
    return _make


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)
