from __future__ import annotations

import os
import sys
import tempfile
import uuid
from pathlib import Path
from typing import Dict


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `vidhub/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

# The engine is created at import time, so the test database must be chosen first.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="vidhub-tests-"))
_DB_PATH = _TEST_DIR / "vidhub.db"
os.environ["VIDHUB_DB_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["VIDHUB_TEMP_DIR"] = str(_TEST_DIR / "uploads")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from vidhub.api.deps import get_uploader  # noqa: E402
from vidhub.core.database import Base  # noqa: E402
from vidhub.main import app  # noqa: E402
from vidhub.models.models import User  # noqa: E402


class FakeUploader:
    """Records uploads instead of talking to object storage."""

    def __init__(self):
        self.uploads = []
        self.discarded = []
        self.fail = False
        self.failing_folders = set()

    async def upload(self, local_path: Path, folder: str):
        self.uploads.append((folder, local_path.name, local_path.read_bytes()))
        if self.fail or folder in self.failing_folders:
            return None
        return f"https://media.test/{folder}/{local_path.name}"

    async def discard(self, url: str) -> None:
        self.discarded.append(url)


def _new_user(name: str) -> User:
    return User(
        id=uuid.uuid4(),
        username=name,
        email=f"{name}@example.com",
        full_name=name.capitalize(),
        avatar=f"https://media.test/avatars/{name}.png",
        cover_image=f"https://media.test/covers/{name}.png",
    )


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ── API fixtures ─────────────────────────────────────────────────────────

@pytest.fixture()
def users() -> Dict[str, uuid.UUID]:
    """Fresh database file seeded with three users."""
    _DB_PATH.unlink(missing_ok=True)
    sync_engine = create_engine(f"sqlite:///{_DB_PATH}")
    Base.metadata.create_all(sync_engine)
    seeded = {name: _new_user(name) for name in ("alice", "bob", "carol")}
    with Session(sync_engine) as session:
        session.add_all(seeded.values())
        session.commit()
        ids = {name: user.id for name, user in seeded.items()}
    sync_engine.dispose()
    return ids


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def client(users, uploader):
    app.dependency_overrides[get_uploader] = lambda: uploader
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def as_user(users):
    def headers(name: str) -> Dict[str, str]:
        return {"X-User-Id": str(users[name])}
    return headers


# ── Service fixtures ─────────────────────────────────────────────────────

@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def session(anyio_backend):
    """In-memory database session for service-level tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as db:
        yield db
    await engine.dispose()


@pytest.fixture()
def make_user():
    """Factory for unsaved users with unique ids."""
    return _new_user
