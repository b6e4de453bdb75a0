"""Shared fixtures for the voting API tests.

The environment is configured before the application is imported so the
module-level settings and engine pick up a throwaway SQLite database.
Each test then gets its own database file, an overridden session
dependency and an in-memory stand-in for Cloudinary.
"""

import os
import tempfile

_BOOTSTRAP_DIR = tempfile.mkdtemp(prefix="voting-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_BOOTSTRAP_DIR}/bootstrap.db"
os.environ["ADMIN_EMAILS"] = '["admin@votez.io"]'
os.environ["SECRET_KEY"] = "test-secret-key"

from typing import AsyncGenerator, Awaitable, Callable, Dict, List, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi import UploadFile  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

import models  # noqa: E402,F401
from core.base import Base  # noqa: E402
from core.depends import get_session  # noqa: E402
from core.settings import settings  # noqa: E402
from core.storage import AssetStorage, StoredAsset, get_asset_storage  # noqa: E402
from main import app  # noqa: E402

API = settings.API_PREFIX
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256
ADMIN_EMAIL = "admin@votez.io"
VOTER_EMAIL = "a@x.com"
PASSWORD = "secret1"


class FakeAssetStorage(AssetStorage):
    """Records uploads and deletions instead of talking to Cloudinary."""

    def __init__(self):
        super().__init__()
        self.uploads: List[StoredAsset] = []
        self.deleted: List[str] = []
        self.fail_deletes = False
        self.after_upload: Optional[Callable[[], Awaitable[None]]] = None

    async def upload(self, upload: UploadFile, folder: str) -> StoredAsset:
        number = len(self.uploads) + 1
        asset = StoredAsset(
            url=f"https://res.cloudinary.com/demo/image/upload/{folder}/{number}.png",
            asset_id=f"{folder}/{number}",
        )
        self.uploads.append(asset)
        if self.after_upload is not None:
            await self.after_upload()
        return asset

    async def delete(self, asset_id: str) -> None:
        if self.fail_deletes:
            raise RuntimeError("cloudinary unavailable")
        self.deleted.append(asset_id)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'voting.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, autocommit=False, expire_on_commit=False)


@pytest.fixture
def storage() -> FakeAssetStorage:
    return FakeAssetStorage()


@pytest.fixture
async def client(session_factory, storage) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client wired to the app with test database and storage."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_asset_storage] = lambda: storage

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    async def _register(
        full_name: str = "Ada Voter",
        email: str = VOTER_EMAIL,
        password: str = PASSWORD,
        password2: Optional[str] = None,
    ) -> httpx.Response:
        return await client.post(f"{API}/voters/register", json={
            "fullName": full_name,
            "email": email,
            "password": password,
            "password2": password if password2 is None else password2,
        })

    return _register


@pytest.fixture
def login(client):
    async def _login(email: str = VOTER_EMAIL, password: str = PASSWORD) -> httpx.Response:
        return await client.post(f"{API}/voters/login", json={"email": email, "password": password})

    return _login


async def _authenticate(register, login, full_name: str, email: str) -> Dict:
    response = await register(full_name=full_name, email=email)
    assert response.status_code == 201, response.text
    response = await login(email=email)
    assert response.status_code == 200, response.text
    data = response.json()
    return {"id": data["id"], "headers": {"Authorization": f"Bearer {data['token']}"}}


@pytest.fixture
async def voter_auth(register, login) -> Dict:
    return await _authenticate(register, login, "Ada Voter", VOTER_EMAIL)


@pytest.fixture
async def admin_auth(register, login) -> Dict:
    return await _authenticate(register, login, "Grace Admin", ADMIN_EMAIL)


@pytest.fixture
def create_election(client, admin_auth):
    async def _create(
        title: Optional[str] = "Student Council 2026",
        description: Optional[str] = "Pick the next council president",
        thumbnail: Optional[bytes] = PNG_BYTES,
        headers: Optional[Dict] = None,
    ) -> httpx.Response:
        data = {key: value for key, value in {"title": title, "description": description}.items() if value is not None}
        files = {"thumbnail": ("thumb.png", thumbnail, "image/png")} if thumbnail is not None else None
        return await client.post(
            f"{API}/elections",
            data=data,
            files=files,
            headers=admin_auth["headers"] if headers is None else headers,
        )

    return _create


@pytest.fixture
def create_candidate(client, admin_auth):
    async def _create(
        election_id: Optional[str],
        full_name: Optional[str] = "Jane Candidate",
        motto: Optional[str] = "Better libraries for everyone",
        image: Optional[bytes] = PNG_BYTES,
        headers: Optional[Dict] = None,
    ) -> httpx.Response:
        fields = {"fullName": full_name, "motto": motto, "currentElection": election_id}
        data = {key: value for key, value in fields.items() if value is not None}
        files = {"image": ("portrait.png", image, "image/png")} if image is not None else None
        return await client.post(
            f"{API}/candidates",
            data=data,
            files=files,
            headers=admin_auth["headers"] if headers is None else headers,
        )

    return _create


@pytest.fixture
async def election(create_election) -> Dict:
    response = await create_election()
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def candidate(create_candidate, election) -> Dict:
    response = await create_candidate(election["id"])
    assert response.status_code == 201, response.text
    return response.json()["candidate"]
