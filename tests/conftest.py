# tests/conftest.py
from pathlib import Path

import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from jobify.db.documents import ResumeRef
from jobify.db.mongo import init_db
from jobify.main import app
from jobify.services.mailer import get_mailer
from jobify.services.storage import StorageError, get_storage

PASSWORD = "secret123"


class FakeStorage:
    """In-memory stand-in for ResumeStorage."""

    uses_s3 = False

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_save = False
        self.fail_delete = False
        self._counter = 0

    async def save(self, data, filename, content_type=None):
        if self.fail_save:
            raise StorageError("storage unavailable")
        self._counter += 1
        key = f"jobify_profile_resumes/resume-{self._counter}{Path(filename).suffix.lower()}"
        self.objects[key] = data
        return ResumeRef(public_id=key, url=f"https://files.example.test/{key}")

    def resolve_url(self, ref):
        return ref.url

    async def delete(self, public_id):
        self.deleted.append(public_id)
        if self.fail_delete:
            return False
        return self.objects.pop(public_id, None) is not None


class FakeMailer:
    enabled = True

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, text, html=None):
        if self.fail:
            raise ConnectionRefusedError("smtp relay down")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})
        return True


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["jobify_test"]
    await init_db(database)
    yield database
    client.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
async def client(db, storage, mailer):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register + login; returns (auth headers, user json)."""

    async def _make(email, role="Job Seeker", skillset=None, name="Test User"):
        if skillset is None:
            skillset = ["Python", "SQL"] if role == "Job Seeker" else []
        body = {
            "name": name,
            "email": email,
            "phone": 9876543210,
            "password": PASSWORD,
            "role": role,
            "skillset": skillset,
        }
        r = await client.post("/api/v1/user/register", json=body)
        assert r.status_code == 201, r.text
        r = await client.post("/api/v1/user/login", json={"email": email, "password": PASSWORD})
        assert r.status_code == 200, r.text
        data = r.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _make


@pytest.fixture
def job_payload():
    def _payload(**overrides):
        body = {
            "title": "Backend Engineer",
            "company": "Acme",
            "category": "Engineering",
            "country": "India",
            "city": "Bengaluru",
            "location": "MG Road",
            "experienceLevel": "Mid Level",
            "description": "Build and run the jobs API.",
            "skillsRequired": ["Python", "MongoDB"],
            "timeLeftToExpire": 30,
        }
        body.update(overrides)
        return body

    return _payload


@pytest.fixture
def application_payload():
    def _payload(job_id, **overrides):
        body = {
            "name": "Jane Seeker",
            "email": "jane@example.com",
            "coverLetter": "I would love to work on this.",
            "phone": 9123456780,
            "address": "12 Park Street, Kolkata",
            "jobId": job_id,
        }
        body.update(overrides)
        return body

    return _payload
