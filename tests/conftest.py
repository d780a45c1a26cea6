"""
Test configuration and fixtures.

Provides:
- Settings isolated from the environment and .env
- An application with fake MongoDB collection and fake SMTP server
- HTTPX AsyncClient bound to the app through ASGITransport
"""
from dataclasses import dataclass, field
from typing import List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from contact_relay.api.deps import get_notifier, get_repository
from contact_relay.core import notifier as notifier_module
from contact_relay.core.config import Settings
from contact_relay.core.notifier import MailSettings, Notifier
from contact_relay.db.submissions import SubmissionRepository
from contact_relay.main import create_app


# =============================================================================
# Fakes
# =============================================================================

@dataclass
class InsertResult:
    inserted_id: str


class FakeCollection:
    """Collects inserted documents in memory"""

    def __init__(self, fail=False):
        self.documents = []
        self.fail = fail

    async def insert_one(self, document):
        if self.fail:
            raise RuntimeError("insert failed")
        self.documents.append(document)
        return InsertResult(inserted_id=f"id-{len(self.documents)}")


@dataclass
class SentMail:
    host: str
    port: int
    ssl: bool
    messages: List = field(default_factory=list)
    login: tuple = None
    starttls: bool = False


class FakeSMTPServer:
    """Records every SMTP session opened against it"""

    def __init__(self, offers_starttls=True):
        self.sessions: List[SentMail] = []
        self.offers_starttls = offers_starttls

    @property
    def messages(self):
        return [msg for session in self.sessions for msg in session.messages]

    def factory(self, ssl=False):
        server = self

        class FakeSMTP:
            def __init__(self, host, port):
                self.session = SentMail(host=host, port=port, ssl=ssl)
                server.sessions.append(self.session)

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def ehlo(self):
                pass

            def has_extn(self, name):
                return server.offers_starttls and name == "starttls"

            def starttls(self):
                self.session.starttls = True

            def login(self, user, password):
                self.session.login = (user, password)

            def send_message(self, msg):
                self.session.messages.append(msg)
                return {}

        return FakeSMTP


# =============================================================================
# Fixtures
# =============================================================================

MAIL_SETTINGS = dict(
    smtp_host="smtp.test",
    smtp_port=587,
    smtp_user="relay",
    smtp_pass="secret",
    to_email="inbox@business.test",
    from_email="noreply@business.test",
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, uploads_dir=str(tmp_path / "uploads"), static_dir=None, **MAIL_SETTINGS)


@pytest.fixture
def smtp_server(monkeypatch) -> FakeSMTPServer:
    server = FakeSMTPServer()
    monkeypatch.setattr(notifier_module.smtplib, "SMTP", server.factory())
    monkeypatch.setattr(notifier_module.smtplib, "SMTP_SSL", server.factory(ssl=True))
    return server


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def app(settings, collection, smtp_server):
    app = create_app(settings)
    repository = SubmissionRepository(collection)
    notifier = Notifier(MailSettings.from_settings(settings))
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
