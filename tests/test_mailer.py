# tests/test_mailer.py
import pytest

from jobify.core.config import Settings
from jobify.services import mailer as mailer_module
from jobify.services.mailer import Mailer, send_application_confirmation


class DummySMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        DummySMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.messages.append(msg)


@pytest.fixture
def dummy_smtp(monkeypatch):
    DummySMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", DummySMTP)
    return DummySMTP


@pytest.mark.asyncio
async def test_disabled_mailer_skips_sending(dummy_smtp):
    mailer = Mailer(Settings(SMTP_HOST=None))
    assert not mailer.enabled
    assert await mailer.send("jane@example.com", "hi", "body") is False
    assert dummy_smtp.instances == []


@pytest.mark.asyncio
async def test_send_over_smtp(dummy_smtp):
    cfg = Settings(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=2525,
        SMTP_USER="mailer",
        SMTP_PASSWORD="pw",
        SMTP_FROM="jobs@example.com",
    )
    mailer = Mailer(cfg)
    assert await mailer.send("jane@example.com", "Subject", "plain", "<p>html</p>") is True

    smtp = dummy_smtp.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 2525)
    assert smtp.started_tls
    assert smtp.logged_in == ("mailer", "pw")
    msg = smtp.messages[0]
    assert msg["To"] == "jane@example.com"
    assert msg["From"] == "Jobify <jobs@example.com>"
    assert msg.is_multipart()


@pytest.mark.asyncio
async def test_confirmation_escapes_and_swallows_errors():
    class Recorder:
        def __init__(self, fail=False):
            self.fail = fail
            self.calls = []

        async def send(self, to, subject, text, html=None):
            if self.fail:
                raise OSError("connection reset")
            self.calls.append((to, subject, text, html))
            return True

    ok = Recorder()
    await send_application_confirmation(ok, "jane@example.com", "Jane", "<Dev>", "Acme & Co")
    to, subject, text, html = ok.calls[0]
    assert to == "jane@example.com"
    assert subject.startswith("Application received")
    assert '"<Dev>"' in text
    assert "&lt;Dev&gt;" in html and "Acme &amp; Co" in html

    # must not raise
    await send_application_confirmation(Recorder(fail=True), "jane@example.com", "Jane", "Dev", "Acme")
