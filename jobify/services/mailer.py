# jobify/services/mailer.py
import logging
import smtplib
from html import escape
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from jobify.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP sender. Without SMTP_HOST it is a logged no-op."""

    def __init__(self, cfg: Settings = default_settings):
        self.settings = cfg

    @property
    def enabled(self) -> bool:
        return bool(self.settings.SMTP_HOST)

    def _sender(self) -> str:
        address = self.settings.SMTP_FROM or self.settings.SMTP_USER or "no-reply@localhost"
        return formataddr((self.settings.MAIL_SENDER_NAME, address))

    def build_message(self, to: str, subject: str, text: str, html: Optional[str] = None) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender()
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        cfg = self.settings
        with smtplib.SMTP(cfg.SMTP_HOST, cfg.SMTP_PORT, timeout=cfg.SMTP_TIMEOUT_SEC) as smtp:
            if cfg.SMTP_USE_TLS:
                smtp.starttls()
            if cfg.SMTP_USER and cfg.SMTP_PASSWORD:
                smtp.login(cfg.SMTP_USER, cfg.SMTP_PASSWORD)
            smtp.send_message(msg)

    async def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        if not self.enabled:
            logger.info("SMTP not configured; skipping email to %s (%s)", to, subject)
            return False
        msg = self.build_message(to, subject, text, html)
        await run_in_threadpool(self._deliver, msg)
        return True


async def send_application_confirmation(mailer: Mailer, to: str, name: str, job_title: str, company: str) -> None:
    """Best-effort confirmation; errors are logged and never reach the caller."""
    text = (
        f'Hi {name}, we have received your application for "{job_title}" at {company}. '
        "We will get back to you soon."
    )
    safe_name, safe_title, safe_company = escape(name), escape(job_title), escape(company)
    html = (
        "<h2>Application received</h2>"
        f"<p>Hi {safe_name},</p>"
        f"<p>We have received your application for <strong>{safe_title}</strong> at <strong>{safe_company}</strong>.</p>"
        "<p>We will get back to you soon.</p>"
    )
    try:
        await mailer.send(to, "Application received – Jobify", text, html)
    except Exception:
        logger.exception("Application confirmation email to %s failed", to)


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
