"""Account emails dispatched in the background."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from html import escape
from urllib.parse import quote

from food_diary.adapters.mail_client import MailClient

_logger = logging.getLogger(__name__)


@dataclass
class NotificationService:
    """Builds account emails and sends them without blocking the caller.

    Delivery failures are logged and never propagate to the request.
    """

    mail_client: MailClient
    app_base_url: str
    _pending: set[asyncio.Task[None]] = field(default_factory=set, repr=False)

    def send_verification(self, email: str, name: str, token: str) -> None:
        link = f"{self.app_base_url.rstrip('/')}/auth/verify/{quote(token)}"
        html = (
            f"<p>Hi {escape(name)},</p>"
            "<p>Thanks for signing up. Confirm your email address to start "
            "logging meals:</p>"
            f'<p><a href="{escape(link)}">Verify my email</a></p>'
            "<p>The link expires in 24 hours.</p>"
        )
        self._dispatch(
            self.mail_client.send_email(email, "Verify your Food Diary account", html),
            kind="verification",
            email=email,
        )

    def send_password_reset(self, email: str, token: str) -> None:
        link = f"{self.app_base_url.rstrip('/')}/reset-password?token={quote(token)}"
        html = (
            "<p>We received a request to reset your password.</p>"
            f'<p><a href="{escape(link)}">Choose a new password</a></p>'
            "<p>The link expires in 1 hour. If you didn't ask for this, "
            "ignore this email.</p>"
        )
        self._dispatch(
            self.mail_client.send_email(email, "Reset your Food Diary password", html),
            kind="password reset",
            email=email,
        )

    async def drain(self) -> None:
        """Wait for all in-flight emails; used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _dispatch(
        self, send: Coroutine[object, object, None], *, kind: str, email: str
    ) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(send, kind, email))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(
        self, send: Coroutine[object, object, None], kind: str, email: str
    ) -> None:
        try:
            await send
        except Exception:
            _logger.exception("Failed to send %s email to %s", kind, email)
        else:
            _logger.info("Sent %s email to %s", kind, email)
