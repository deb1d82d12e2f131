"""Transactional email API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class MailClient(Protocol):
    """Interface for sending transactional email."""

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Deliver a single HTML email."""


@dataclass
class HttpxMailClient(MailClient):
    """Mail client posting to a Resend-compatible JSON API."""

    api_key: str
    api_url: str
    sender: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, api_url: str, sender: str) -> "HttpxMailClient":
        """Create a mail client with a managed httpx session."""
        return cls(
            api_key=api_key,
            api_url=api_url,
            sender=sender,
            http_client=httpx.AsyncClient(),
        )

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an email through the provider's HTTP API."""
        response = await self.http_client.post(
            self.api_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={"from": self.sender, "to": [to], "subject": subject, "html": html},
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
