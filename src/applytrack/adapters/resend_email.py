"""Resend email adapter - HTTP client for notification emails."""

import html
import logging

import requests

from applytrack.ports.notifier import CATEGORIES, EmailMessage, NotificationError

logger = logging.getLogger(__name__)

API_URL = "https://api.resend.com/emails"


def render_html(subject: str, body: str) -> str:
    """Wrap a notification in the tracker's email layout."""
    paragraphs = "".join(f"<p>{html.escape(line)}</p>" for line in body.splitlines() if line.strip())
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">Job Application Tracker</h2>
  <div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0;">{html.escape(subject)}</h3>
    {paragraphs}
  </div>
  <p style="color: #64748b; font-size: 14px;">
    This is an automated notification from your Job Application Tracker.
  </p>
</div>
""".strip()


class ResendEmailNotifier:
    """
    Resend API adapter.

    Implements EmailNotifier protocol. Raises NotificationError on failure;
    callers decide whether that matters.
    """

    def __init__(self, api_key: str, sender: str, timeout: int = 15):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self._http = requests.Session()

    def send(self, message: EmailMessage) -> None:
        if message.category not in CATEGORIES:
            raise NotificationError(f"Unknown notification category: {message.category}")
        if not self.api_key:
            raise NotificationError("Email service not configured")

        try:
            resp = self._http.post(
                API_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": [message.recipient],
                    "subject": message.subject,
                    "html": render_html(message.subject, message.body),
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"Email service error: {e}") from e

        logger.info(f"Sent {message.category} email to {message.recipient}")
