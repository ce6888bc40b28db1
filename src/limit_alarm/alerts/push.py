"""Push notification via an ntfy relay.

Sends one best-effort POST when the alarm fires so the alert also reaches
a phone. Enabled by setting CLAUDE_ALARM_NTFY_TOPIC.
"""

import logging
import os

import httpx

from .base import ALERT_TITLE

logger = logging.getLogger(__name__)

NTFY_TOPIC_ENV = "CLAUDE_ALARM_NTFY_TOPIC"
NTFY_BASE_URL = "https://ntfy.sh"
NTFY_TIMEOUT = 5.0  # seconds


class PushNotifier:
    """Posts alarm messages to an ntfy topic."""

    def __init__(
        self,
        topic: str | None = None,
        base_url: str = NTFY_BASE_URL,
        timeout: float = NTFY_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize push notifier.

        Args:
            topic: ntfy topic. If not provided, read from CLAUDE_ALARM_NTFY_TOPIC.
            base_url: Relay server URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._topic = topic or os.environ.get(NTFY_TOPIC_ENV)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def is_available(self) -> bool:
        """Check if a topic is configured."""
        return bool(self._topic)

    @property
    def url(self) -> str | None:
        """Full topic URL, or None when no topic is configured."""
        if not self._topic:
            return None
        return f"{self._base_url}/{self._topic}"

    def send(self, message: str) -> bool:
        """Post a message. Never raises.

        Args:
            message: Notification body.

        Returns:
            True if the relay accepted the message.
        """
        if not self._topic:
            return False

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self.url,
                    content=message.encode("utf-8"),
                    headers={"Title": ALERT_TITLE, "Tags": "alarm_clock"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Push notification rejected: HTTP {e.response.status_code}")
            return False
        except httpx.HTTPError as e:
            logger.warning(f"Push notification failed: {e}")
            return False

        logger.info(f"Push notification sent to {self.url}")
        return True


__all__ = ["NTFY_TOPIC_ENV", "PushNotifier"]
