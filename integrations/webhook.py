"""
Discord webhook delivery of the question of the day.

The question text is wrapped in a single embed; everything about its
presentation lives here.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx
import structlog

from integrations.base import Notifier
from questions.errors import NotifyError

logger = structlog.get_logger(__name__)

WEBHOOK_USERNAME = "Question of the day"
EMBED_TITLE = ":question: :grey_question: Question of the day :grey_question: :question:"
EMBED_COLOUR = 0xFF0000
# Zero-width space keeps a blank line under the description
TRAILING_SPACER = "\n\u200b"


def build_payload(text: str, bot_name: str, now: datetime) -> Dict[str, Any]:
    """
    Build the execute-webhook JSON body for one question.

    Args:
        text: Question text
        bot_name: Name shown in the embed footer
        now: Timestamp shown in the embed footer

    Returns:
        JSON-serializable payload.
    """
    return {
        "username": WEBHOOK_USERNAME,
        "embeds": [
            {
                "title": EMBED_TITLE,
                "description": text + TRAILING_SPACER,
                "color": EMBED_COLOUR,
                "footer": {
                    "text": f"Asked by {bot_name} at {now.strftime('%Y-%m-%d %H:%M:%S')}"
                },
            }
        ],
    }


class DiscordWebhookNotifier(Notifier):
    """Posts questions to a Discord channel through an incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        bot_name: str = "the question bot",
        timeout: float = 30,
        clock: Optional[Callable[[], datetime]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the notifier.

        Args:
            webhook_url: Full execute-webhook URL including the token
            bot_name: Name shown in the embed footer
            timeout: Request timeout in seconds
            clock: Returns the footer timestamp, UTC by default
            transport: Optional httpx transport, used by tests
        """
        self.webhook_url = webhook_url
        self.bot_name = bot_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger.bind(component="discord_webhook")

        self.client_config = {"timeout": timeout}
        if transport is not None:
            self.client_config["transport"] = transport

    async def send(self, text: str) -> None:
        """
        Deliver one question.

        Raises:
            NotifyError: On a transport failure or non-2xx response.
        """
        payload = build_payload(text, self.bot_name, self.clock())

        try:
            async with httpx.AsyncClient(**self.client_config) as client:
                response = await client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            self.logger.error("Webhook request failed", error=str(e))
            raise NotifyError(f"Webhook request failed: {e}", original_error=e) from e

        if response.is_success:
            self.logger.info("Question delivered", status_code=response.status_code)
            return

        # Discord explains rejections in a JSON body
        detail = response.text
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            detail = body["message"]

        self.logger.error(
            "Webhook rejected the question",
            status_code=response.status_code,
            detail=detail
        )
        raise NotifyError(
            f"Webhook returned HTTP {response.status_code}: {detail}",
            status_code=response.status_code
        )
