"""
Async fetching of the raw question list.
Implements retry logic with exponential backoff.
"""

import asyncio
from typing import Dict, Optional

import httpx
import structlog

from integrations.base import QuestionSource
from questions.errors import FetchError

logger = structlog.get_logger(__name__)


class PastebinSource(QuestionSource):
    """
    Fetches newline-delimited questions from a raw text URL, such as a
    Pastebin raw paste.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the source.

        Args:
            url: Raw text URL
            timeout: Request timeout in seconds
            retry_attempts: Retries after the first failed request
            retry_delay: Base delay for exponential backoff
            headers: Extra request headers
            transport: Optional httpx transport, used by tests
        """
        self.url = url
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.logger = logger.bind(component="pastebin_source", url=url)

        self.client_config = {
            "timeout": timeout,
            "headers": headers or {},
            "follow_redirects": True,
        }
        if transport is not None:
            self.client_config["transport"] = transport

    async def fetch(self) -> str:
        """
        Fetch the raw question text.

        Returns:
            Response body as text

        Raises:
            FetchError: If every attempt failed.
        """
        async with httpx.AsyncClient(**self.client_config) as client:
            response = await self._make_request_with_retry(client)

        text = response.text
        self.logger.debug("Fetched question source", size=len(text))
        return text

    async def _make_request_with_retry(self, client: httpx.AsyncClient) -> httpx.Response:
        """
        Make HTTP request with retry logic and exponential backoff.

        Args:
            client: HTTP client instance

        Returns:
            HTTP response
        """
        last_exception = None

        for attempt in range(self.retry_attempts + 1):
            try:
                response = await client.get(self.url)
                response.raise_for_status()
                return response

            except httpx.HTTPError as e:
                last_exception = e

                if attempt < self.retry_attempts:
                    delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                    self.logger.warning(
                        "Retrying request",
                        attempt=attempt + 1,
                        max_attempts=self.retry_attempts,
                        delay_seconds=delay,
                        error=str(e)
                    )
                    await asyncio.sleep(delay)

        self.logger.error(
            "Request failed after retries",
            retries=self.retry_attempts,
            error=str(last_exception)
        )
        raise FetchError(
            f"Failed to fetch questions from {self.url}: {last_exception}",
            original_error=last_exception
        )
