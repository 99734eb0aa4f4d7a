"""
Test cases for fetching the raw question list.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from integrations.source import PastebinSource
from questions.errors import FetchError

PASTE_URL = "https://pastebin.com/raw/AbC123"


def make_source(handler, **kwargs):
    return PastebinSource(PASTE_URL, transport=httpx.MockTransport(handler), **kwargs)


class TestPastebinSource:
    """Test cases for PastebinSource."""

    @pytest.mark.asyncio
    async def test_fetch_returns_body(self, sample_source_text):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text=sample_source_text)

        source = make_source(handler, headers={"User-Agent": "QotdBot/test"})

        text = await source.fetch()

        assert text == sample_source_text
        assert len(seen) == 1
        assert str(seen[0].url) == PASTE_URL
        assert seen[0].headers["User-Agent"] == "QotdBot/test"

    @pytest.mark.asyncio
    async def test_empty_body_is_not_an_error(self):
        source = make_source(lambda request: httpx.Response(200, text=""))

        assert await source.fetch() == ""

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        responses = iter([
            httpx.Response(503, text="busy"),
            httpx.Response(200, text="Cats or dogs?"),
        ])
        source = make_source(lambda request: next(responses), retry_attempts=3, retry_delay=0.5)

        with patch("integrations.source.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            text = await source.fetch()

        assert text == "Cats or dogs?"
        mock_sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_backoff_doubles(self):
        source = make_source(lambda request: httpx.Response(500), retry_attempts=3, retry_delay=1.0)

        with patch("integrations.source.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(FetchError):
                await source.fetch()

        assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, text="Not Found")

        source = make_source(handler, retry_attempts=2)

        with patch("integrations.source.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(FetchError) as exc_info:
                await source.fetch()

        assert len(calls) == 3
        assert isinstance(exc_info.value.original_error, httpx.HTTPStatusError)
        assert PASTE_URL in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        source = make_source(handler, retry_attempts=0)

        with pytest.raises(FetchError) as exc_info:
            await source.fetch()

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/raw/AbC123":
                return httpx.Response(301, headers={"Location": "https://pastebin.com/raw/moved"})
            return httpx.Response(200, text="Mountains or beaches?")

        source = make_source(handler)

        assert await source.fetch() == "Mountains or beaches?"
