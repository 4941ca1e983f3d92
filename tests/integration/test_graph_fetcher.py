"""Integration tests for the GraphQL fetcher — aiohttp mocked."""
from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from liquidation_bot.config import FetcherConfig
from liquidation_bot.errors import SourceFetchError
from liquidation_bot.fetchers import GraphFetcher, StaticMarketIndex


@pytest.fixture()
def fetcher() -> GraphFetcher:
    return GraphFetcher(FetcherConfig(graph_url="https://graph.example.com", page_size=2))


def _mock_session(status: int = 200, body: Any = None) -> AsyncMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=body)
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    mock_session.post = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestFetchPage:
    @pytest.mark.asyncio
    async def test_full_page_has_more(self, fetcher: GraphFetcher) -> None:
        body = {
            "data": {
                "accounts": [
                    {"id": "a1", "address": "0xAAA"},
                    {"id": "a2", "address": "0xBBB"},
                ]
            }
        }
        session = _mock_session(body=body)

        with patch("liquidation_bot.fetchers.graph.aiohttp.ClientSession", return_value=session):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                page = await fetcher.fetch_page("a0")

        assert page.users == ("0xaaa", "0xbbb")
        assert page.next_cursor == "a2"
        assert page.has_more is True
        payload = session.post.call_args.kwargs["json"]
        assert payload["variables"] == {"lastId": "a0", "first": 2}

    @pytest.mark.asyncio
    async def test_short_page_is_last(self, fetcher: GraphFetcher) -> None:
        body = {"data": {"accounts": [{"id": "a3", "address": "0xccc"}]}}

        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body=body),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                page = await fetcher.fetch_page("a2")

        assert page.users == ("0xccc",)
        assert page.has_more is False

    @pytest.mark.asyncio
    async def test_empty_page(self, fetcher: GraphFetcher) -> None:
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body={"data": {"accounts": []}}),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                page = await fetcher.fetch_page()

        assert page.users == ()
        assert page.has_more is False

    @pytest.mark.asyncio
    async def test_http_error(self, fetcher: GraphFetcher) -> None:
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(status=500),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                with pytest.raises(SourceFetchError, match="HTTP 500"):
                    await fetcher.fetch_page()

    @pytest.mark.asyncio
    async def test_graphql_errors(self, fetcher: GraphFetcher) -> None:
        body = {"errors": [{"message": "indexing error"}]}
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body=body),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                with pytest.raises(SourceFetchError, match="indexing error"):
                    await fetcher.fetch_page()

    @pytest.mark.asyncio
    async def test_empty_data(self, fetcher: GraphFetcher) -> None:
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body={"data": None}),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                with pytest.raises(SourceFetchError, match="empty data"):
                    await fetcher.fetch_page()

    @pytest.mark.asyncio
    async def test_malformed_account(self, fetcher: GraphFetcher) -> None:
        body = {"data": {"accounts": [{"id": "a1"}]}}
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body=body),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                with pytest.raises(SourceFetchError, match="Malformed"):
                    await fetcher.fetch_page()

    @pytest.mark.asyncio
    async def test_connection_error(self, fetcher: GraphFetcher) -> None:
        session = _mock_session()
        session.post = MagicMock(side_effect=ConnectionError("refused"))
        with patch("liquidation_bot.fetchers.graph.aiohttp.ClientSession", return_value=session):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                with pytest.raises(SourceFetchError, match="refused"):
                    await fetcher.fetch_page()


class TestFetchMarkets:
    @pytest.mark.asyncio
    async def test_active_markets(self, fetcher: GraphFetcher) -> None:
        body = {"data": {"markets": [{"address": "0xAA"}, {"address": "0xbb"}]}}
        with patch(
            "liquidation_bot.fetchers.graph.aiohttp.ClientSession",
            return_value=_mock_session(body=body),
        ):
            with patch("liquidation_bot.fetchers.graph.aiohttp.TCPConnector"):
                markets = await fetcher.fetch_active_markets()

        assert markets == ["0xaa", "0xbb"]

    @pytest.mark.asyncio
    async def test_static_index(self) -> None:
        index = StaticMarketIndex(["0xAA", "0xBb"])
        assert await index.fetch_active_markets() == ["0xaa", "0xbb"]
