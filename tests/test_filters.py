"""Tests for request filters."""

import json
from dataclasses import replace

import pytest
from aiohttp import web
from aiohttp.test_utils import make_mocked_request
from flatsite.config import Config
from flatsite.filters import ApiKeyFilter, apply_filters


async def ok_handler(request: web.Request) -> web.Response:
    return web.json_response({"success": True})


def _body(response: web.StreamResponse) -> dict:
    assert isinstance(response, web.Response)
    assert response.body is not None
    return json.loads(response.body)


class TestApiKeyFilter:
    """Tests for ApiKeyFilter."""

    @pytest.mark.asyncio
    async def test__matching_key__calls_handler(self, test_config: Config) -> None:
        """A matching x-api-key passes through."""
        request = make_mocked_request("GET", "/api/page", headers={"x-api-key": "test-secret"})

        response = await ApiKeyFilter(test_config)(request, ok_handler)

        assert response.status == 200
        assert _body(response) == {"success": True}

    @pytest.mark.asyncio
    async def test__missing_header__returns_401(self, test_config: Config) -> None:
        """No header is rejected with a JSON message."""
        request = make_mocked_request("GET", "/api/page")

        response = await ApiKeyFilter(test_config)(request, ok_handler)

        assert response.status == 401
        assert _body(response) == {"success": False, "message": "Missing API key"}

    @pytest.mark.asyncio
    async def test__wrong_key__returns_401(self, test_config: Config) -> None:
        """A different key is rejected."""
        request = make_mocked_request("GET", "/api/page", headers={"x-api-key": "guess"})

        response = await ApiKeyFilter(test_config)(request, ok_handler)

        assert response.status == 401
        assert _body(response) == {"success": False, "message": "Invalid API key"}

    @pytest.mark.asyncio
    async def test__key_match__is_case_sensitive(self, test_config: Config) -> None:
        """Comparison is an exact string match."""
        request = make_mocked_request("GET", "/api/page", headers={"x-api-key": "TEST-SECRET"})

        response = await ApiKeyFilter(test_config)(request, ok_handler)

        assert response.status == 401

    @pytest.mark.asyncio
    async def test__undecodable_key__returns_401(self, test_config: Config) -> None:
        """Header bytes that are not UTF-8 are an invalid key, not a crash."""
        # aiohttp surrogate-escapes such bytes when parsing headers
        request = make_mocked_request("GET", "/api/page", headers={"x-api-key": "\udcff\udcfe"})

        response = await ApiKeyFilter(test_config)(request, ok_handler)

        assert response.status == 401
        assert _body(response) == {"success": False, "message": "Invalid API key"}

    @pytest.mark.asyncio
    async def test__no_configured_key__rejects_everything(self, test_config: Config) -> None:
        """Without API_KEY even an empty header is refused."""
        config = replace(test_config, app=replace(test_config.app, api_key=None))
        request = make_mocked_request("GET", "/api/page", headers={"x-api-key": ""})

        response = await ApiKeyFilter(config)(request, ok_handler)

        assert response.status == 401
        assert _body(response)["message"] == "Invalid API key"


class TestApplyFilters:
    """Tests for apply_filters()."""

    @pytest.mark.asyncio
    async def test__filters__run_in_declared_order(self) -> None:
        """The first filter wraps the rest."""
        calls: list[str] = []

        def recording(name: str):
            async def request_filter(request: web.Request, handler) -> web.StreamResponse:
                calls.append(f"{name}:before")
                response = await handler(request)
                calls.append(f"{name}:after")
                return response

            return request_filter

        handler = apply_filters(ok_handler, [recording("outer"), recording("inner")])
        await handler(make_mocked_request("GET", "/"))

        assert calls == ["outer:before", "inner:before", "inner:after", "outer:after"]

    def test__no_filters__returns_handler(self) -> None:
        assert apply_filters(ok_handler, []) is ok_handler
