"""Fixtures for Logos service tests."""

from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock
import urllib.parse

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from common.config import LogosConfig
from logos.chain_registry import ChainRegistry
from tests.conftest import TEST_KEYBASE_LOOKUP_URL, TEST_REGISTRY_BASE_URL


MAINNET_REGISTRY_URL = f"{TEST_REGISTRY_BASE_URL}/xion/chain.json"
TESTNET_REGISTRY_URL = f"{TEST_REGISTRY_BASE_URL}/testnets/xiontestnet2/chain.json"
TEST_LCD_URL = "https://lcd.example"
FIRST_PAGE_URL = f"{TEST_LCD_URL}/cosmos/staking/v1beta1/validators?pagination.limit=50"


def make_response(status_code: int = 200, json_data: Any = None, text: str | None = None) -> MagicMock:
    """Build a mock httpx.Response.

    Passing `text` without `json_data` makes `.json()` fail like a non-JSON body.
    """
    response = MagicMock()
    response.status_code = status_code
    if text is not None and json_data is None:
        response.text = text
        response.json = MagicMock(side_effect=json.JSONDecodeError("Expecting value", text, 0))
    else:
        response.text = json.dumps(json_data)
        response.json = MagicMock(return_value=json_data)
    return response


def make_validator(operator_address: str, identity: str = "") -> dict[str, Any]:
    """Build a minimal validator record."""
    return {
        "operator_address": operator_address,
        "status": "BOND_STATUS_BONDED",
        "tokens": "1000000",
        "description": {"moniker": operator_address, "identity": identity},
    }


def make_page(validators: list[dict[str, Any]], next_key: str | None = None) -> dict[str, Any]:
    """Build a staking validators page."""
    return {"validators": validators, "pagination": {"next_key": next_key, "total": "0"}}


def make_keybase_payload(picture_url: str | None) -> dict[str, Any]:
    """Build a Keybase lookup response, with or without a primary picture."""
    user: dict[str, Any] = {"id": "0123abcd", "basics": {"username": "validator"}}
    if picture_url is not None:
        user["pictures"] = {"primary": {"url": picture_url, "source": None}}
    return {"status": {"code": 0, "name": "OK"}, "them": [user]}


def keybase_url(identity: str) -> str:
    """Routing key for a Keybase lookup of `identity`."""
    return f"{TEST_KEYBASE_LOOKUP_URL}?{urllib.parse.urlencode({'key_suffix': identity})}"


def page_url(next_key: str) -> str:
    """Routing key for a validator page requested with `next_key`."""
    return f"{TEST_LCD_URL}/cosmos/staking/v1beta1/validators?pagination.key={urllib.parse.quote(next_key, safe='')}&pagination.limit=50"


def make_routed_client(routes: dict[str, Any]) -> AsyncMock:
    """Build a mock httpx.AsyncClient that answers GETs from a URL table.

    Values are responses or exceptions to raise. Unknown URLs answer 404.
    Query params passed via `params=` are folded into the routing key.
    """

    async def _get(url: str, params: dict[str, str] | None = None, **_kwargs: Any) -> Any:
        key = f"{url}?{urllib.parse.urlencode(params)}" if params else url
        handler = routes.get(key)
        if handler is None:
            return make_response(404, {"error": "not found"})
        if isinstance(handler, BaseException):
            raise handler
        return handler

    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.get = AsyncMock(side_effect=_get)
    return client


def requested_urls(client: AsyncMock) -> list[str]:
    """Return the routing keys of every GET issued on a routed client, in order."""
    urls = []
    for call in client.get.call_args_list:
        url = call.args[0]
        params = call.kwargs.get("params")
        urls.append(f"{url}?{urllib.parse.urlencode(params)}" if params else url)
    return urls


@pytest.fixture
def test_config() -> LogosConfig:
    """Create a test LogosConfig pointing at fake upstreams."""
    return LogosConfig(
        chain_registry_base_url=TEST_REGISTRY_BASE_URL,
        keybase_lookup_url=TEST_KEYBASE_LOOKUP_URL,
        http_timeout_seconds=5.0,
        max_validator_pages=10,
        cache_max_age_seconds=3600,
        user_agent="validator-logos-tests/1.0",
    )


@pytest.fixture
def registry(test_config: LogosConfig) -> ChainRegistry:
    """Chain registry built from the test configuration."""
    return ChainRegistry(test_config.chain_registry_base_url)


@pytest.fixture
def chain_metadata() -> dict[str, Any]:
    """Minimal mainnet chain registry document."""
    return {
        "chain_id": "xion-mainnet-1",
        "chain_name": "xion",
        "apis": {"rest": [{"address": TEST_LCD_URL, "provider": "Burnt"}]},
    }


@pytest.fixture
def scenario_routes(chain_metadata: dict[str, Any]) -> dict[str, Any]:
    """One page of two validators; only addrA has a Keybase identity."""
    return {
        MAINNET_REGISTRY_URL: make_response(200, chain_metadata),
        FIRST_PAGE_URL: make_response(200, make_page([make_validator("addrA", "kbuserA"), make_validator("addrB")])),
        keybase_url("kbuserA"): make_response(200, make_keybase_payload("https://img/a.png")),
    }


@pytest.fixture
def test_client(test_config: LogosConfig, registry: ChainRegistry) -> Generator[TestClient]:
    """Create a TestClient with mocked lifespan and module-level state."""
    import logos.logos as logos_module
    from logos.logos import app

    @asynccontextmanager
    async def mock_lifespan(_app: FastAPI) -> AsyncGenerator[None]:
        yield

    original_lifespan = app.router.lifespan_context
    original_config = logos_module.config
    original_registry = logos_module.registry

    app.router.lifespan_context = mock_lifespan
    logos_module.config = test_config
    logos_module.registry = registry

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

    # Restore original state
    logos_module.config = original_config
    logos_module.registry = original_registry
    app.router.lifespan_context = original_lifespan
