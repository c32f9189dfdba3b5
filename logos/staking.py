"""Validator enumeration over the Cosmos SDK staking REST API."""

import urllib.parse

import httpx
from pydantic import ValidationError
import structlog

from logos.errors import DataSourceError
from logos.models import Validator, ValidatorPage


logger = structlog.get_logger(__name__)

VALIDATOR_LIST_ENDPOINT = "/cosmos/staking/v1beta1/validators"
VALIDATOR_LIST_PAGE_SIZE = 50
DEFAULT_MAX_PAGES = 200


def _encode_cursor(value: str) -> str:
    """Percent-encode a pagination key (RFC 3986, nothing left unescaped but unreserved)."""
    return urllib.parse.quote(value, safe="")


def build_page_url(rest_url: str, next_key: str | None, limit: int = VALIDATOR_LIST_PAGE_SIZE) -> str:
    """Build the URL for one page of the validator list.

    The LCD expects `pagination.key` before `pagination.limit`, so the query
    string is assembled by hand rather than from a params dict.
    """
    base = f"{rest_url.rstrip('/')}{VALIDATOR_LIST_ENDPOINT}"
    if next_key:
        return f"{base}?pagination.key={_encode_cursor(next_key)}&pagination.limit={limit}"
    return f"{base}?pagination.limit={limit}"


async def _fetch_page(client: httpx.AsyncClient, url: str, page: int) -> ValidatorPage:
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        raise DataSourceError(f"Failed to fetch validator page {page}: {e}") from e

    if not 200 <= response.status_code < 300:
        logger.debug("Validator list error body", status=response.status_code, body=response.text)
        raise DataSourceError(f"Failed to fetch validator page {page}: HTTP {response.status_code}")

    try:
        return ValidatorPage.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise DataSourceError(f"Invalid validator page {page}: {e}") from e


async def fetch_validators(
    client: httpx.AsyncClient,
    rest_url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[Validator]:
    """Fetch every validator of a chain, following pagination cursors.

    Pages are requested one at a time in cursor order and concatenated in the
    order received. Any failure aborts the whole enumeration; a partial list is
    never returned.

    Args:
        client: HTTP client shared by the request
        rest_url: Base address of the chain's REST (LCD) API
        max_pages: Upper bound on pages requested before giving up

    Returns:
        All validators, in upstream order

    Raises:
        DataSourceError: on a failed or malformed page, a repeated cursor, or
            more than `max_pages` pages
    """
    validators: list[Validator] = []
    seen_keys: set[str] = set()
    next_key: str | None = None
    page = 0

    while True:
        page += 1
        if page > max_pages:
            raise DataSourceError(f"Validator list exceeded {max_pages} pages at {rest_url}")

        url = build_page_url(rest_url, next_key)
        data = await _fetch_page(client, url, page)
        validators.extend(data.validators)
        logger.debug("📄 Validator page fetched", page=page, count=len(data.validators))

        next_key = data.pagination.next_key if data.pagination else None
        if not next_key:
            break
        if next_key in seen_keys:
            raise DataSourceError(f"Validator list pagination did not advance at page {page}")
        seen_keys.add(next_key)

    logger.info("✅ Validator list fetched", rest_url=rest_url, pages=page, count=len(validators))
    return validators
