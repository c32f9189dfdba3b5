"""Keybase identity lookups for validator logos.

Validators advertise a Keybase key suffix in `description.identity`. The
profile picture of the matching Keybase user is used as the validator logo.
"""

from collections.abc import Iterable
from typing import Any

import httpx
import structlog

from logos.errors import IdentityLookupError
from logos.models import Validator


logger = structlog.get_logger(__name__)

KEYBASE_LOOKUP_URL = "https://keybase.io/_/api/1.0/user/lookup.json"


def extract_picture_url(payload: Any) -> str | None:
    """Return `them[0].pictures.primary.url` from a lookup response, if present."""
    if not isinstance(payload, dict):
        return None
    them = payload.get("them")
    if not isinstance(them, list) or not them:
        return None
    user = them[0]
    if not isinstance(user, dict):
        return None
    pictures = user.get("pictures")
    if not isinstance(pictures, dict):
        return None
    primary = pictures.get("primary")
    if not isinstance(primary, dict):
        return None
    url = primary.get("url")
    if isinstance(url, str) and url.strip():
        return url.strip()
    return None


async def lookup_identity_image(
    client: httpx.AsyncClient,
    identity: str,
    lookup_url: str = KEYBASE_LOOKUP_URL,
) -> str | None:
    """Look up the primary picture for a Keybase key suffix.

    Returns:
        The picture URL, or None when the user has no picture

    Raises:
        IdentityLookupError: if the lookup request fails or returns non-JSON
    """
    try:
        response = await client.get(lookup_url, params={"key_suffix": identity})
    except httpx.HTTPError as e:
        raise IdentityLookupError(f"Keybase lookup failed for {identity}: {e}") from e

    if not 200 <= response.status_code < 300:
        raise IdentityLookupError(f"Keybase lookup failed for {identity}: HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise IdentityLookupError(f"Invalid Keybase response for {identity}: {e}") from e

    return extract_picture_url(payload)


async def resolve_validator_images(
    client: httpx.AsyncClient,
    validators: Iterable[Validator],
    lookup_url: str = KEYBASE_LOOKUP_URL,
) -> dict[str, str]:
    """Map operator addresses to Keybase picture URLs.

    Lookups run one after another in validator order. A failed lookup only
    drops that validator's entry; it never aborts the batch. An identity shared
    by several validators is looked up once.
    """
    images: dict[str, str] = {}
    resolved: dict[str, str | None] = {}
    failures = 0

    for validator in validators:
        identity = validator.identity
        if identity is None:
            continue

        if identity not in resolved:
            try:
                resolved[identity] = await lookup_identity_image(client, identity, lookup_url)
            except IdentityLookupError as e:
                failures += 1
                logger.warning("⚠️ Keybase lookup failed", operator_address=validator.operator_address, identity=identity, error=str(e))
                resolved[identity] = None

        url = resolved[identity]
        if url:
            images[validator.operator_address] = url

    logger.info("🖼️ Validator images resolved", resolved=len(images), lookups=len(resolved), failures=failures)
    return images
