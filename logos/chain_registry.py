"""Chain registry lookups for supported chains.

Each supported chain publishes a static `chain.json` document in the Xion
assets repository. The only part consumed here is the list of REST (LCD)
endpoints under `apis.rest`.
"""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

import httpx
from pydantic import ValidationError
import structlog

from logos.errors import ClientInputError, DataSourceError, UpstreamValidationError
from logos.models import ChainMetadata


logger = structlog.get_logger(__name__)


class ChainId(StrEnum):
    """Chain ids the service answers for."""

    MAINNET = "xion-mainnet-1"
    TESTNET = "xion-testnet-2"


CHAIN_REGISTRY_SLUGS: Mapping[ChainId, str] = MappingProxyType(
    {
        ChainId.MAINNET: "xion",
        ChainId.TESTNET: "testnets/xiontestnet2",
    }
)


class ChainRegistry:
    """Resolves chain ids to registry documents.

    The id-to-URL table is built once and never mutated afterwards.
    """

    def __init__(self, base_url: str, slugs: Mapping[ChainId, str] = CHAIN_REGISTRY_SLUGS) -> None:
        self.base_url = base_url.rstrip("/")
        self.urls: Mapping[ChainId, str] = MappingProxyType({chain_id: f"{self.base_url}/{slug}/chain.json" for chain_id, slug in slugs.items()})

    def url_for(self, chain_id: ChainId | str) -> str:
        """Return the registry document URL for a chain id."""
        url = self.urls.get(chain_id)  # type: ignore[call-overload]
        if url is None:
            raise ClientInputError(f"No chain registry entry for chain-id: {chain_id}")
        return url

    async def fetch_metadata(self, client: httpx.AsyncClient, chain_id: ChainId | str) -> ChainMetadata:
        """Fetch and parse the registry document for a chain.

        Raises:
            ClientInputError: if the chain id has no registry entry
            DataSourceError: if the document cannot be fetched or parsed
        """
        url = self.url_for(chain_id)

        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise DataSourceError(f"Failed to fetch chain registry for {chain_id}: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.debug("Chain registry error body", status=response.status_code, body=response.text)
            raise DataSourceError(f"Failed to fetch chain registry for {chain_id}: HTTP {response.status_code}")

        try:
            metadata = ChainMetadata.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DataSourceError(f"Invalid chain registry document for {chain_id}: {e}") from e

        logger.info("📋 Chain metadata fetched", chain_id=str(chain_id), rest_endpoints=len(metadata.apis.rest))
        return metadata


def rest_address(metadata: ChainMetadata) -> str:
    """Return the first usable REST endpoint of a chain.

    Raises:
        UpstreamValidationError: if the document lists no REST address
    """
    for endpoint in metadata.apis.rest:
        address = (endpoint.address or "").strip().rstrip("/")
        if address:
            return address
    raise UpstreamValidationError(f"Chain metadata for {metadata.chain_id or 'unknown chain'} has no REST endpoint")
