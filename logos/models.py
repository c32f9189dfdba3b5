"""Pydantic models for the validator logos service."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiEndpoint(BaseModel):
    """A single API endpoint advertised by the chain registry."""

    address: str | None = None
    provider: str | None = None


class ChainApis(BaseModel):
    """API endpoints section of a chain registry document."""

    rest: list[ApiEndpoint] = Field(default_factory=list)
    rpc: list[ApiEndpoint] = Field(default_factory=list)


class ChainMetadata(BaseModel):
    """Subset of a chain registry `chain.json` document."""

    chain_id: str | None = None
    chain_name: str | None = None
    pretty_name: str | None = None
    apis: ChainApis = Field(default_factory=ChainApis)


class ValidatorDescription(BaseModel):
    """Operator-supplied description of a validator."""

    moniker: str | None = None
    identity: str | None = None
    website: str | None = None
    security_contact: str | None = None
    details: str | None = None


class Validator(BaseModel):
    """A validator as returned by the Cosmos staking module."""

    operator_address: str
    description: ValidatorDescription = Field(default_factory=ValidatorDescription)
    jailed: bool = False
    status: str | None = None
    tokens: str | None = None
    commission: dict[str, Any] | None = None

    @property
    def identity(self) -> str | None:
        """Keybase identity reference, or None when blank."""
        identity = (self.description.identity or "").strip()
        return identity or None


class PageInfo(BaseModel):
    """Pagination block of a Cosmos SDK list response."""

    next_key: str | None = None
    total: str | None = None


class ValidatorPage(BaseModel):
    """One page of `/cosmos/staking/v1beta1/validators`."""

    validators: list[Validator]
    pagination: PageInfo | None = None


class ValidatorImagesResponse(BaseModel):
    """Validator logo mapping for one chain."""

    model_config = ConfigDict(populate_by_name=True)

    chain_id: str = Field(alias="chainId")
    validators: dict[str, str]
    timestamp: str  # ISO-8601, UTC
