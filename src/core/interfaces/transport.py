"""Contract for the paymail transport collaborator.

`Protocol` keeps the resolver independent of the HTTP stack: the httpx
adapter and the in-memory fakes used in tests are interchangeable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import (
    AddressResolutionResponse,
    CapabilitySet,
    PKIResponse,
    PublicProfileResponse,
    SenderRequest,
)


@runtime_checkable
class PaymailTransport(Protocol):
    """Requests a resolver makes against paymail providers.

    Failures are raised as `TransportError` subclasses; discovery raises
    `DiscoveryError` / `DiscoveryTimeout` so a deadline can be told apart
    from any other failure.
    """

    async def discover_capabilities(self, domain: str) -> CapabilitySet:
        """Fetch the capabilities document for `domain`."""

        ...

    async def fetch_pki(self, url: str, alias: str, domain: str) -> PKIResponse:
        """Fetch the public key of `alias@domain` from a PKI URL template."""

        ...

    async def resolve_address(
        self,
        url: str,
        alias: str,
        domain: str,
        request: SenderRequest,
    ) -> AddressResolutionResponse:
        """Request a payment destination for `alias@domain`."""

        ...

    async def fetch_public_profile(self, url: str, alias: str, domain: str) -> PublicProfileResponse:
        """Fetch the public profile of `alias@domain`."""

        ...
