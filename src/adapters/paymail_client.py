"""Paymail transport over HTTP (httpx).

Implements `PaymailTransport`:
- Capability discovery (SRV lookup + `/.well-known/bsvalias`)
- PKI (public key) lookup
- Basic address resolution
- Public profile lookup

Every httpx failure is translated into the typed errors of
`core.domain.errors`; a deadline becomes `TransportTimeout` (or
`DiscoveryTimeout` during discovery).
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import httpx
from pydantic import ValidationError

from adapters.dns_srv import SrvTarget, capabilities_url, resolve_srv
from adapters.http_client import build_async_client
from adapters.script_address import address_from_script
from core.config import AppSettings
from core.domain.errors import (
    DiscoveryError,
    DiscoveryTimeout,
    TransportError,
    TransportTimeout,
)
from core.domain.models import (
    AddressResolutionResponse,
    CapabilitySet,
    PKIResponse,
    PublicProfileResponse,
    SenderRequest,
)
from core.interfaces.transport import PaymailTransport

logger = logging.getLogger(__name__)

# Compressed secp256k1 public key, hex encoded
PUBKEY_HEX_LENGTH = 66

SrvResolver = Callable[[str, AppSettings], Awaitable[SrvTarget]]


def resolve_url_template(template: str, alias: str, domain: str) -> str:
    """Replace the `{alias}` and `{domain.tld}` placeholders of a capability URL."""

    return template.replace("{alias}", alias).replace("{domain.tld}", domain)


def _error_detail(response: httpx.Response) -> str:
    detail = f"bad response from paymail provider: code {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return detail
    if isinstance(payload, dict) and isinstance(payload.get("message"), str) and payload["message"]:
        detail += f": {payload['message']}"
    return detail


class HttpPaymailTransport(PaymailTransport):
    """Async paymail client.

    Usage::

        async with HttpPaymailTransport(settings) as transport:
            caps = await transport.discover_capabilities("example.com")
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        srv_resolver: SrvResolver | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None
        self._srv_resolver = srv_resolver or resolve_srv

    async def __aenter__(self) -> HttpPaymailTransport:
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
            self._owns_client = True
        return self._client

    async def _request_json(self, method: str, url: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        client = self._ensure_client()
        try:
            response = await client.request(method, url, json=json)
        except httpx.TimeoutException as exc:
            raise TransportTimeout(f"request to {url} exceeded its deadline") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {url} failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise TransportError(_error_detail(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON response from {url}") from exc
        if not isinstance(payload, dict):
            raise TransportError(f"unexpected response from {url}: expected a JSON object")
        return payload

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    async def discover_capabilities(self, domain: str) -> CapabilitySet:
        target = await self._srv_resolver(domain, self._settings)
        url = capabilities_url(target)
        logger.debug("discovering capabilities for %s at %s", domain, url)

        try:
            payload = await self._request_json("GET", url)
        except TransportTimeout as exc:
            raise DiscoveryTimeout(domain, str(exc)) from exc
        except TransportError as exc:
            raise DiscoveryError(domain, str(exc)) from exc

        if not payload.get("bsvalias"):
            raise DiscoveryError(domain, f"missing bsvalias version in capabilities for {domain}")
        try:
            return CapabilitySet.model_validate(payload)
        except ValidationError as exc:
            raise DiscoveryError(domain, f"invalid capabilities document for {domain}") from exc

    # ------------------------------------------------------------------
    # PKI
    # ------------------------------------------------------------------

    async def fetch_pki(self, url: str, alias: str, domain: str) -> PKIResponse:
        payload = await self._request_json("GET", resolve_url_template(url, alias, domain))
        try:
            pki = PKIResponse.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(f"invalid pki response for {alias}@{domain}") from exc

        if len(pki.pub_key) != PUBKEY_HEX_LENGTH:
            raise TransportError(
                f"invalid pubkey length for {alias}@{domain}: {len(pki.pub_key)}, expected {PUBKEY_HEX_LENGTH}"
            )
        return pki

    # ------------------------------------------------------------------
    # Address resolution
    # ------------------------------------------------------------------

    async def resolve_address(
        self,
        url: str,
        alias: str,
        domain: str,
        request: SenderRequest,
    ) -> AddressResolutionResponse:
        payload = await self._request_json(
            "POST",
            resolve_url_template(url, alias, domain),
            json=request.to_payload(),
        )

        output = payload.get("output")
        if not isinstance(output, str) or not output:
            raise TransportError("missing an output value")

        try:
            address = address_from_script(output)
        except ValueError as exc:
            raise TransportError(f"invalid output script, missing an address: {exc}") from exc
        return AddressResolutionResponse(output=output, address=address)

    # ------------------------------------------------------------------
    # Public profile
    # ------------------------------------------------------------------

    async def fetch_public_profile(self, url: str, alias: str, domain: str) -> PublicProfileResponse:
        payload = await self._request_json("GET", resolve_url_template(url, alias, domain))
        try:
            return PublicProfileResponse.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(f"invalid public profile response for {alias}@{domain}") from exc
