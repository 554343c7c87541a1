"""Shared fixtures: an in-memory, recording paymail transport."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from core.domain.brfc import (
    BRFC_PAYMENT_DESTINATION,
    BRFC_PKI,
    BRFC_PUBLIC_PROFILE,
    BRFC_SENDER_VALIDATION,
)
from core.domain.errors import DiscoveryError
from core.domain.models import (
    AddressResolutionResponse,
    CapabilitySet,
    PKIResponse,
    PublicProfileResponse,
    SenderRequest,
)

RECEIVER_PUBKEY = "02" + "ab" * 32
SENDER_PUBKEY = "03" + "cd" * 32
# Genesis block coinbase pubkey hash
OUTPUT_SCRIPT = "76a91462e907b15cbf27d5425399ebf6f0fb50ebb88f1888ac"
ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)


def make_capabilities(
    *,
    pki: bool = True,
    resolution: bool = True,
    sender_validation: bool | None = None,
    public_profile: bool = False,
    extra: dict[str, Any] | None = None,
) -> CapabilitySet:
    caps: dict[str, Any] = {}
    if pki:
        caps[BRFC_PKI] = "https://pay.example.com/api/v1/bsvalias/id/{alias}@{domain.tld}"
    if resolution:
        caps[BRFC_PAYMENT_DESTINATION] = "https://pay.example.com/api/v1/bsvalias/address/{alias}@{domain.tld}"
    if sender_validation is not None:
        caps[BRFC_SENDER_VALIDATION] = sender_validation
    if public_profile:
        caps[BRFC_PUBLIC_PROFILE] = "https://pay.example.com/api/v1/bsvalias/public-profile/{alias}@{domain.tld}"
    if extra:
        caps.update(extra)
    return CapabilitySet(bsvalias="1.0", capabilities=caps)


class FakeTransport:
    """Deterministic `PaymailTransport` that records every call.

    Values may be exceptions, in which case the matching call raises them.
    """

    def __init__(
        self,
        capabilities: dict[str, CapabilitySet | Exception] | None = None,
        *,
        pub_keys: dict[str, str] | None = None,
        pki_error: Exception | None = None,
        pki_errors: dict[str, Exception] | None = None,
        resolution: AddressResolutionResponse | Exception | None = None,
        profile: PublicProfileResponse | Exception | None = None,
    ) -> None:
        self.capabilities = capabilities or {"example.com": make_capabilities()}
        self.pub_keys = pub_keys or {}
        self.pki_error = pki_error
        self.pki_errors = pki_errors or {}
        self.resolution = resolution or AddressResolutionResponse(output=OUTPUT_SCRIPT, address=ADDRESS)
        self.profile = profile or PublicProfileResponse(name="Alice", avatar="https://example.com/alice.png")
        self.calls: list[tuple[Any, ...]] = []
        self.requests: list[SenderRequest] = []

    async def __aenter__(self) -> "FakeTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def discover_capabilities(self, domain: str) -> CapabilitySet:
        self.calls.append(("discover", domain))
        value = self.capabilities.get(domain)
        if value is None:
            raise DiscoveryError(domain, f"bad response from paymail provider: code 404 ({domain})")
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_pki(self, url: str, alias: str, domain: str) -> PKIResponse:
        self.calls.append(("pki", alias, domain))
        if self.pki_error is not None:
            raise self.pki_error
        handle = f"{alias}@{domain}"
        if handle in self.pki_errors:
            raise self.pki_errors[handle]
        return PKIResponse(handle=handle, pubkey=self.pub_keys.get(handle, RECEIVER_PUBKEY))

    async def resolve_address(
        self,
        url: str,
        alias: str,
        domain: str,
        request: SenderRequest,
    ) -> AddressResolutionResponse:
        self.calls.append(("resolve", alias, domain))
        self.requests.append(request)
        if isinstance(self.resolution, Exception):
            raise self.resolution
        return self.resolution

    async def fetch_public_profile(self, url: str, alias: str, domain: str) -> PublicProfileResponse:
        self.calls.append(("profile", alias, domain))
        if isinstance(self.profile, Exception):
            raise self.profile
        return self.profile


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user/project .env files and sender defaults out of the tests."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("PAYMAIL_INSPECTOR_SENDER_HANDLE", "")
    monkeypatch.setenv("PAYMAIL_INSPECTOR_SENDER_NAME", "")
