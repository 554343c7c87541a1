"""Typed errors raised across the resolution flow.

Timeouts are their own types, so callers branch on `isinstance` instead of
inspecting error strings.
"""

from __future__ import annotations


class PaymailError(Exception):
    """Base class for every paymail failure surfaced to the user."""


class PaymailValidationError(PaymailError):
    """Malformed paymail address, handle or domain."""


class TransportError(PaymailError):
    """A request to a paymail provider failed."""


class TransportTimeout(TransportError):
    """A request to a paymail provider exceeded its deadline."""


class DiscoveryError(TransportError):
    """Capability discovery for a domain failed."""

    def __init__(self, domain: str, detail: str) -> None:
        super().__init__(detail)
        self.domain = domain


class DiscoveryTimeout(DiscoveryError, TransportTimeout):
    """Capability discovery for a domain exceeded its deadline."""


class MissingCapabilityError(PaymailError):
    """A mandatory capability is absent from a capabilities document."""

    def __init__(self, domain: str, brfc: str) -> None:
        super().__init__(f"{domain} is missing a required capability: {brfc}")
        self.domain = domain
        self.brfc = brfc
