"""Well-known bsvalias capability identifiers.

Providers advertise a capability either under its BRFC id or under a
named alias (`pki`, `paymentDestination`); both spellings are listed so
lookups and the capabilities table accept either.
"""

from __future__ import annotations

BRFC_PKI = "pki"
BRFC_PKI_ALTERNATE = "0c4339ef99c2"

BRFC_PAYMENT_DESTINATION = "paymentDestination"
BRFC_BASIC_ADDRESS_RESOLUTION = "759684b1a19a"

BRFC_SENDER_VALIDATION = "6745f1a8ee43"
BRFC_PUBLIC_PROFILE = "f12f968c92d6"
BRFC_VERIFY_PUBLIC_KEY = "a9f510c16bde"

KNOWN_CAPABILITIES: dict[str, str] = {
    BRFC_PKI: "PKI",
    BRFC_PKI_ALTERNATE: "PKI",
    BRFC_PAYMENT_DESTINATION: "Payment Destination",
    BRFC_BASIC_ADDRESS_RESOLUTION: "Basic Address Resolution",
    BRFC_SENDER_VALIDATION: "Sender Validation",
    BRFC_PUBLIC_PROFILE: "Public Profile",
    BRFC_VERIFY_PUBLIC_KEY: "Verify Public Key Owner",
}


def capability_name(brfc_id: str) -> str | None:
    """Human readable name for a known identifier."""

    return KNOWN_CAPABILITIES.get(brfc_id)
