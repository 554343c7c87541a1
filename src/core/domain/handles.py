"""Paymail handle parsing and syntax validation.

Turns raw user input into a normalized `alias@domain.tld`: provider
shorthand (`$alias`, `1alias`) is expanded, `mailto:` and surrounding
whitespace are stripped and the result is lowercased. Validation is
syntax-only; no lookup happens here.
"""

from __future__ import annotations

import re

from core.domain.errors import PaymailValidationError
from core.domain.models import PaymailHandle

# RFC 5322 (simplified) local part + hostname
_PAYMAIL_REGEX = re.compile(
    r"^[a-z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-z0-9-]+(?:\.[a-z0-9-]+)*$"
)
_HOST_LABEL_REGEX = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")

# Provider shorthand handles
_HANDCASH_DOMAIN = "handcash.io"
_RELAYX_DOMAIN = "relayx.io"


def convert_handle(raw: str) -> str:
    """Expand `$alias` (HandCash) and `1alias` (RelayX) into full addresses."""

    handle = raw.strip().lower()
    if "@" in handle or len(handle) < 2:
        return handle
    if handle.startswith("$"):
        return f"{handle[1:]}@{_HANDCASH_DOMAIN}"
    if handle.startswith("1"):
        return f"{handle[1:]}@{_RELAYX_DOMAIN}"
    return handle


def sanitize_paymail(raw: str) -> str:
    address = raw.strip().lower()
    return address.removeprefix("mailto:")


def extract_parts(raw: str) -> tuple[str, str]:
    """Return `(domain, address)`; both empty when `raw` has no `@`."""

    address = sanitize_paymail(convert_handle(raw))
    if "@" not in address:
        return "", ""
    return address.split("@", 1)[1], address


def split_handle(address: str) -> PaymailHandle:
    alias, _, domain = address.partition("@")
    if not alias or not domain:
        raise PaymailValidationError(f"paymail address failed format validation: {address}")
    return PaymailHandle(alias=alias, domain=domain)


def validate_paymail(address: str) -> bool:
    return bool(address) and _PAYMAIL_REGEX.match(address) is not None


def validate_domain(domain: str) -> bool:
    """Hostname syntax check: dotted labels, no leading/trailing hyphens."""

    if not domain or len(domain) > 253:
        return False
    labels = domain.rstrip(".").split(".")
    if len(labels) < 2:
        return False
    if not all(_HOST_LABEL_REGEX.match(label) for label in labels):
        return False
    return not labels[-1].isdigit()


def validate_paymail_and_domain(address: str, domain: str) -> None:
    """Raise `PaymailValidationError` unless both address and domain are well formed."""

    if not address:
        raise PaymailValidationError("paymail address not found or invalid")
    if not validate_paymail(address):
        raise PaymailValidationError(f"paymail address failed format validation: {address}")
    if not validate_domain(domain):
        raise PaymailValidationError(f"domain name is invalid: {domain}")
