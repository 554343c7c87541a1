"""Paymail resolution orchestration.

Runs the bsvalias basic address resolution flow as a single forward pass:

    validate receiver -> default/validate sender -> discover receiver
    capabilities -> require PKI + resolution -> [sender validation]
    -> receiver PKI -> resolve address -> [public profile] -> report

Any step may instead end the run in ABORTED. Side-effects (printing) stay
out of this module: every user-facing line is emitted through
`ResolverHooks.log` and collected on the `ResolutionResult`.

See http://bsvalias.org/04-01-basic-address-resolution.html
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Callable

from core.domain.brfc import (
    BRFC_BASIC_ADDRESS_RESOLUTION,
    BRFC_PAYMENT_DESTINATION,
    BRFC_PKI,
    BRFC_PKI_ALTERNATE,
    BRFC_PUBLIC_PROFILE,
    BRFC_SENDER_VALIDATION,
)
from core.domain.errors import (
    DiscoveryTimeout,
    MissingCapabilityError,
    PaymailError,
    PaymailValidationError,
    TransportError,
)
from core.domain.handles import extract_parts, split_handle, validate_paymail_and_domain
from core.domain.models import (
    AddressResolutionResponse,
    CapabilitySet,
    LogLevel,
    PaymailHandle,
    PKIResponse,
    PublicProfileResponse,
    ResolutionReport,
    SenderRequest,
)
from core.interfaces.transport import PaymailTransport

# Byte length of the placeholder signature (hex-encoded: 128 chars)
PLACEHOLDER_SIGNATURE_BYTES = 64

SENDER_HANDLE_FLAG = "--sender-handle"
SIGNATURE_FLAG = "--signature"


class ResolutionStage(IntEnum):
    """States of a resolution run, in the only order they may be entered."""

    START = 0
    VALIDATE_RECEIVER = 1
    VALIDATE_SENDER = 2
    DISCOVER_RECEIVER = 3
    REQUIRE_CAPABILITIES = 4
    SENDER_VALIDATION = 5
    RECEIVER_PKI = 6
    RESOLVE_ADDRESS = 7
    PUBLIC_PROFILE = 8
    REPORT = 9
    ABORTED = 100


@dataclass(frozen=True)
class ResolveOptions:
    """Caller-facing configuration for one resolution."""

    amount: int = 0
    purpose: str = ""
    sender_handle: str = ""
    sender_name: str = ""
    signature: str = ""
    skip_pki: bool = False
    skip_public_profile: bool = False

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("amount must be a non-negative number of satoshis")


@dataclass
class ResolverHooks:
    """Optional callbacks for UI layers."""

    log: Callable[[LogLevel, str], None] | None = None


@dataclass
class ResolutionResult:
    """Outcome of a resolution run."""

    stage: ResolutionStage
    aborted_at: ResolutionStage | None = None
    error: PaymailError | None = None
    report: ResolutionReport | None = None
    events: list[tuple[LogLevel, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.stage is ResolutionStage.REPORT and self.report is not None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_rfc3339(moment: datetime) -> str:
    """Second-precision RFC3339 timestamp in UTC (`Z` suffix)."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def require_capability(capabilities: CapabilitySet, domain: str, primary: str, alternate: str) -> str:
    """URL template for a mandatory capability; raises `MissingCapabilityError` when absent."""

    url = capabilities.get_string(primary, alternate)
    if not url:
        raise MissingCapabilityError(domain, primary)
    return url


class Resolver:
    """Resolves a receiver paymail handle into an output script and address."""

    def __init__(
        self,
        transport: PaymailTransport,
        *,
        hooks: ResolverHooks | None = None,
        random_hex: Callable[[int], str] = secrets.token_hex,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._transport = transport
        self._hooks = hooks or ResolverHooks()
        self._random_hex = random_hex
        self._clock = clock

    async def resolve(self, address: str, options: ResolveOptions | None = None) -> ResolutionResult:
        run = _ResolutionRun(self, address, options or ResolveOptions())
        return await run.execute()


class _ResolutionRun:
    """State of a single resolution; discarded once the result is returned."""

    def __init__(self, resolver: Resolver, address: str, options: ResolveOptions) -> None:
        self._resolver = resolver
        self._transport = resolver._transport
        self._raw_address = address
        self._options = options
        self._result = ResolutionResult(stage=ResolutionStage.START)

        self._signature = options.signature
        self._signature_synthesized = False
        self._sender_pub_key: str | None = None

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @property
    def stage(self) -> ResolutionStage:
        return self._result.stage

    def _advance(self, stage: ResolutionStage) -> None:
        if stage <= self.stage:
            raise RuntimeError(f"invalid resolution transition: {self.stage.name} -> {stage.name}")
        self._result.stage = stage

    def _log(self, level: LogLevel, message: str) -> None:
        self._result.events.append((level, message))
        if self._resolver._hooks.log is not None:
            self._resolver._hooks.log(level, message)

    def _abort(self, exc: PaymailError) -> None:
        failed_at = self.stage
        self._result.aborted_at = failed_at
        self._result.error = exc
        self._result.stage = ResolutionStage.ABORTED

        if isinstance(exc, DiscoveryTimeout):
            self._log(LogLevel.WARN, f"no capabilities found for: {exc.domain}")
        elif isinstance(exc, (PaymailValidationError, MissingCapabilityError)):
            self._log(LogLevel.ERROR, str(exc))
        elif failed_at is ResolutionStage.RESOLVE_ADDRESS and isinstance(exc, TransportError):
            self._log(LogLevel.ERROR, f"address resolution failed: {exc}")
        else:
            self._log(LogLevel.ERROR, f"error: {exc}")

    async def execute(self) -> ResolutionResult:
        try:
            await self._run()
        except PaymailError as exc:
            self._abort(exc)
        return self._result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        receiver = self._validate_receiver()
        sender_handle, sender_domain = self._validate_sender(receiver)

        self._advance(ResolutionStage.DISCOVER_RECEIVER)
        capabilities = await self._transport.discover_capabilities(receiver.domain)

        self._advance(ResolutionStage.REQUIRE_CAPABILITIES)
        pki_url = require_capability(capabilities, receiver.domain, BRFC_PKI, BRFC_PKI_ALTERNATE)
        resolve_url = require_capability(
            capabilities,
            receiver.domain,
            BRFC_PAYMENT_DESTINATION,
            BRFC_BASIC_ADDRESS_RESOLUTION,
        )

        if capabilities.get_bool(BRFC_SENDER_VALIDATION):
            self._advance(ResolutionStage.SENDER_VALIDATION)
            await self._pre_validate_sender(receiver, sender_handle, sender_domain)

        pki: PKIResponse | None = None
        if not self._options.skip_pki:
            self._advance(ResolutionStage.RECEIVER_PKI)
            pki = await self._transport.fetch_pki(pki_url, receiver.alias, receiver.domain)

        self._advance(ResolutionStage.RESOLVE_ADDRESS)
        resolution = await self._resolve_address(resolve_url, receiver, sender_handle)

        profile = await self._public_profile(capabilities, receiver)

        self._advance(ResolutionStage.REPORT)
        self._report(receiver, sender_handle, pki, resolution, profile)

    def _validate_receiver(self) -> PaymailHandle:
        self._advance(ResolutionStage.VALIDATE_RECEIVER)
        domain, address = extract_parts(self._raw_address)
        validate_paymail_and_domain(address, domain)
        return split_handle(address)

    def _validate_sender(self, receiver: PaymailHandle) -> tuple[str, str]:
        self._advance(ResolutionStage.VALIDATE_SENDER)
        if not self._options.sender_handle.strip():
            self._log(LogLevel.WARN, f"{SENDER_HANDLE_FLAG} not set, using: {receiver.address}")
            return receiver.address, receiver.domain

        sender_domain, sender_handle = extract_parts(self._options.sender_handle)
        validate_paymail_and_domain(sender_handle, sender_domain)
        return sender_handle, sender_domain

    async def _pre_validate_sender(self, receiver: PaymailHandle, sender_handle: str, sender_domain: str) -> None:
        """Sender validation (http://bsvalias.org/04-02-sender-validation.html)."""

        self._log(LogLevel.WARN, "sender validation is ENFORCED")

        if not self._signature:
            self._log(LogLevel.ERROR, f"missing required flag: {SIGNATURE_FLAG} - see the help section: -h")
            # Placeholder only: not a valid signature over the request.
            self._log(LogLevel.WARN, f"attempting to fake a signature for: {sender_handle}...")
            self._signature = self._resolver._random_hex(PLACEHOLDER_SIGNATURE_BYTES)
            self._signature_synthesized = True

        if sender_handle != receiver.address:
            sender_capabilities = await self._transport.discover_capabilities(sender_domain)
            sender_pki_url = require_capability(sender_capabilities, sender_domain, BRFC_PKI, BRFC_PKI_ALTERNATE)
            sender = split_handle(sender_handle)
            sender_pki = await self._transport.fetch_pki(sender_pki_url, sender.alias, sender.domain)
            self._sender_pub_key = sender_pki.pub_key
            self._log(LogLevel.INFO, f"{SENDER_HANDLE_FLAG} {sender.address}'s pubkey: {sender_pki.pub_key}")

        self._log(LogLevel.SUCCESS, "send request pre-validation: passed")

    async def _resolve_address(
        self,
        resolve_url: str,
        receiver: PaymailHandle,
        sender_handle: str,
    ) -> AddressResolutionResponse:
        request = SenderRequest(
            amount=self._options.amount,
            dt=format_rfc3339(self._resolver._clock()),
            purpose=self._options.purpose,
            sender_handle=sender_handle,
            sender_name=self._options.sender_name,
            signature=self._signature,
        )

        self._log(LogLevel.DEFAULT, f"resolving address: {receiver.address}...")
        resolution = await self._transport.resolve_address(resolve_url, receiver.alias, receiver.domain, request)
        self._log(LogLevel.SUCCESS, "address resolution successful")
        return resolution

    async def _public_profile(
        self,
        capabilities: CapabilitySet,
        receiver: PaymailHandle,
    ) -> PublicProfileResponse | None:
        url = capabilities.get_string(BRFC_PUBLIC_PROFILE)
        if not url or self._options.skip_public_profile:
            return None

        self._advance(ResolutionStage.PUBLIC_PROFILE)
        self._log(LogLevel.DEFAULT, f"getting public profile for: {receiver.address}...")
        try:
            profile = await self._transport.fetch_public_profile(url, receiver.alias, receiver.domain)
        except TransportError as exc:
            self._log(LogLevel.ERROR, f"get public profile failed: {exc}")
            return None

        if profile.name:
            self._log(LogLevel.DEFAULT, f"name: {profile.name}")
        if profile.avatar:
            self._log(LogLevel.DEFAULT, f"avatar: {profile.avatar}")
        return profile

    def _report(
        self,
        receiver: PaymailHandle,
        sender_handle: str,
        pki: PKIResponse | None,
        resolution: AddressResolutionResponse,
        profile: PublicProfileResponse | None,
    ) -> None:
        pub_key = pki.pub_key if pki is not None and pki.pub_key else None
        if pub_key:
            self._log(LogLevel.DEFAULT, f"pubkey: {pub_key}")
        self._log(LogLevel.DEFAULT, f"output script: {resolution.output}")
        self._log(LogLevel.DEFAULT, f"address: {resolution.address}")

        self._result.report = ResolutionReport(
            receiver=receiver.address,
            sender_handle=sender_handle,
            pub_key=pub_key,
            sender_pub_key=self._sender_pub_key,
            output_script=resolution.output,
            address=resolution.address,
            profile=profile,
            signature_synthesized=self._signature_synthesized,
            resolved_at=self._resolver._clock(),
        )
