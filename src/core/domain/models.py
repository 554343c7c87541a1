"""Domain models (Pydantic v2).

These models describe *what* the bsvalias documents and the resolution
result are, not *how* they are fetched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class LogLevel(str, Enum):
    """Severity of a user-facing event."""

    DEFAULT = "default"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


class PaymailHandle(BaseModel):
    """A paymail address split into its alias and domain."""

    model_config = ConfigDict(frozen=True)

    alias: str = Field(..., min_length=1, description="Local part, before the @.")
    domain: str = Field(..., min_length=1, description="Domain part, after the @.")

    @property
    def address(self) -> str:
        return f"{self.alias}@{self.domain}"


class CapabilitySet(BaseModel):
    """Capabilities document served at `/.well-known/bsvalias`.

    Values are URL templates for endpoints and booleans for flags. The typed
    accessors take a primary identifier and an optional alternate one; the
    first identifier present in the document wins.
    """

    model_config = ConfigDict(extra="ignore")

    bsvalias: str = Field(default="1.0", description="Protocol version.")
    capabilities: dict[str, Any] = Field(
        default_factory=dict,
        description="Map of BRFC id (or alias) to URL template or flag.",
    )

    def _lookup(self, primary: str, alternate: str = "") -> tuple[bool, Any]:
        for key in (primary, alternate):
            if key and key in self.capabilities:
                return True, self.capabilities[key]
        return False, None

    def has(self, primary: str, alternate: str = "") -> bool:
        found, _ = self._lookup(primary, alternate)
        return found

    def get_string(self, primary: str, alternate: str = "") -> str:
        """URL template for a capability, or "" when absent."""

        _, value = self._lookup(primary, alternate)
        return value if isinstance(value, str) else ""

    def get_bool(self, primary: str, alternate: str = "") -> bool:
        """Flag value for a capability, False when absent."""

        _, value = self._lookup(primary, alternate)
        return value is True


class SenderRequest(BaseModel):
    """Body of a basic address resolution request.

    Built fresh for every resolution attempt and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender_handle: str = Field(..., min_length=1, alias="senderHandle")
    dt: str = Field(..., min_length=1, description="RFC3339 UTC timestamp.")
    amount: int = Field(default=0, ge=0, description="Amount in satoshis.")
    purpose: str = Field(default="")
    sender_name: str = Field(default="", alias="senderName")
    signature: str = Field(default="")

    def to_payload(self) -> dict[str, Any]:
        """JSON body with bsvalias field names; empty optional fields are omitted."""

        payload = self.model_dump(by_alias=True)
        for key in ("amount", "purpose", "senderName", "signature"):
            if not payload.get(key):
                payload.pop(key, None)
        return payload


class PKIResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    bsvalias: str = Field(default="1.0")
    handle: str = Field(default="")
    pub_key: str = Field(default="", alias="pubkey")


class AddressResolutionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    output: str = Field(..., description="Hex-encoded output (locking) script.")
    address: str = Field(default="", description="Address derived from the output script.")


class PublicProfileResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="")
    avatar: str = Field(default="", description="Avatar URL.")


class ResolutionReport(BaseModel):
    """Final deliverable of a successful resolution."""

    receiver: str = Field(..., min_length=3)
    sender_handle: str = Field(..., min_length=3)
    pub_key: str | None = Field(default=None, description="Receiver public key (unless skipped).")
    sender_pub_key: str | None = Field(default=None)
    output_script: str = Field(..., min_length=1)
    address: str = Field(default="")
    profile: PublicProfileResponse | None = Field(default=None)
    signature_synthesized: bool = Field(
        default=False,
        description="True when a random placeholder stood in for the signature.",
    )
    resolved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
