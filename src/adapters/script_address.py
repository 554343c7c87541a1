"""Address derivation from output scripts.

Only pay-to-public-key-hash scripts carry an address:

    OP_DUP OP_HASH160 <20-byte hash> OP_EQUALVERIFY OP_CHECKSIG
    76     a9         14 ...        88             ac
"""

from __future__ import annotations

import base58

MAINNET_P2PKH_VERSION = b"\x00"

_P2PKH_PREFIX = bytes.fromhex("76a914")
_P2PKH_SUFFIX = bytes.fromhex("88ac")
_P2PKH_LENGTH = 25


def pubkey_hash_from_script(script_hex: str) -> bytes:
    try:
        script = bytes.fromhex(script_hex)
    except ValueError as exc:
        raise ValueError(f"output script is not valid hex: {script_hex}") from exc

    if (
        len(script) != _P2PKH_LENGTH
        or not script.startswith(_P2PKH_PREFIX)
        or not script.endswith(_P2PKH_SUFFIX)
    ):
        raise ValueError("output script is not pay-to-public-key-hash")
    return script[3:23]


def address_from_script(script_hex: str, *, version: bytes = MAINNET_P2PKH_VERSION) -> str:
    """Base58Check address for a P2PKH output script."""

    return base58.b58encode_check(version + pubkey_hash_from_script(script_hex)).decode("ascii")
