"""
IDL Account Decoding for idlfetch.

An Anchor program publishes its IDL in a single account with this layout:

    offset  size  field
    0       8     discriminator   sha256("anchor:idl")[:8]
    8       32    authority       administrator pubkey
    40      8     payload_length  little-endian u64
    48      N     payload         UTF-8 JSON document

Decoding is a sequence of hard checks. The ORDER of the checks is part
of the contract because it decides which error a caller sees first:

    1. len <= 8                    -> TOO_SHORT
    2. discriminator mismatch      -> WRONG_DISCRIMINATOR
    3. len < 48                    -> TOO_SHORT
    4. read payload_length
    5. len < 48 + payload_length   -> TRUNCATED
    6. slice payload
    7. JSON parse failure          -> MALFORMED_DOCUMENT

The length field is never read for a record that fails step 2. No upper
bound is placed on payload_length: an absurd value is caught by step 5,
never sanitized in advance. Bytes after the payload window are ignored.

Nothing here performs I/O or keeps state; the same bytes always give the
same document or the same error.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Optional

from solders.pubkey import Pubkey

from .errors import ErrorKind, IdlError


# =============================================================================
# LAYOUT CONSTANTS
# =============================================================================

IDL_DISCRIMINATOR_PREIMAGE = "anchor:idl"

DISCRIMINATOR_SIZE = 8
AUTHORITY_SIZE = 32
LENGTH_FIELD_SIZE = 8

AUTHORITY_OFFSET = DISCRIMINATOR_SIZE
LENGTH_OFFSET = AUTHORITY_OFFSET + AUTHORITY_SIZE
PAYLOAD_OFFSET = LENGTH_OFFSET + LENGTH_FIELD_SIZE  # 48


def idl_discriminator(preimage: str = IDL_DISCRIMINATOR_PREIMAGE) -> bytes:
    """First 8 bytes of the SHA-256 digest of the preimage."""
    return hashlib.sha256(preimage.encode("ascii")).digest()[:DISCRIMINATOR_SIZE]


IDL_DISCRIMINATOR = idl_discriminator()


# =============================================================================
# DECODED ACCOUNT
# =============================================================================

@dataclass(frozen=True)
class IdlAccount:
    """
    A decoded IDL account.

    ``document`` is the JSON tree parsed from the payload. The authority
    is carried for display only; decoding never interprets it.
    """
    authority: Pubkey
    payload_length: int
    document: Any


# =============================================================================
# DECODING
# =============================================================================

def _verify_discriminator(view: memoryview) -> None:
    found = bytes(view[:DISCRIMINATOR_SIZE])
    if found != IDL_DISCRIMINATOR:
        raise IdlError(
            ErrorKind.WRONG_DISCRIMINATOR,
            f"Account discriminator {found.hex()} does not match "
            f"IDL discriminator {IDL_DISCRIMINATOR.hex()}",
            expected=IDL_DISCRIMINATOR,
            found=found,
        )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_document(payload: bytes) -> Any:
    try:
        document = json.loads(payload.decode("utf-8"), parse_constant=_reject_constant)
        # Lone surrogate escapes parse but are not encodable text
        json.dumps(document, ensure_ascii=False).encode("utf-8")
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and Unicode errors;
        # RecursionError means nesting too deep to parse
        raise IdlError(
            ErrorKind.MALFORMED_DOCUMENT,
            f"Failed to parse IDL data: {e}",
            cause=e,
            payload_length=len(payload),
        ) from e
    return document


def read_idl_account(raw: bytes) -> IdlAccount:
    """
    Validate the framing of raw IDL account data and decode it.

    Args:
        raw: Account data exactly as returned by the RPC node

    Returns:
        IdlAccount with the authority, declared length and document

    Raises:
        IdlError: TOO_SHORT, WRONG_DISCRIMINATOR, TRUNCATED or
            MALFORMED_DOCUMENT, first match wins in the order
            documented at module level
    """
    view = memoryview(raw)
    length = len(view)

    if length <= DISCRIMINATOR_SIZE:
        raise IdlError(
            ErrorKind.TOO_SHORT,
            "Invalid IDL account data: too short",
            length=length,
            required=DISCRIMINATOR_SIZE + 1,
        )

    _verify_discriminator(view)

    if length < PAYLOAD_OFFSET:
        raise IdlError(
            ErrorKind.TOO_SHORT,
            f"Invalid IDL account data: {length} bytes cannot hold "
            f"the {PAYLOAD_OFFSET}-byte header",
            length=length,
            required=PAYLOAD_OFFSET,
        )

    payload_length = int.from_bytes(view[LENGTH_OFFSET:PAYLOAD_OFFSET], "little")
    end = PAYLOAD_OFFSET + payload_length

    if length < end:
        raise IdlError(
            ErrorKind.TRUNCATED,
            f"Invalid IDL account data: truncated, header declares "
            f"{payload_length} payload bytes but only "
            f"{length - PAYLOAD_OFFSET} are present",
            length=length,
            required=end,
        )

    document = _parse_document(bytes(view[PAYLOAD_OFFSET:end]))

    return IdlAccount(
        authority=Pubkey.from_bytes(bytes(view[AUTHORITY_OFFSET:LENGTH_OFFSET])),
        payload_length=payload_length,
        document=document,
    )


def decode_idl_account(raw: bytes) -> Any:
    """Decode raw IDL account data into its JSON document."""
    return read_idl_account(raw).document


# =============================================================================
# FRAMING
# =============================================================================

def frame_idl_account(document: Any, authority: Optional[Pubkey] = None) -> bytes:
    """
    Build IDL account data holding ``document``.

    The payload is compact JSON. The authority defaults to the
    all-zero key.
    """
    if authority is None:
        authority = Pubkey.default()
    payload = json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return b"".join([
        IDL_DISCRIMINATOR,
        bytes(authority),
        len(payload).to_bytes(LENGTH_FIELD_SIZE, "little"),
        payload,
    ])
