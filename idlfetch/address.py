"""
Account Addresses for idlfetch.

Identifiers are 32-byte Solana public keys with a base-58 text form.
Parsing and the IDL record-address derivation are delegated to
``solders``; this module only maps their failures onto IdlError.
"""

from __future__ import annotations

from typing import Callable

from solders.pubkey import Pubkey

from .errors import ErrorKind, IdlError


# Seed Anchor uses when deriving a program's IDL account
IDL_ADDRESS_SEED = "anchor:idl"

PUBKEY_LENGTH = 32

# Signature of a record-address derivation function
AddressDeriver = Callable[[Pubkey], Pubkey]


def parse_address(text: str) -> Pubkey:
    """
    Parse a base-58 address into a Pubkey.

    Raises:
        IdlError: ADDRESS_FORMAT if the text is not a valid encoding
            of exactly 32 bytes
    """
    try:
        return Pubkey.from_string(text)
    except ValueError as e:
        raise IdlError(
            ErrorKind.ADDRESS_FORMAT,
            f"'{text}' is not a valid base-58 address: {e}",
            address=text,
            cause=e,
        ) from e


def derive_idl_address(program_id: Pubkey) -> Pubkey:
    """
    Derive the address of the IDL account Anchor publishes for a program.

    The base is the program's canonical empty-seed program address; the
    IDL account is created from it with the fixed "anchor:idl" seed and
    owned by the program itself.
    """
    base, _bump = Pubkey.find_program_address([], program_id)
    return Pubkey.create_with_seed(base, IDL_ADDRESS_SEED, program_id)
