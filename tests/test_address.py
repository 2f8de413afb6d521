"""
Tests for addresses, clusters and error kinds.

These tests verify:
1. Malformed addresses are rejected, never padded or truncated
2. IDL address derivation is deterministic and program-specific
3. Cluster names map to fixed endpoints
4. Every ErrorKind belongs to one category
"""

import hashlib

import pytest
from solders.pubkey import Pubkey

from idlfetch.address import derive_idl_address, parse_address
from idlfetch.cluster import CLUSTER_NAMES, Cluster
from idlfetch.errors import ErrorKind, IdlError


SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


# =============================================================================
# ADDRESS PARSING TESTS
# =============================================================================

class TestParseAddress:
    """Test base-58 address parsing."""

    def test_system_program_is_all_zero_bytes(self):
        key = parse_address(SYSTEM_PROGRAM)

        assert bytes(key) == bytes(32)

    def test_round_trips_through_text(self):
        key = parse_address(TOKEN_PROGRAM)

        assert str(key) == TOKEN_PROGRAM
        assert len(bytes(key)) == 32

    def test_equality_is_bytewise(self):
        assert parse_address(TOKEN_PROGRAM) == Pubkey.from_string(TOKEN_PROGRAM)

    @pytest.mark.parametrize("text", [
        "",
        "abc",
        "not-a-key",
        "0OIl0OIl0OIl0OIl0OIl0OIl0OIl0OIl",
        TOKEN_PROGRAM + "11111",
    ])
    def test_malformed_addresses_rejected(self, text):
        with pytest.raises(IdlError) as exc_info:
            parse_address(text)

        assert exc_info.value.kind == ErrorKind.ADDRESS_FORMAT
        assert exc_info.value.address == text
        assert isinstance(exc_info.value.cause, ValueError)


# =============================================================================
# IDL ADDRESS DERIVATION TESTS
# =============================================================================

class TestDeriveIdlAddress:
    """Test IDL account address derivation."""

    @pytest.mark.parametrize("program", [TOKEN_PROGRAM, "ADcaide4vBtKuyZQqdU689YqEGZMCmS4tL35bdTv9wJa"])
    def test_matches_hash_construction(self, program):
        """
        Rebuild the address from its hash definitions.

        base = sha256(bump || program_id || "ProgramDerivedAddress")
        idl  = sha256(base || "anchor:idl" || program_id)
        """
        program_id = parse_address(program)
        base, bump = Pubkey.find_program_address([], program_id)

        expected_base = hashlib.sha256(
            bytes([bump]) + bytes(program_id) + b"ProgramDerivedAddress"
        ).digest()
        expected_idl = hashlib.sha256(
            expected_base + b"anchor:idl" + bytes(program_id)
        ).digest()

        assert bytes(base) == expected_base
        assert bytes(derive_idl_address(program_id)) == expected_idl

    def test_is_deterministic(self):
        program_id = parse_address(TOKEN_PROGRAM)

        assert derive_idl_address(program_id) == derive_idl_address(program_id)

    def test_differs_per_program(self):
        a = derive_idl_address(parse_address(TOKEN_PROGRAM))
        b = derive_idl_address(parse_address(SYSTEM_PROGRAM))

        assert a != b

    def test_differs_from_program_id(self):
        program_id = parse_address(TOKEN_PROGRAM)

        assert derive_idl_address(program_id) != program_id


# =============================================================================
# CLUSTER TESTS
# =============================================================================

class TestCluster:
    """Test cluster endpoint mapping."""

    def test_fixed_urls(self):
        assert Cluster.DEVNET.url == "https://api.devnet.solana.com"
        assert Cluster.TESTNET.url == "https://api.testnet.solana.com"
        assert Cluster.MAINNET.url == "https://api.mainnet-beta.solana.com"

    @pytest.mark.parametrize("name,expected", [
        ("devnet", Cluster.DEVNET),
        ("testnet", Cluster.TESTNET),
        ("mainnet", Cluster.MAINNET),
        ("mainnet-beta", Cluster.MAINNET),
        ("DevNet", Cluster.DEVNET),
        (" testnet ", Cluster.TESTNET),
    ])
    def test_from_name(self, name, expected):
        assert Cluster.from_name(name) is expected

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError, match="Unknown cluster"):
            Cluster.from_name("localnet")

    def test_every_cli_name_resolves(self):
        for name in CLUSTER_NAMES:
            assert Cluster.from_name(name).url.startswith("https://")


# =============================================================================
# ERROR KIND TESTS
# =============================================================================

class TestErrorKinds:
    """Test the closed set of error kinds."""

    def test_every_kind_has_a_category(self):
        for kind in ErrorKind:
            assert kind.category in {"address", "network", "format", "storage"}

    @pytest.mark.parametrize("kind,category", [
        (ErrorKind.ADDRESS_FORMAT, "address"),
        (ErrorKind.TRANSPORT, "network"),
        (ErrorKind.NOT_FOUND, "network"),
        (ErrorKind.NOT_EXECUTABLE, "network"),
        (ErrorKind.TOO_SHORT, "format"),
        (ErrorKind.WRONG_DISCRIMINATOR, "format"),
        (ErrorKind.TRUNCATED, "format"),
        (ErrorKind.MALFORMED_DOCUMENT, "format"),
        (ErrorKind.IO, "storage"),
    ])
    def test_categories(self, kind, category):
        assert kind.category == category

    def test_error_carries_structured_fields(self):
        cause = OSError("disk full")
        error = IdlError(ErrorKind.IO, "write failed", cause=cause, path="/tmp/x.json")

        assert error.kind == ErrorKind.IO
        assert error.category == "storage"
        assert error.cause is cause
        assert error.details == {"path": "/tmp/x.json"}
        assert str(error) == "[io] write failed"
