"""
Solana JSON-RPC Account Fetching for idlfetch.

This module handles a single RPC method: ``getAccountInfo``. It returns
the raw account bytes and the executable flag; it never interprets the
bytes. Decoding happens in ``idlfetch.account``.

Design principles:
- One request per call, no retries, no caching
- Every failure becomes an IdlError (TRANSPORT or NOT_FOUND)
- The HTTP session is injectable so tests never touch the network
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Optional, Union

import requests
from solders.pubkey import Pubkey

from ..errors import ErrorKind, IdlError


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_COMMITMENT = "confirmed"
ACCOUNT_ENCODING = "base64"


# =============================================================================
# ACCOUNT INFO
# =============================================================================

@dataclass(frozen=True)
class AccountInfo:
    """An account as returned by getAccountInfo."""
    address: str
    data: bytes
    executable: bool
    owner: str
    lamports: int


# =============================================================================
# CLIENT
# =============================================================================

class RpcClient:
    """
    Minimal synchronous JSON-RPC client for a Solana cluster.

    Args:
        url: Cluster RPC endpoint
        timeout: Per-request timeout in seconds
        commitment: Commitment level sent with every query
        session: Optional requests.Session (or compatible object)
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        commitment: str = DEFAULT_COMMITMENT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.commitment = commitment
        self.session = session if session is not None else requests.Session()
        self._ids = count(1)

    def _call(self, method: str, params: list[Any], address: str) -> Any:
        """POST a JSON-RPC request and return its ``result`` member."""
        request_id = next(self._ids)
        body = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s #%d -> %s (%s)", method, request_id, self.url, address)

        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()
            reply = response.json()
        except (requests.RequestException, ValueError) as e:
            raise IdlError(
                ErrorKind.TRANSPORT,
                f"Solana client error: {method} to {self.url} failed: {e}",
                address=address,
                cause=e,
            ) from e

        if not isinstance(reply, dict):
            raise IdlError(
                ErrorKind.TRANSPORT,
                f"Solana client error: {method} returned a non-object reply",
                address=address,
            )

        error = reply.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else error
            raise IdlError(
                ErrorKind.TRANSPORT,
                f"Solana client error: RPC error {code}: {message}",
                address=address,
                rpc_code=code,
            )

        if "result" not in reply:
            raise IdlError(
                ErrorKind.TRANSPORT,
                f"Solana client error: {method} reply has no result",
                address=address,
            )
        return reply["result"]

    def get_account(self, address: Union[Pubkey, str]) -> AccountInfo:
        """
        Fetch an account by address.

        Raises:
            IdlError: NOT_FOUND if the account does not exist,
                TRANSPORT on any network, HTTP or protocol failure
        """
        key = str(address)
        result = self._call(
            "getAccountInfo",
            [key, {"encoding": ACCOUNT_ENCODING, "commitment": self.commitment}],
            key,
        )

        value = result.get("value") if isinstance(result, dict) else None
        if value is None:
            raise IdlError(
                ErrorKind.NOT_FOUND,
                f"Account {key} not found",
                address=key,
            )

        try:
            encoded, encoding = value["data"]
            if encoding != ACCOUNT_ENCODING:
                raise ValueError(f"unexpected data encoding '{encoding}'")
            data = base64.b64decode(encoded, validate=True)
            info = AccountInfo(
                address=key,
                data=data,
                executable=bool(value["executable"]),
                owner=str(value["owner"]),
                lamports=int(value["lamports"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise IdlError(
                ErrorKind.TRANSPORT,
                f"Solana client error: malformed account in reply: {e}",
                address=key,
                cause=e,
            ) from e

        logger.debug(
            "Fetched account %s: %d bytes, executable=%s",
            key, len(info.data), info.executable,
        )
        return info

    def is_executable(self, address: Union[Pubkey, str]) -> bool:
        """Return whether the account at ``address`` is a program."""
        return self.get_account(address).executable

    def fetch_bytes(self, address: Union[Pubkey, str]) -> bytes:
        """Return the raw data of the account at ``address``."""
        return self.get_account(address).data

    def close(self) -> None:
        self.session.close()
