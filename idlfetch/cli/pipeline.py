"""
Pipeline Orchestrator for idlfetch.

Ties the stages together into a single execution flow:

    1. Parse the program address
    2. Fetch the program account and require it to be executable
    3. Derive the IDL account address
    4. Fetch the IDL account bytes
    5. Decode the IDL account
    6. Write the document (generate_local_idl only)

Every failure is terminal. Nothing is written unless decoding succeeded,
and nothing is retried: a caller wanting another attempt re-runs the
whole pipeline so the bytes are fetched fresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from solders.pubkey import Pubkey

from ..account import IdlAccount, read_idl_account
from ..address import AddressDeriver, derive_idl_address, parse_address
from ..cluster import Cluster
from ..errors import ErrorKind, IdlError
from ..ingestion.rpc import RpcClient
from ..writer import output_path_for, write_document


logger = logging.getLogger(__name__)


# =============================================================================
# PIPELINE RESULT
# =============================================================================

@dataclass(frozen=True)
class FetchResult:
    """Everything learned while fetching one program's IDL."""
    program_id: Pubkey
    idl_address: Pubkey
    cluster: Cluster
    account: IdlAccount

    @property
    def document(self) -> Any:
        return self.account.document


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

def fetch_idl(
    program_address: str,
    cluster: Cluster = Cluster.DEVNET,
    client: Optional[RpcClient] = None,
    derive: AddressDeriver = derive_idl_address,
) -> FetchResult:
    """
    Fetch and decode the IDL a program publishes on-chain.

    Args:
        program_address: Base-58 program id
        cluster: Network to query (ignored when ``client`` is given)
        client: RPC client to use instead of one built for ``cluster``
        derive: Program id -> IDL account address derivation

    Raises:
        IdlError: Any ErrorKind except IO
    """
    program_id = parse_address(program_address)

    if client is not None:
        idl_address, raw = _fetch_idl_bytes(client, program_id, derive)
    else:
        client = RpcClient(cluster.url)
        try:
            idl_address, raw = _fetch_idl_bytes(client, program_id, derive)
        finally:
            client.close()

    try:
        account = read_idl_account(raw)
    except IdlError as e:
        if e.address is None:
            e.address = str(idl_address)
        raise

    logger.info(
        "Decoded IDL account %s (%d payload bytes)",
        idl_address, account.payload_length,
    )
    return FetchResult(
        program_id=program_id,
        idl_address=idl_address,
        cluster=cluster,
        account=account,
    )


def _fetch_idl_bytes(
    client: RpcClient,
    program_id: Pubkey,
    derive: AddressDeriver,
) -> tuple[Pubkey, bytes]:
    """Check the program is executable, then fetch its IDL account data."""
    logger.info("Fetching program %s from %s", program_id, client.url)

    if not client.is_executable(program_id):
        raise IdlError(
            ErrorKind.NOT_EXECUTABLE,
            "The provided address does not correspond to an executable program",
            address=str(program_id),
        )

    idl_address = derive(program_id)
    logger.info("IDL account for %s is %s", program_id, idl_address)

    return idl_address, client.fetch_bytes(idl_address)


def generate_local_idl(
    program_address: str,
    cluster: Cluster = Cluster.DEVNET,
    output_dir: Union[str, Path] = ".",
    client: Optional[RpcClient] = None,
    derive: AddressDeriver = derive_idl_address,
) -> Path:
    """
    Fetch a program's IDL and save it as ``<output_dir>/<program>.json``.

    Returns:
        Path of the written file

    Raises:
        IdlError: Any ErrorKind
    """
    result = fetch_idl(program_address, cluster, client=client, derive=derive)
    path = output_path_for(program_address, output_dir)
    return write_document(result.document, path)
