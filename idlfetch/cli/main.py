"""
idlfetch CLI — Fetch Anchor IDLs from Solana clusters.

Commands:
    idlfetch fetch <program>     — Fetch a program's IDL and save it locally
    idlfetch address <program>   — Show the derived IDL account address
    idlfetch decode <file>       — Decode a raw IDL account dump from disk

All commands exit with status 1 on any IdlError and report its kind.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..account import read_idl_account
from ..address import derive_idl_address, parse_address
from ..cluster import CLUSTER_NAMES, Cluster
from ..errors import ErrorKind, IdlError
from ..writer import render_document, write_document
from .pipeline import generate_local_idl


logger = logging.getLogger("idlfetch")


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_error(error: IdlError) -> str:
    """Format an IdlError for the terminal."""
    lines = [f"ERROR: {error.kind.value} ({error.category})"]
    lines.append(f"Reason: {error.reason}")
    if error.address:
        lines.append(f"Address: {error.address}")
    return "\n".join(lines)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch a program's IDL and write it to disk."""
    try:
        path = generate_local_idl(
            args.program,
            Cluster.from_name(args.cluster),
            output_dir=args.out_dir,
        )
    except IdlError as e:
        print(format_error(e), file=sys.stderr)
        return 1

    print(f"IDL successfully saved to {path}")
    return 0


def cmd_address(args: argparse.Namespace) -> int:
    """Print the IDL account address for a program."""
    try:
        program_id = parse_address(args.program)
    except IdlError as e:
        print(format_error(e), file=sys.stderr)
        return 1

    print(derive_idl_address(program_id))
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode a raw IDL account dump."""
    try:
        raw = Path(args.file).read_bytes()
    except OSError as e:
        print(format_error(IdlError(ErrorKind.IO, f"IO error: {e}", cause=e)), file=sys.stderr)
        return 1

    try:
        account = read_idl_account(raw)
        if args.out:
            path = write_document(account.document, args.out)
            print(f"IDL successfully saved to {path}")
        else:
            sys.stdout.write(render_document(account.document))
    except IdlError as e:
        print(format_error(e), file=sys.stderr)
        return 1

    logger.info("Authority: %s", account.authority)
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="idlfetch",
        description="Fetch the Anchor IDL a Solana program publishes on-chain",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch a program's IDL and save it as <program>.json",
    )
    fetch_parser.add_argument(
        "program",
        help="Base-58 program id",
    )
    fetch_parser.add_argument(
        "--cluster",
        default="devnet",
        choices=CLUSTER_NAMES,
        help="Network to query (default: devnet)",
    )
    fetch_parser.add_argument(
        "--out-dir",
        default=".",
        help="Directory to write the IDL into (default: current directory)",
    )
    fetch_parser.set_defaults(func=cmd_fetch)

    # Address command
    address_parser = subparsers.add_parser(
        "address",
        help="Show the IDL account address for a program",
    )
    address_parser.add_argument(
        "program",
        help="Base-58 program id",
    )
    address_parser.set_defaults(func=cmd_address)

    # Decode command
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a raw IDL account dump",
    )
    decode_parser.add_argument(
        "file",
        help="File holding the raw account data",
    )
    decode_parser.add_argument(
        "--out",
        default=None,
        help="Write the document here instead of printing it",
    )
    decode_parser.set_defaults(func=cmd_decode)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
