"""
Stealth pool wallet CLI entry point.

Generate stealth keys, derive and recover one-time addresses, and manage
deposit notes from the command line.

Usage::

    python -m stealth_pool meta-address
    python -m stealth_pool stealth-address st:meta:02...03... --k 0
    python -m stealth_pool recover-key --viewing-key 0x.. --spend-key 0x.. --ephemeral-key 0x..
    python -m stealth_pool --db notes.db note new --denomination 10000000 --pool 0x..
    python -m stealth_pool --db notes.db note list
    python -m stealth_pool metrics

Options:
    --db        Path to the SQLite note store (default: stealth_pool.db)
    -v          Enable debug logging
    --no-color  Disable colored logging output
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from stealth_pool.subspecs.metrics import generate_metrics
from stealth_pool.subspecs.pool import generate_note
from stealth_pool.subspecs.stealth import (
    decode_meta_address,
    derive_stealth_address,
    encode_meta_address,
    generate_meta_address,
    matches_stealth_address,
    public_key_to_address,
    recover_stealth_private_key,
)
from stealth_pool.subspecs.secp256k1 import public_key_from_private
from stealth_pool.subspecs.storage import SQLiteNoteStore
from stealth_pool.types import Bytes20, Bytes32, Bytes33, StealthPoolError

DEFAULT_DB_PATH = Path("stealth_pool.db")
"""Note store used when `--db` is not given."""

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """
    Configure logging with optional colors.

    Logs go to stderr so that command output on stdout stays machine-readable.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _emit(payload: dict[str, Any] | list[Any]) -> None:
    print(json.dumps(payload, indent=2))


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


def cmd_meta_address(args: argparse.Namespace) -> int:
    """Generate a fresh meta-address and its private keys."""
    keys = generate_meta_address()
    _emit(
        {
            "metaAddress": encode_meta_address(keys.meta_address),
            "spendPrivateKey": "0x" + keys.spend_private_key.hex(),
            "viewingPrivateKey": "0x" + keys.viewing_private_key.hex(),
        }
    )
    return 0


def cmd_stealth_address(args: argparse.Namespace) -> int:
    """Derive a one-time destination for a published meta-address."""
    meta_address = decode_meta_address(args.meta_address)
    ephemeral = None if args.ephemeral_key is None else Bytes32(args.ephemeral_key)
    payment = derive_stealth_address(meta_address, ephemeral, args.k)
    _emit(payment.model_dump(mode="json", by_alias=True))
    return 0


def cmd_recover_key(args: argparse.Namespace) -> int:
    """Recover the private key of a stealth address from an announcement."""
    viewing_key = Bytes32(args.viewing_key)
    spend_key = Bytes32(args.spend_key)
    ephemeral_public_key = Bytes33(args.ephemeral_key)

    private_key = recover_stealth_private_key(viewing_key, spend_key, ephemeral_public_key, args.k)
    address = public_key_to_address(public_key_from_private(private_key))

    if args.expect is not None and not matches_stealth_address(
        viewing_key,
        public_key_from_private(spend_key),
        ephemeral_public_key,
        args.k,
        args.expect,
    ):
        logger.error("Announcement does not belong to these keys")
        return 1

    _emit({"stealthAddress": address, "stealthPrivateKey": "0x" + private_key.hex()})
    return 0


def cmd_note_new(args: argparse.Namespace) -> int:
    """Create a note and store it locally; print the commitment to deposit."""
    note = generate_note(args.denomination, Bytes20(args.pool))
    with SQLiteNoteStore(args.db) as store:
        store.put_note(note)
    logger.info("Stored new note for pool 0x%s", note.pool_address.hex()[:8])
    _emit({"commitment": str(note.commitment), "denomination": note.denomination})
    return 0


def cmd_note_list(args: argparse.Namespace) -> int:
    """List stored notes without revealing their secrets."""
    pool = None if args.pool is None else Bytes20(args.pool)
    with SQLiteNoteStore(args.db) as store:
        notes = store.list_notes(pool)
    _emit(
        [
            note.model_dump(
                mode="json",
                by_alias=True,
                include={"commitment", "denomination", "pool_address", "leaf_index"},
            )
            for note in notes
        ]
    )
    return 0


def cmd_metrics(args: argparse.Namespace) -> int:
    """Print the current metrics in Prometheus text format."""
    sys.stdout.write(generate_metrics().decode())
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="stealth-pool",
        description="Stealth pool wallet tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Path to the SQLite note store (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    meta = commands.add_parser("meta-address", help="Generate a stealth meta-address")
    meta.set_defaults(handler=cmd_meta_address)

    stealth = commands.add_parser("stealth-address", help="Derive a one-time stealth address")
    stealth.add_argument("meta_address", help="Encoded meta-address (st:meta:...)")
    stealth.add_argument("--k", type=int, default=0, help="Payment counter (default: 0)")
    stealth.add_argument(
        "--ephemeral-key",
        default=None,
        help="Hex ephemeral private key (default: freshly generated)",
    )
    stealth.set_defaults(handler=cmd_stealth_address)

    recover = commands.add_parser("recover-key", help="Recover a stealth private key")
    recover.add_argument("--viewing-key", required=True, help="Hex viewing private key")
    recover.add_argument("--spend-key", required=True, help="Hex spend private key")
    recover.add_argument(
        "--ephemeral-key", required=True, help="Hex compressed ephemeral public key"
    )
    recover.add_argument("--k", type=int, default=0, help="Payment counter (default: 0)")
    recover.add_argument("--expect", default=None, help="Stealth address the announcement names")
    recover.set_defaults(handler=cmd_recover_key)

    note = commands.add_parser("note", help="Manage deposit notes")
    note_commands = note.add_subparsers(dest="note_command", required=True)

    note_new = note_commands.add_parser("new", help="Create and store a new note")
    note_new.add_argument("--denomination", type=int, required=True, help="Pool denomination")
    note_new.add_argument("--pool", required=True, help="Pool contract address")
    note_new.set_defaults(handler=cmd_note_new)

    note_list = note_commands.add_parser("list", help="List stored notes")
    note_list.add_argument("--pool", default=None, help="Only notes of this pool")
    note_list.set_defaults(handler=cmd_note_list)

    metrics = commands.add_parser("metrics", help="Print Prometheus metrics")
    metrics.set_defaults(handler=cmd_metrics)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        return args.handler(args)
    except (StealthPoolError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
