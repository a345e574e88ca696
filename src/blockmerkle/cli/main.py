"""
blockmerkle command line entry point.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from blockmerkle.cli.commands import cmd_demo, cmd_prove, cmd_root, cmd_verify


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockmerkle",
        description="Merkle tree roots and inclusion proofs over data blocks",
    )
    parser.add_argument(
        "--algorithm",
        default=None,
        help="Hash algorithm (default: BLOCKMERKLE_HASH_ALGORITHM or sha256)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: BLOCKMERKLE_LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    # demo
    p_demo = sub.add_parser("demo", help="Run the sample transaction demo")
    p_demo.set_defaults(func=cmd_demo)

    # root
    p_root = sub.add_parser("root", help="Print the root digest over files")
    p_root.add_argument("files", nargs="+", help="Files, one block each, in order")
    p_root.set_defaults(func=cmd_root)

    # prove
    p_prove = sub.add_parser("prove", help="Print an inclusion proof as JSON")
    which = p_prove.add_mutually_exclusive_group(required=True)
    which.add_argument("--target", help="File whose contents to prove")
    which.add_argument("--index", type=int, help="Leaf position to prove")
    p_prove.add_argument("files", nargs="+", help="Files, one block each, in order")
    p_prove.set_defaults(func=cmd_prove)

    # verify
    p_verify = sub.add_parser("verify", help="Verify an inclusion proof")
    p_verify.add_argument("--root", required=True, help="Root digest (hex)")
    p_verify.add_argument("--proof", required=True, help="Proof JSON file")
    p_verify.add_argument("file", help="File whose contents the proof covers")
    p_verify.set_defaults(func=cmd_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from pydantic import ValidationError

    from blockmerkle.core.settings import get_settings
    from blockmerkle.protocol.errors import BlockMerkleError
    from blockmerkle.utils.logging import configure_logging

    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        configure_logging(args.log_level or get_settings().log_level)
        return args.func(args)
    except BlockMerkleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
