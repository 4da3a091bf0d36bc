"""
Secret generation tool for sealedtoken.

Prints a fresh hex secret, or writes it to a file readable only by its owner.
"""

import argparse
import os
import sys
from typing import List, Optional

from ..config import save_secret
from ..crypto.kdf import generate_secret, MIN_SECRET_LENGTH


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(prog='sealedtoken-keygen',
                                     description='Generate a sealedtoken shared secret')
    parser.add_argument('--bytes', type=int, default=MIN_SECRET_LENGTH, dest='nbytes',
                        help=f'Bytes of entropy (default: {MIN_SECRET_LENGTH})')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Write the secret to this file instead of stdout')
    parser.add_argument('--force', action='store_true',
                        help='Overwrite an existing output file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the key generator."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.nbytes <= 0:
        parser.error("--bytes must be positive")
    if args.nbytes < MIN_SECRET_LENGTH:
        print(f"Warning: fewer than {MIN_SECRET_LENGTH} bytes of entropy", file=sys.stderr)

    secret = generate_secret(args.nbytes)

    if args.output is None:
        print(secret)
        return 0

    if os.path.exists(args.output) and not args.force:
        print(f"Refusing to overwrite {args.output} (use --force)", file=sys.stderr)
        return 1

    try:
        save_secret(args.output, secret)
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        return 1
    print(f"Secret written to {args.output}", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
