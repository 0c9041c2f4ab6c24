"""otpseed CLI.

Usage:
    otpseed seed [--size 32]                          # Derive a new secret
    otpseed code SECRET [--period 30] [--at TS]       # Previous/current/next codes
    otpseed verify SECRET CODE [--window 1]           # Check a code, exit 1 if invalid
    otpseed uri SECRET --email E --issuer I           # Provisioning URI
    otpseed qr SECRET --email E --issuer I [--output qr.png | --data-uri]
"""

from __future__ import annotations

import argparse
import logging
import sys

from otpseed import provisioning_uri
from otpseed.exceptions import OTPError
from otpseed.seed import DEFAULT_SIZE, derive_secret
from otpseed.totp import DEFAULT_INTERVAL, TOTP

logger = logging.getLogger(__name__)


def cmd_seed(args: argparse.Namespace) -> int:
    """Derive and print a new secret."""
    print(derive_secret(args.size))
    return 0


def cmd_code(args: argparse.Namespace) -> int:
    """Print the codes around now (or --at)."""
    codes = TOTP(args.secret, interval=args.period).codes(args.at)
    print(f"prev    {codes.prev}")
    print(f"current {codes.current}")
    print(f"next    {codes.next}")
    print(f"expires in {codes.expires_in}s")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify a code against the current time step."""
    ok = TOTP(args.secret, interval=args.period).verify(args.code, for_time=args.at, valid_window=args.window)
    print("valid" if ok else "invalid")
    return 0 if ok else 1


def cmd_uri(args: argparse.Namespace) -> int:
    """Print the provisioning URI."""
    print(provisioning_uri(args.email, args.issuer, args.secret, period=args.period))
    return 0


def cmd_qr(args: argparse.Namespace) -> int:
    """Render the provisioning URI as a QR code."""
    from otpseed import qr

    uri = provisioning_uri(args.email, args.issuer, args.secret, period=args.period)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(qr.qr_png_bytes(uri, args.width, args.height))
        logger.info("wrote QR code to %s", args.output)
    elif args.data_uri:
        print(qr.qr_data_uri(uri, args.width, args.height))
    else:
        sys.stdout.write(qr.qr_ascii(uri))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otpseed",
        description="TOTP secrets, codes and enrollment QR codes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", help="Command to run")

    # seed
    p_seed = sub.add_parser("seed", help="Derive a new secret")
    p_seed.add_argument("--size", type=int, default=DEFAULT_SIZE, choices=[16, 26, 32])

    # code
    p_code = sub.add_parser("code", help="Show previous, current and next codes")
    p_code.add_argument("secret")
    p_code.add_argument("--period", type=int, default=DEFAULT_INTERVAL)
    p_code.add_argument("--at", type=int, help="Unix timestamp instead of now")

    # verify
    p_verify = sub.add_parser("verify", help="Verify a code")
    p_verify.add_argument("secret")
    p_verify.add_argument("code")
    p_verify.add_argument("--period", type=int, default=DEFAULT_INTERVAL)
    p_verify.add_argument("--window", type=int, default=1)
    p_verify.add_argument("--at", type=int, help="Unix timestamp instead of now")

    # uri / qr
    for name, help_text in (("uri", "Print the provisioning URI"), ("qr", "Render the enrollment QR code")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("secret")
        p.add_argument("--email", required=True)
        p.add_argument("--issuer", required=True)
        p.add_argument("--period", type=int, default=DEFAULT_INTERVAL)
        if name == "qr":
            out = p.add_mutually_exclusive_group()
            out.add_argument("--output", help="Write a PNG to this path")
            out.add_argument("--data-uri", action="store_true", help="Print a base64 data URI")
            p.add_argument("--width", type=int, default=200)
            p.add_argument("--height", type=int, default=200)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "seed": cmd_seed,
        "code": cmd_code,
        "verify": cmd_verify,
        "uri": cmd_uri,
        "qr": cmd_qr,
    }
    try:
        return dispatch[args.command](args)
    except (OTPError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
