# src/pkg_jose/cli/main.py

from __future__ import annotations

import argparse
import json
import sys
import time
from typing import Any, Dict, Sequence

from ..api import decode, encode, get_unverified_header
from ..domain.exceptions import TokenError
from ..log import configure_logging, get_logger
from .env import settings_from_env
from .settings import CodecSettings


def _parse_value(raw: str) -> Any:
    """JSON if it parses, else the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_pairs(pairs: Sequence[str] | None, option: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got {pair!r}")
        result[key] = _parse_value(value)
    return result


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jose",
        description="Encode and decode JSON Web Tokens. Key material comes from "
                    "JOSE_SECRET / JOSE_PRIVATE_KEY_FILE / JOSE_PUBLIC_KEY_FILE.",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        help="Algorithm name (default from env JOSE_ALGORITHM, else HS256).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Sign a set of claims.")
    enc.add_argument("--claims", help="Claims as a JSON object.")
    enc.add_argument(
        "--claim",
        "-c",
        action="append",
        help="Single claim KEY=VALUE (VALUE parsed as JSON when possible). Repeatable.",
    )
    enc.add_argument(
        "--header",
        "-H",
        action="append",
        help="Extra header parameter KEY=VALUE. Repeatable.",
    )
    enc.add_argument(
        "--expires-in",
        type=float,
        help="Set iat to now and exp to now + this many seconds.",
    )

    dec = sub.add_parser("decode", help="Verify a token and print its claims.")
    dec.add_argument("token")
    dec.add_argument("--audience", help="Required audience (default env JOSE_AUDIENCE).")
    dec.add_argument("--issuer", help="Required issuer (default env JOSE_ISSUER).")
    dec.add_argument("--leeway", type=float, help="Clock skew tolerance in seconds.")
    dec.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip claim and signature checks. The output is not trustworthy.",
    )

    hdr = sub.add_parser("header", help="Print a token header without verifying it.")
    hdr.add_argument("token")

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace, settings: CodecSettings) -> Dict[str, Any]:
    if args.algorithm:
        settings.algorithm = args.algorithm

    if args.command == "header":
        return {"header": get_unverified_header(args.token).as_dict()}

    if args.command == "encode":
        claims: Dict[str, Any] = {}
        if args.claims:
            loaded = json.loads(args.claims)
            if not isinstance(loaded, dict):
                raise ValueError("--claims must be a JSON object")
            claims.update(loaded)
        claims.update(_parse_pairs(args.claim, "--claim"))
        if args.expires_in is not None:
            now = int(time.time())
            claims["iat"] = now
            claims["exp"] = now + int(args.expires_in)
        headers = _parse_pairs(args.header, "--header")
        token = encode(claims, settings.build_algorithm(), headers=headers)
        return {"token": token}

    verify = settings.verify and not args.no_verify
    algorithms = [settings.build_algorithm()] if verify else []
    claims_set = decode(
        args.token,
        algorithms,
        verify=verify,
        audience=args.audience or settings.audience,
        issuer=args.issuer or settings.issuer,
        leeway=args.leeway if args.leeway is not None else settings.leeway,
    )
    return {
        "verified": verify,
        "header": get_unverified_header(args.token).as_dict(),
        "claims": claims_set.claims,
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logger = get_logger()

    try:
        settings = settings_from_env()
        configure_logging(settings.log_level)
        summary = _run(args, settings)
    except TokenError as exc:
        logger.debug("Token rejected", error=type(exc).__name__, reason=getattr(exc, "reason", None))
        json.dump({"ok": False, "error": str(exc), "type": type(exc).__name__}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 1
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise

    json.dump({"ok": True, **summary}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
