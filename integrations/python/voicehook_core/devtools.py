"""Developer tooling: CLI utilities for signing and inspecting callbacks."""

from __future__ import annotations

import argparse
import json
from typing import Dict, Iterable, List, Sequence, Tuple
from urllib.parse import urlsplit

from .canonicalization import CanonicalMessage, canonicalize_request
from .config import Settings
from .endpoint import parse_endpoint
from .signature import RequestSigner


def _split_url(url: str) -> Tuple[str, str]:
    parts = urlsplit(url)
    origin = f"{parts.scheme}://{parts.netloc}"
    path = parts.path
    if parts.query:
        path = f"{path}?{parts.query}"
    return origin, path


def parse_fields(pairs: Sequence[str]) -> Dict[str, List[str]]:
    """Turn ``name=value`` arguments into a form multimap."""

    form: Dict[str, List[str]] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"expected name=value, got {pair!r}")
        form.setdefault(name, []).append(value)
    return form


def canonical_message(url: str, pairs: Sequence[str]) -> CanonicalMessage:
    origin, path = _split_url(url)
    return canonicalize_request(origin=origin, path=path, form=parse_fields(pairs))


def sign_request(url: str, pairs: Sequence[str], token: str) -> str:
    return RequestSigner(token).sign(canonical_message(url, pairs))


def verify_request(url: str, pairs: Sequence[str], token: str, signature: str) -> bool:
    return RequestSigner(token).verify(canonical_message(url, pairs), signature)


def _token(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    token = args.token or Settings.from_env().auth_token
    if not token:
        parser.error("an auth token is required (--token or VOICEHOOK_AUTH_TOKEN)")
    return token


def run(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="voicehook-dev", description="Voicehook callback utilities")
    sub = parser.add_subparsers(dest="command")

    def add_request_arguments(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("url", help="public callback URL including any query string")
        cmd.add_argument("-f", "--field", action="append", default=[], metavar="NAME=VALUE")

    canonical_cmd = sub.add_parser("canonical", help="print the canonical message of a callback")
    add_request_arguments(canonical_cmd)

    sign_cmd = sub.add_parser("sign", help="compute the signature header for a callback")
    add_request_arguments(sign_cmd)
    sign_cmd.add_argument("--token")

    verify_cmd = sub.add_parser("verify", help="check a signature header against a callback")
    add_request_arguments(verify_cmd)
    verify_cmd.add_argument("signature")
    verify_cmd.add_argument("--token")

    endpoint_cmd = sub.add_parser("parse-endpoint", help="classify a From/To value")
    endpoint_cmd.add_argument("raw")

    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.command == "canonical":
        print(canonical_message(args.url, args.field))
        return 0
    if args.command == "sign":
        print(sign_request(args.url, args.field, _token(args, parser)))
        return 0
    if args.command == "verify":
        ok = verify_request(args.url, args.field, _token(args, parser), args.signature)
        print("valid" if ok else "invalid")
        return 0 if ok else 1
    if args.command == "parse-endpoint":
        print(json.dumps(parse_endpoint(args.raw).as_dict(), indent=2))
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(run())
