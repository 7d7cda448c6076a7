"""
Command-line interface for the URL shortener.

Usage:
    shortener serve [--host HOST] [--port PORT]
    shortener encode <identifier>
    shortener decode <token>
"""

import argparse
import sys
from typing import List, Optional

import uvicorn

from shortener.core.codec import decode, encode
from shortener.core.exceptions import InvalidCharacterError
from shortener.core.logging_config import configure_logging
from shortener.core.setting import get_settings
from shortener.main import create_app


def serve(args: argparse.Namespace) -> int:
    """Run the HTTP service with uvicorn."""
    settings = get_settings()
    logger = configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    host = args.host if args.host is not None else settings.HOST
    port = args.port if args.port is not None else settings.EXPOSED_PORT
    logger.info(f"Listening on {host}:{port}")

    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
    return 0


def encode_command(args: argparse.Namespace) -> int:
    if args.identifier < 0:
        print("error: identifier must be non-negative", file=sys.stderr)
        return 2
    print(encode(args.identifier))
    return 0


def decode_command(args: argparse.Namespace) -> int:
    try:
        print(decode(args.token))
    except InvalidCharacterError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shortener", description="URL shortener service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=None, help="Listen address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, default=None, help="Listen port (default: EXPOSED_PORT setting)")
    serve_parser.set_defaults(func=serve)

    encode_parser = subparsers.add_parser("encode", help="Print the token for an identifier")
    encode_parser.add_argument("identifier", type=int)
    encode_parser.set_defaults(func=encode_command)

    decode_parser = subparsers.add_parser("decode", help="Print the identifier for a token")
    decode_parser.add_argument("token")
    decode_parser.set_defaults(func=decode_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
