"""CLI entrypoint invoked by protoc as ``protoc-gen-doc``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.message import DecodeError

from . import __version__
from .config import load_settings
from .errors import DocGenError
from .logging import configure_logging
from .plugin import run_plugin
from .rendering import supported_formats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoc-gen-doc",
        description=(
            "protoc plugin that generates documentation from .proto files. "
            "Run it through protoc, e.g. `protoc --doc_out=html,index.html:out *.proto`."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--request",
        type=Path,
        default=None,
        help="Read a serialized CodeGeneratorRequest from this file instead of stdin.",
    )
    parser.add_argument(
        "--list-formats",
        action="store_true",
        help="Print the built-in output formats and exit.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Read a code generator request, generate documentation, write the response."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_formats:
        print("\n".join(supported_formats()))
        return

    try:
        settings = load_settings()
    except DocGenError as exc:
        configure_logging(verbose=bool(args.verbose))
        _write_response(CodeGeneratorResponse(error=str(exc)))
        return

    configure_logging(verbose=bool(args.verbose) or settings.verbose, log_file=settings.log_file)

    try:
        data = args.request.read_bytes() if args.request else sys.stdin.buffer.read()
    except OSError as exc:
        parser.exit(1, f"{args.request}: {exc.strerror or exc}\n")
    try:
        request = CodeGeneratorRequest.FromString(data)
    except DecodeError as exc:
        parser.exit(1, f"protoc-gen-doc: failed to parse code generator request: {exc}\n")

    _write_response(run_plugin(request, settings=settings))


def _write_response(response: CodeGeneratorResponse) -> None:
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()


if __name__ == "__main__":
    main(sys.argv[1:])
