# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Command line entry point: print a presigned URL for an object in an S3-compatible
store.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import NoReturn

from . import __version__
from .config import PresignConfig
from .exceptions import BasePresignException, UsageError
from .request import SigningRequest, build_signing_request
from .signers import LoggingDiagnosticSink, S3Presigner

ENVIRONMENT_HELP = """\
positional parameters:
  SERVICE     constant, always 's3'
  METHOD      GET | PUT | DELETE (case insensitive)
  REGION      overrides S3_REGION environment variable (optional)
  ENDPOINT    overrides S3_ENDPOINT environment variable (optional)
  S3_PATH     bucket and key path (e.g., bucket/object.txt)
  EXPIRE_MIN  expiration time in minutes (1 to 10080)

environment variables:
  AWS_ACCESS_KEY_ID      required
  AWS_SECRET_ACCESS_KEY  required
  AWS_SESSION_TOKEN      optional, for temporary credentials
  S3_REGION              default for REGION
  S3_ENDPOINT            default for ENDPOINT (e.g., https://s3.fr-par.scw.cloud)
  PRESIGN_DEBUG          when set, even empty, print intermediate signing
                         values to stderr
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="presign",
        usage="%(prog)s SERVICE METHOD [REGION] [ENDPOINT] S3_PATH EXPIRE_MIN "
        "[options]",
        description="Generate a presigned URL for an S3-compatible object store.",
        epilog=ENVIRONMENT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("positionals", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="'Key: Value'",
        help="Add header to be signed (can be used multiple times)",
    )
    parser.add_argument(
        "--now",
        metavar="TIMESTAMP",
        help="Override current time (format: 2025-09-25T08:40:00Z)",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version information",
    )
    return parser


def request_from_args(
    args: argparse.Namespace, config: PresignConfig
) -> SigningRequest:
    positionals: list[str] = args.positionals
    if not 4 <= len(positionals) <= 6:
        raise UsageError("Invalid positional arguments")
    service, method, *optional = positionals[:-2]
    path, expire_minutes = positionals[-2:]
    region = optional[0] if len(optional) >= 1 else None
    endpoint = optional[1] if len(optional) == 2 else None
    return build_signing_request(
        service=service,
        method=method,
        region=config.region(region),
        endpoint=config.endpoint(endpoint),
        path=path,
        expire_minutes=expire_minutes,
        headers=args.header,
        now=args.now,
    )


def main(argv: Sequence[str] | None = None) -> int:
    config = PresignConfig()
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
        request = request_from_args(args, config)
        credentials = config.credentials()
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except BasePresignException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    diagnostic_sink = None
    if config.debug:
        logging.basicConfig(
            level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(message)s"
        )
        diagnostic_sink = LoggingDiagnosticSink()

    try:
        result = S3Presigner(diagnostic_sink=diagnostic_sink).presign(
            request=request, identity=credentials
        )
    except BasePresignException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.url)
    return 0
