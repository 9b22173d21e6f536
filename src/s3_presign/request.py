# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from ._encoding import is_utf8_encodable
from ._http import Endpoint, Header
from .exceptions import HeaderFormatError, TimestampParseError, ValidationError

SUPPORTED_METHODS: tuple[str, ...] = ("GET", "PUT", "DELETE")
SUPPORTED_SERVICE = "s3"
MIN_EXPIRE_MINUTES = 1
MAX_EXPIRE_MINUTES = 10080
MAX_HEADERS = 32
MAX_REGION_LENGTH = 64
MAX_PATH_LENGTH = 2048
# Four digit years only; earlier years do not render as YYYYMMDD.
MIN_TIMESTAMP_YEAR = 1000

_TIMESTAMP_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})Z",
    re.ASCII,
)
_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass(frozen=True, kw_only=True)
class SigningRequest:
    """A fully validated request to presign.

    The ``host`` header is never part of ``headers``; it is always derived from the
    endpoint when the canonical request is built.
    """

    method: str
    region: str
    endpoint: Endpoint
    path: str
    expire_minutes: int
    headers: tuple[Header, ...] = ()
    service: str = SUPPORTED_SERVICE
    timestamp: datetime | None = None
    """Signing time override. The current time is used when unset."""

    def __post_init__(self) -> None:
        if self.method not in SUPPORTED_METHODS:
            raise ValidationError("METHOD must be GET, PUT, or DELETE")
        if self.service != SUPPORTED_SERVICE:
            raise ValidationError(f"SERVICE must be '{SUPPORTED_SERVICE}'")
        _validate_region(self.region)
        if not self.path:
            raise ValidationError("S3_PATH must not be empty")
        if len(self.path) >= MAX_PATH_LENGTH:
            raise ValidationError(f"Path too long (max {MAX_PATH_LENGTH - 1} chars)")
        if (
            isinstance(self.expire_minutes, bool)
            or not isinstance(self.expire_minutes, int)
            or not MIN_EXPIRE_MINUTES <= self.expire_minutes <= MAX_EXPIRE_MINUTES
        ):
            raise ValidationError(
                f"EXPIRE_MIN must be between {MIN_EXPIRE_MINUTES} and "
                f"{MAX_EXPIRE_MINUTES} (7 days)"
            )
        _validate_headers(self.headers)
        if self.timestamp is not None and self.timestamp.tzinfo is None:
            raise ValidationError("Signing timestamp must be timezone aware")

    @property
    def expires_seconds(self) -> int:
        return self.expire_minutes * 60


def _validate_region(region: str) -> None:
    if not region:
        raise ValidationError("REGION must not be empty")
    if len(region) >= MAX_REGION_LENGTH:
        raise ValidationError(
            f"Region name too long (max {MAX_REGION_LENGTH - 1} chars)"
        )
    if not is_utf8_encodable(region):
        raise ValidationError("REGION is not valid UTF-8")
    if any(c == "/" or c.isspace() or ord(c) < 0x20 for c in region):
        raise ValidationError(f"Invalid region {region!r}")


def _validate_headers(headers: tuple[Header, ...]) -> None:
    if len(headers) > MAX_HEADERS:
        raise ValidationError(f"Too many headers (max {MAX_HEADERS})")
    seen: set[str] = set()
    for header in headers:
        name = header.key.lower()
        if name == "host":
            raise HeaderFormatError(
                "The host header is derived from the endpoint and cannot be supplied"
            )
        if name in seen:
            raise HeaderFormatError(f"Duplicate header {name!r}")
        seen.add(name)


def parse_timestamp(value: str) -> datetime:
    """Strictly parse a ``YYYY-MM-DDTHH:MM:SSZ`` timestamp as UTC."""
    match = _TIMESTAMP_RE.fullmatch(value)
    if match is None:
        raise TimestampParseError(
            f"Invalid --now format {value!r}. Use YYYY-MM-DDTHH:MM:SSZ"
        )
    fields = {name: int(part) for name, part in match.groupdict().items()}
    if fields["year"] < MIN_TIMESTAMP_YEAR:
        raise TimestampParseError(
            f"Invalid --now value {value!r}: year must be {MIN_TIMESTAMP_YEAR} or later"
        )
    try:
        return datetime(**fields, tzinfo=UTC)
    except ValueError as e:
        raise TimestampParseError(f"Invalid --now value {value!r}: {e}") from e


def parse_expire_minutes(value: str | int) -> int:
    if isinstance(value, int):
        return value
    if not _INTEGER_RE.fullmatch(value):
        raise ValidationError("EXPIRE_MIN must be an integer")
    return int(value)


def build_signing_request(
    *,
    service: str,
    method: str,
    region: str,
    endpoint: str,
    path: str,
    expire_minutes: str | int,
    headers: Iterable[str] = (),
    now: str | None = None,
) -> SigningRequest:
    """Normalize raw command line or configuration values into a SigningRequest.

    The service is lower-cased and the method upper-cased before validation, so
    ``S3 get`` is accepted. Headers use the ``Key: Value`` syntax.
    """
    return SigningRequest(
        service=service.lower(),
        method=method.upper(),
        region=region,
        endpoint=Endpoint.parse(endpoint),
        path=path,
        expire_minutes=parse_expire_minutes(expire_minutes),
        headers=tuple(Header.parse(raw) for raw in headers),
        timestamp=parse_timestamp(now) if now is not None else None,
    )
