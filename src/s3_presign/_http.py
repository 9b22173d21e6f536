# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from ._encoding import is_utf8_encodable
from .exceptions import HeaderFormatError, ValidationError

MAX_HEADER_LENGTH = 1024
MAX_AUTHORITY_LENGTH = 256
SUPPORTED_SCHEMES: tuple[str, ...] = ("http", "https")


def _is_control(char: str) -> bool:
    return ord(char) < 0x20 or ord(char) == 0x7F


@dataclass(frozen=True)
class Header:
    """A single caller-supplied header to include in the signature.

    The key and value are kept exactly as given. Case folding and whitespace
    trimming only happen while building the canonical request.
    """

    key: str
    value: str

    def __post_init__(self) -> None:
        if not self.key:
            raise HeaderFormatError("Header key must not be empty")
        if len(self.key) >= MAX_HEADER_LENGTH:
            raise HeaderFormatError(
                f"Header key too long (max {MAX_HEADER_LENGTH - 1} chars)"
            )
        if any(_is_control(c) or c.isspace() or c == ":" for c in self.key):
            raise HeaderFormatError(
                f"Header key {self.key!r} contains whitespace, ':' or control "
                "characters"
            )
        if len(self.value) >= MAX_HEADER_LENGTH:
            raise HeaderFormatError(
                f"Header value too long (max {MAX_HEADER_LENGTH - 1} chars)"
            )
        if any(_is_control(c) and c != "\t" for c in self.value):
            raise HeaderFormatError("Header value contains control characters")
        if not (is_utf8_encodable(self.key) and is_utf8_encodable(self.value)):
            raise HeaderFormatError("Header is not valid UTF-8")

    @classmethod
    def parse(cls, raw: str) -> Header:
        """Parse a ``Key: Value`` string.

        The text is split at the first colon and a single space following the
        colon is dropped. Any other surrounding whitespace is left for the
        canonicalizer to trim.
        """
        key, sep, value = raw.partition(":")
        if not sep:
            raise HeaderFormatError("Invalid header format. Use 'Key: Value'")
        if value.startswith(" "):
            value = value[1:]
        return cls(key=key, value=value)


@dataclass(frozen=True)
class Endpoint:
    """The scheme and authority of the store, e.g. ``https://s3.fr-par.scw.cloud``."""

    scheme: str
    authority: str

    @classmethod
    def parse(cls, raw: str) -> Endpoint:
        text = raw.rstrip("/")
        try:
            parts = urlsplit(text)
            parts.port  # noqa: B018 raises ValueError on a malformed port
        except ValueError as e:
            raise ValidationError(f"Invalid endpoint {raw!r}: {e}") from e
        if parts.scheme not in SUPPORTED_SCHEMES or not parts.netloc:
            raise ValidationError(
                f"Invalid endpoint {raw!r}. Expected http(s)://host[:port]"
            )
        if parts.path or parts.query or parts.fragment or "?" in text or "#" in text:
            raise ValidationError(
                f"Invalid endpoint {raw!r}. Endpoint must not contain a path, "
                "query or fragment; put the bucket in the object path instead"
            )
        if not is_utf8_encodable(parts.netloc):
            raise ValidationError("Endpoint host is not valid UTF-8")
        if "@" in parts.netloc:
            raise ValidationError(f"Invalid endpoint {raw!r}. Userinfo is not allowed")
        if len(parts.netloc) >= MAX_AUTHORITY_LENGTH:
            raise ValidationError(
                f"Endpoint host too long (max {MAX_AUTHORITY_LENGTH - 1} chars)"
            )
        return cls(scheme=parts.scheme, authority=parts.netloc)

    @property
    def host_header(self) -> str:
        """Value of the synthesized ``host`` header."""
        return self.authority

    def build(self) -> str:
        return f"{self.scheme}://{self.authority}"

    def __str__(self) -> str:
        return self.build()
