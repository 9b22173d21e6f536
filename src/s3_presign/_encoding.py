# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from urllib.parse import quote

from .exceptions import ValidationError


def uri_encode(value: str | bytes, *, preserve_slash: bool = False) -> str:
    """Percent-encode ``value`` per :rfc:`3986#section-2.3`.

    Unreserved characters (``A-Z a-z 0-9 - _ . ~``) are emitted as-is, along with
    ``/`` when ``preserve_slash`` is set. Every other byte of the UTF-8 encoded
    value becomes ``%XX`` with upper-case hex digits.

    :param value: The text or raw bytes to encode.
    :param preserve_slash: Whether ``/`` is left unencoded, as required for
        canonical paths.
    """
    safe = "/" if preserve_slash else ""
    if isinstance(value, bytes):
        return quote(value, safe=safe)
    try:
        return quote(value, safe=safe, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise ValidationError(
            f"Value cannot be encoded as UTF-8 at position {e.start}."
        ) from e


def is_utf8_encodable(value: str) -> bool:
    """Whether ``value`` holds no lone surrogates, such as the escapes Python uses
    for undecodable bytes in ``sys.argv`` and ``os.environ``."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
