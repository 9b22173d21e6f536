# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import hmac
from hashlib import sha256

from .exceptions import CryptoFailure


def sha256_digest(data: bytes) -> bytes:
    try:
        return sha256(data).digest()
    except ValueError as e:
        raise CryptoFailure(f"SHA-256 digest failed: {e}") from e


def hmac_sha256(key: bytes, msg: bytes) -> bytes:
    try:
        return hmac.new(key=key, msg=msg, digestmod=sha256).digest()
    except ValueError as e:
        raise CryptoFailure(f"HMAC-SHA256 failed: {e}") from e


def to_hex(digest: bytes) -> str:
    """Lower-case hex rendering of a digest."""
    return digest.hex()
