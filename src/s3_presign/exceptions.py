# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class BasePresignException(Exception):
    """Top-level exception to capture presigning errors."""


class ValidationError(BasePresignException, ValueError):
    """A request or credential value is out of range or malformed."""


class HeaderFormatError(ValidationError):
    """A header could not be parsed or is not safe to sign."""


class UsageError(ValidationError):
    """The command line did not match the expected shape."""


class TimestampParseError(BasePresignException, ValueError):
    """A timestamp override is not a valid ``YYYY-MM-DDTHH:MM:SSZ`` UTC value."""


class CryptoFailure(BasePresignException):
    """The SHA-256 or HMAC-SHA256 primitive could not be used.

    This is never retried.
    """
