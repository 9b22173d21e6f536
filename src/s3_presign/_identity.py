# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from datetime import datetime

from ._encoding import is_utf8_encodable
from .exceptions import ValidationError
from .interfaces.identity import CredentialsIdentity

MAX_CREDENTIAL_LENGTH = 512


@dataclass(kw_only=True)
class PresignCredentials(CredentialsIdentity):
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None
    """Only set by library callers holding temporary credentials; the environment
    loader never sets it."""


def validate_credentials(identity: CredentialsIdentity) -> None:
    """Perform runtime, shape and expiration checks before attempting signing.

    Error messages name the offending variable but never echo its value.
    """
    if not isinstance(identity, CredentialsIdentity):  # pyright: ignore
        raise ValidationError(
            "Received unexpected value for identity parameter. Expected "
            f"CredentialsIdentity but received {type(identity)}."
        )
    if not identity.access_key_id:
        raise ValidationError("AWS_ACCESS_KEY_ID must not be empty")
    if len(identity.access_key_id) >= MAX_CREDENTIAL_LENGTH:
        raise ValidationError(
            f"AWS_ACCESS_KEY_ID too long (max {MAX_CREDENTIAL_LENGTH - 1} chars)"
        )
    if "%" in identity.access_key_id:
        raise ValidationError("AWS_ACCESS_KEY_ID contains invalid characters")
    if not 0 < len(identity.secret_access_key) < MAX_CREDENTIAL_LENGTH:
        raise ValidationError(
            "AWS_SECRET_ACCESS_KEY invalid length "
            f"(1-{MAX_CREDENTIAL_LENGTH - 1} chars)"
        )
    token = identity.session_token
    if token is not None and not 0 < len(token) < MAX_CREDENTIAL_LENGTH:
        raise ValidationError(
            f"AWS_SESSION_TOKEN invalid length (1-{MAX_CREDENTIAL_LENGTH - 1} chars)"
        )
    for name, value in (
        ("AWS_ACCESS_KEY_ID", identity.access_key_id),
        ("AWS_SECRET_ACCESS_KEY", identity.secret_access_key),
        ("AWS_SESSION_TOKEN", token),
    ):
        if value is not None and not is_utf8_encodable(value):
            raise ValidationError(f"{name} is not valid UTF-8")
    if identity.is_expired:
        raise ValidationError(
            f"Provided credentials expired at {identity.expiration}. Please "
            "refresh the credentials or update the expiration parameter."
        )
