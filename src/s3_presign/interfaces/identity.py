# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialsIdentity(Protocol):
    """Credentials able to sign requests for an S3-compatible store."""

    access_key_id: str
    """A unique identifier for the user or role."""

    secret_access_key: str
    """A secret key used in conjunction with the access key ID to derive the
    signing key. It never leaves the signer."""

    session_token: str | None = None
    """A temporary token used to specify the current session for the supplied
    credentials."""

    expiration: datetime | None = None
    """The expiration time of the credentials, always in UTC. Credentials loaded
    from the environment have none and never expire."""

    @property
    def is_expired(self) -> bool:
        """Whether the credentials are expired."""
        if self.expiration is None:
            return False
        return datetime.now(tz=UTC) >= self.expiration
