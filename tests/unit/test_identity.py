# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import typing
from datetime import UTC, datetime, timedelta

import pytest
from s3_presign import PresignCredentials
from s3_presign._identity import validate_credentials
from s3_presign.exceptions import ValidationError
from s3_presign.interfaces.identity import CredentialsIdentity


@pytest.mark.parametrize(
    "access_key_id,secret_access_key,session_token,expiration",
    [
        ("AKID1234EXAMPLE", "SECRET1234", None, None),
        ("AKID1234EXAMPLE", "SECRET1234", "SESS_TOKEN_1234", None),
        (
            "AKID1234EXAMPLE",
            "SECRET1234",
            "SESS_TOKEN_1234",
            datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC),
        ),
    ],
)
def test_presign_credentials(
    access_key_id: str,
    secret_access_key: str,
    session_token: str | None,
    expiration: datetime | None,
) -> None:
    creds = PresignCredentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
        expiration=expiration,
    )
    assert isinstance(creds, CredentialsIdentity)
    assert creds.access_key_id == access_key_id
    assert creds.secret_access_key == secret_access_key
    assert creds.session_token == session_token
    assert creds.expiration == expiration


def test_repr_hides_secrets() -> None:
    creds = PresignCredentials(
        access_key_id="AKID1234EXAMPLE",
        secret_access_key="SECRET1234",
        session_token="SESS_TOKEN_1234",
    )
    assert "AKID1234EXAMPLE" in repr(creds)
    assert "SECRET1234" not in repr(creds)
    assert "SESS_TOKEN_1234" not in repr(creds)


@pytest.mark.parametrize(
    "expiration,is_expired",
    [
        (None, False),
        (datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC), True),
        (datetime.now(UTC) + timedelta(hours=1), False),
    ],
)
def test_is_expired(expiration: datetime | None, is_expired: bool) -> None:
    creds = PresignCredentials(
        access_key_id="AKID1234EXAMPLE",
        secret_access_key="SECRET1234",
        expiration=expiration,
    )
    assert creds.is_expired is is_expired


def test_validate_accepts_well_formed_credentials() -> None:
    validate_credentials(
        PresignCredentials(
            access_key_id="AKIDEXAMPLE",
            secret_access_key="s" * 511,
            session_token="t" * 511,
        )
    )


@pytest.mark.parametrize(
    "access_key_id,secret_access_key,session_token",
    [
        ("", "secret", None),
        ("A" * 512, "secret", None),
        ("AKID%sEXAMPLE", "secret", None),
        ("AKIDEXAMPLE", "", None),
        ("AKIDEXAMPLE", "s" * 512, None),
        ("AKIDEXAMPLE", "secret", ""),
        ("AKIDEXAMPLE", "secret", "t" * 512),
        ("AKID\udcffEXAMPLE", "secret", None),
        ("AKIDEXAMPLE", "sec\udcffret", None),
        ("AKIDEXAMPLE", "secret", "tok\udcffen"),
    ],
)
def test_validate_rejects_malformed_credentials(
    access_key_id: str, secret_access_key: str, session_token: str | None
) -> None:
    creds = PresignCredentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
    )
    with pytest.raises(ValidationError) as exc_info:
        validate_credentials(creds)
    if secret_access_key:
        assert secret_access_key not in str(exc_info.value)


def test_validate_rejects_expired_credentials() -> None:
    creds = PresignCredentials(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="secret",
        expiration=datetime(1970, 1, 1, tzinfo=UTC),
    )
    with pytest.raises(ValidationError):
        validate_credentials(creds)


@typing.no_type_check
def test_validate_rejects_unexpected_identity() -> None:
    """Ignore typing as we're testing an invalid input state."""
    with pytest.raises(ValidationError):
        validate_credentials(object())
