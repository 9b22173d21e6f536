# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from collections.abc import Mapping

from ._identity import PresignCredentials
from .exceptions import ValidationError

ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN = "AWS_SESSION_TOKEN"
ENV_REGION = "S3_REGION"
ENV_ENDPOINT = "S3_ENDPOINT"
ENV_DEBUG = "PRESIGN_DEBUG"


class PresignConfig:
    """Presign configuration resolved from environment variables.

    Values passed explicitly, such as the region and endpoint given on the command
    line, take precedence over the environment. Empty variables are treated as
    unset, except for ``PRESIGN_DEBUG`` which enables debugging whenever it is
    present.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = os.environ if environ is None else environ

    def _get(self, name: str) -> str | None:
        return self._environ.get(name) or None

    def credentials(self) -> PresignCredentials:
        access_key_id = self._get(ENV_ACCESS_KEY_ID)
        secret_access_key = self._get(ENV_SECRET_ACCESS_KEY)
        if access_key_id is None or secret_access_key is None:
            raise ValidationError(
                f"{ENV_ACCESS_KEY_ID} and {ENV_SECRET_ACCESS_KEY} must be set"
            )
        return PresignCredentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=self._get(ENV_SESSION_TOKEN),
        )

    def region(self, override: str | None = None) -> str:
        value = override if override is not None else self._get(ENV_REGION)
        if value is None:
            raise ValidationError(
                f"REGION is required (provide CLI argument or set {ENV_REGION})"
            )
        return value

    def endpoint(self, override: str | None = None) -> str:
        value = override if override is not None else self._get(ENV_ENDPOINT)
        if value is None:
            raise ValidationError(
                f"ENDPOINT is required (provide CLI argument or set {ENV_ENDPOINT})"
            )
        return value

    @property
    def debug(self) -> bool:
        return ENV_DEBUG in self._environ
