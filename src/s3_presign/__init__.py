# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""S3 Presign generates time-limited, SigV4 presigned URLs for objects in
S3-compatible stores without a full SDK."""

from __future__ import annotations

__license__ = "Apache-2.0"
__version__ = "0.1.0"

from ._http import Endpoint, Header
from ._identity import PresignCredentials
from .request import SigningRequest, build_signing_request, parse_timestamp
from .signers import (
    DiagnosticSink,
    LoggingDiagnosticSink,
    PresignArtifacts,
    PresignResult,
    S3Presigner,
)

__all__ = (
    "DiagnosticSink",
    "Endpoint",
    "Header",
    "LoggingDiagnosticSink",
    "PresignArtifacts",
    "PresignCredentials",
    "PresignResult",
    "S3Presigner",
    "SigningRequest",
    "build_signing_request",
    "parse_timestamp",
)
