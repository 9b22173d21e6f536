# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Protocol

from ._crypto import hmac_sha256, sha256_digest, to_hex
from ._encoding import uri_encode
from ._http import Header
from ._identity import validate_credentials
from .exceptions import HeaderFormatError
from .interfaces.identity import CredentialsIdentity
from .request import SigningRequest

logger = logging.getLogger(__name__)

SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
SIGNING_ALGORITHM: str = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR: str = "aws4_request"
UNSIGNED_PAYLOAD: str = "UNSIGNED-PAYLOAD"
SECURITY_TOKEN_PARAM: str = "X-Amz-Security-Token"
REDACTED: str = "REDACTED"

# C-locale isspace(); str.strip() would also remove Unicode spaces.
_HEADER_WHITESPACE = " \t\n\v\f\r"


@dataclass(frozen=True, kw_only=True)
class PresignArtifacts:
    """Intermediate values of a single presign operation, for debugging only."""

    canonical_request: str
    canonical_request_hash: str
    string_to_sign: str
    credential_scope: str
    signed_headers: str
    query_string: str
    signature: str


@dataclass(frozen=True)
class PresignResult:
    url: str
    artifacts: PresignArtifacts | None = field(default=None, repr=False)
    """Redacted artifacts, only populated when a diagnostic sink is configured."""


class DiagnosticSink(Protocol):
    def emit(self, artifacts: PresignArtifacts) -> None: ...


class LoggingDiagnosticSink:
    """Writes presign artifacts to a logger at DEBUG level."""

    def __init__(self, log: logging.Logger = logger):
        self._log = log

    def emit(self, artifacts: PresignArtifacts) -> None:
        self._log.debug("canonical_request:\n%s", artifacts.canonical_request)
        self._log.debug("canonical_hash:%s", artifacts.canonical_request_hash)
        self._log.debug("string_to_sign:\n%s", artifacts.string_to_sign)
        self._log.debug("credential_scope:%s", artifacts.credential_scope)
        self._log.debug("signed_headers:%s", artifacts.signed_headers)
        self._log.debug("signature:%s", artifacts.signature)
        self._log.debug("query_params:%s", artifacts.query_string)


def derive_signing_key(
    *, secret_key: str, date_stamp: str, region: str, service: str
) -> bytes:
    """Derive the date, region and service scoped SigV4 signing key."""
    # Components of Signing Key Calculation
    #
    # DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
    # DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
    # DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
    # SigningKey = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
    k_date = hmac_sha256(f"AWS4{secret_key}".encode(), date_stamp.encode())
    k_region = hmac_sha256(k_date, region.encode())
    k_service = hmac_sha256(k_region, service.encode())
    return hmac_sha256(k_service, SCOPE_TERMINATOR.encode())


class S3Presigner:
    """Generates query-parameter (presigned) URLs using AWS Signature Version 4.

    Only unsigned payloads are supported: the payload hash in the canonical request
    is always the literal ``UNSIGNED-PAYLOAD``.
    """

    def __init__(self, *, diagnostic_sink: DiagnosticSink | None = None):
        self._diagnostic_sink = diagnostic_sink

    def presign(
        self,
        *,
        request: SigningRequest,
        identity: CredentialsIdentity,
    ) -> PresignResult:
        """Generate a presigned URL for the supplied request.

        :param request: A validated SigningRequest describing the object and the
            lifetime of the URL.
        :param identity: Credentials used to sign. The secret key is only used to
            derive the signing key and is never logged.
        """
        validate_credentials(identity=identity)
        timestamp = self._resolve_timestamp(request=request)
        amz_date = timestamp.strftime(SIGV4_TIMESTAMP_FORMAT)
        date_stamp = amz_date[0:8]
        logger.debug(
            "Presigning %s %s in %s, valid for %s seconds.",
            request.method,
            request.path,
            request.region,
            request.expires_seconds,
        )

        # Construct core signing components
        credential_scope = self.credential_scope(
            date_stamp=date_stamp, region=request.region, service=request.service
        )
        canonical_uri = self.canonical_uri(path=request.path)
        canonical_query = self.canonical_query(
            request=request,
            identity=identity,
            amz_date=amz_date,
            credential_scope=credential_scope,
        )
        canonical_request = self.canonical_request(
            request=request, canonical_query=canonical_query
        )
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            amz_date=amz_date,
            credential_scope=credential_scope,
        )
        signing_key = derive_signing_key(
            secret_key=identity.secret_access_key,
            date_stamp=date_stamp,
            region=request.region,
            service=request.service,
        )
        signature = self.signature(
            string_to_sign=string_to_sign, signing_key=signing_key
        )
        url = (
            f"{request.endpoint.build()}{canonical_uri}?{canonical_query}"
            f"&X-Amz-Signature={signature}"
        )

        artifacts = None
        if self._diagnostic_sink is not None:
            artifacts = self._redact(
                PresignArtifacts(
                    canonical_request=canonical_request,
                    canonical_request_hash=to_hex(
                        sha256_digest(canonical_request.encode())
                    ),
                    string_to_sign=string_to_sign,
                    credential_scope=credential_scope,
                    signed_headers=self.signed_headers(request=request),
                    query_string=canonical_query,
                    signature=signature,
                ),
                identity=identity,
            )
            self._diagnostic_sink.emit(artifacts)
        return PresignResult(url=url, artifacts=artifacts)

    def canonical_request(
        self, *, request: SigningRequest, canonical_query: str
    ) -> str:
        """The canonical request is the exact byte sequence the server rebuilds to
        verify the signature. Comparing it with the server's view is the quickest
        way to find the cause of a signature mismatch.

        For a presigned URL it is defined as:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>\n
            <SignedHeaders>\n
            UNSIGNED-PAYLOAD

        :param request: The SigningRequest being signed.
        :param canonical_query: Query string generated by `canonical_query`.
        """
        headers = self._signing_headers(request=request)
        return (
            f"{request.method}\n"
            f"{self.canonical_uri(path=request.path)}\n"
            f"{canonical_query}\n"
            f"{self.canonical_headers(headers=headers)}\n"
            f"{self._join_signed_headers(headers=headers)}\n"
            f"{UNSIGNED_PAYLOAD}"
        )

    def string_to_sign(
        self, *, canonical_request: str, amz_date: str, credential_scope: str
    ) -> str:
        """The string to sign concatenates the signing algorithm identifier, the
        signing timestamp, the credential scope, and a hash of the canonical request.

        SigV4 defines the string to sign as:
            Algorithm \n
            RequestDateTime \n
            CredentialScope  \n
            HashedCanonicalRequest
        """
        canonical_hash = to_hex(sha256_digest(canonical_request.encode()))
        return (
            f"{SIGNING_ALGORITHM}\n"
            f"{amz_date}\n"
            f"{credential_scope}\n"
            f"{canonical_hash}"
        )

    def signature(self, *, string_to_sign: str, signing_key: bytes) -> str:
        return to_hex(hmac_sha256(signing_key, string_to_sign.encode()))

    def credential_scope(self, *, date_stamp: str, region: str, service: str) -> str:
        # Scope format: <YYYYMMDD>/<Region>/<Service>/aws4_request
        return f"{date_stamp}/{region}/{service}/{SCOPE_TERMINATOR}"

    def canonical_uri(self, *, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return uri_encode(path, preserve_slash=True)

    def canonical_query(
        self,
        *,
        request: SigningRequest,
        identity: CredentialsIdentity,
        amz_date: str,
        credential_scope: str,
    ) -> str:
        """Build the query string that is both signed and sent in the URL.

        The five SigV4 parameters are sorted by name. The security token, when
        present, always comes last. ``X-Amz-Signature`` is never part of it.
        """
        params = {
            "X-Amz-Algorithm": SIGNING_ALGORITHM,
            "X-Amz-Credential": f"{identity.access_key_id}/{credential_scope}",
            "X-Amz-Date": amz_date,
            "X-Amz-Expires": str(request.expires_seconds),
            "X-Amz-SignedHeaders": self.signed_headers(request=request),
        }
        query_parts = [
            (uri_encode(key), uri_encode(value))
            for key, value in sorted(params.items())
        ]
        if identity.session_token is not None:
            query_parts.append(
                (SECURITY_TOKEN_PARAM, uri_encode(identity.session_token))
            )
        return "&".join(f"{key}={value}" for key, value in query_parts)

    def canonical_headers(self, *, headers: Iterable[Header]) -> str:
        """Lower-case keys, trim values and emit sorted ``key:value\\n`` lines.

        Only leading and trailing whitespace is removed from values; runs of
        whitespace inside a value are kept as given.
        """
        return "".join(
            f"{key}:{value}\n"
            for key, value in self._normalize_headers(headers=headers).items()
        )

    def signed_headers(self, *, request: SigningRequest) -> str:
        return self._join_signed_headers(headers=self._signing_headers(request=request))

    def _join_signed_headers(self, *, headers: Iterable[Header]) -> str:
        return ";".join(self._normalize_headers(headers=headers))

    def _signing_headers(self, *, request: SigningRequest) -> list[Header]:
        host = Header(key="host", value=request.endpoint.host_header)
        return [host, *request.headers]

    def _normalize_headers(self, *, headers: Iterable[Header]) -> dict[str, str]:
        normalized: dict[str, str] = {}
        for header in headers:
            key = header.key.lower()
            if key in normalized:
                raise HeaderFormatError(f"Duplicate header {key!r}")
            normalized[key] = header.value.strip(_HEADER_WHITESPACE)
        # Code point order of str keys matches the byte order of their UTF-8 form.
        return dict(sorted(normalized.items()))

    def _resolve_timestamp(self, *, request: SigningRequest) -> datetime.datetime:
        if request.timestamp is None:
            return datetime.datetime.now(datetime.UTC)
        return request.timestamp.astimezone(datetime.UTC)

    def _redact(
        self, artifacts: PresignArtifacts, *, identity: CredentialsIdentity
    ) -> PresignArtifacts:
        if identity.session_token is None:
            return artifacts
        token_param = f"{SECURITY_TOKEN_PARAM}={uri_encode(identity.session_token)}"
        redacted_param = f"{SECURITY_TOKEN_PARAM}={REDACTED}"
        return replace(
            artifacts,
            canonical_request=artifacts.canonical_request.replace(
                token_param, redacted_param
            ),
            query_string=artifacts.query_string.replace(token_param, redacted_param),
        )
