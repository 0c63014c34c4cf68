# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import logging
import warnings
from typing import Required, TypedDict
from urllib.parse import parse_qsl

from . import canonical
from ._http import AWSRequest, URI
from ._primitives import hex_encode, hmac_sha256, sha256_hash
from .exceptions import AWSSDKWarning, MissingExpectedParameterException
from .interfaces.identity import AWSCredentialsIdentity, as_utc

logger = logging.getLogger(__name__)

ALGORITHM: str = "AWS4-HMAC-SHA256"
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}
DEFAULT_PRESIGN_EXPIRES: int = 900

SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
SIGV4_DATE_FORMAT: str = "%Y%m%d"

SIGNATURE_QUERY_PARAM: str = "X-Amz-Signature"
SECURITY_TOKEN_QUERY_PARAM: str = "X-Amz-Security-Token"


class SigV4PresignProperties(TypedDict, total=False):
    region: Required[str]
    service: Required[str]
    timestamp: Required[datetime.datetime]
    expires: int | datetime.timedelta
    uri_encode_path: bool


def derive_signing_key(
    secret_access_key: str,
    date: datetime.date,
    region: str,
    service: str,
) -> bytes:
    """Derive the signing key scoped to one date, region and service.

    Components of Signing Key Calculation

    DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
    DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
    DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
    SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
    """
    k_secret = f"AWS4{secret_access_key}".encode()
    k_date = hmac_sha256(k_secret, date.strftime(SIGV4_DATE_FORMAT))
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, "aws4_request")


def sign(signing_key: bytes, string_to_sign: str) -> str:
    return hex_encode(hmac_sha256(signing_key, string_to_sign))


class SigV4Presigner:
    """Generates URLs carrying an AWS Signature Version 4 in their query string.

    The presigner holds no state. One instance may be shared across threads.
    """

    def presign(
        self,
        *,
        signing_properties: SigV4PresignProperties,
        request: AWSRequest,
        identity: AWSCredentialsIdentity,
    ) -> str:
        """Generate a presigned URL for the supplied request.

        :param signing_properties: SigV4PresignProperties to define signing
            primitives such as the target service, region, timestamp and expiry.
        :param request: An AWSRequest describing the request to authorize.
        :param identity: A set of credentials representing an AWS Identity or role
            capacity.
        """
        self._validate_identity(identity=identity)
        self._validate_signing_properties(signing_properties=signing_properties)

        timestamp = self._signing_timestamp(signing_properties=signing_properties)
        credential_scope = self._scope(signing_properties=signing_properties)
        logger.debug("Presigning request with credential scope %s", credential_scope)

        query_params = self.presign_query_params(
            request=request,
            signing_properties=signing_properties,
            credential_scope=credential_scope,
            identity=identity,
        )
        canonical_query = canonical.canonical_query_string(query_params)
        canonical_request = self.canonical_request(
            signing_properties=signing_properties,
            request=request,
            canonical_query=canonical_query,
        )
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            signing_properties=signing_properties,
        )
        logger.debug("StringToSign:\n%s", string_to_sign)

        signing_key = derive_signing_key(
            secret_access_key=identity.secret_access_key,
            date=timestamp.date(),
            region=signing_properties["region"],
            service=signing_properties["service"],
        )
        signature = sign(signing_key, string_to_sign)

        destination = request.destination
        # The URL keeps the path as given. Only the signature uses the
        # double-encoded form.
        return (
            f"{destination.scheme}://{self._host_and_port(uri=destination)}"
            f"{canonical.request_path(destination.path)}?{canonical_query}"
            f"&{SIGNATURE_QUERY_PARAM}={signature}"
        )

    def presign_query_params(
        self,
        *,
        request: AWSRequest,
        signing_properties: SigV4PresignProperties,
        credential_scope: str,
        identity: AWSCredentialsIdentity,
    ) -> dict[str, list[str]]:
        """Merge the request's own query parameters with the SigV4 parameters.

        The SigV4 parameters overwrite any caller parameter of the same name.
        """
        query_params: dict[str, list[str]] = {}
        for key, value in parse_qsl(
            request.destination.query or "", keep_blank_values=True
        ):
            query_params.setdefault(key, []).append(value)

        timestamp = self._signing_timestamp(signing_properties=signing_properties)
        expires = signing_properties.get("expires", DEFAULT_PRESIGN_EXPIRES)
        if isinstance(expires, datetime.timedelta):
            expires = int(expires.total_seconds())

        auth_params = {
            "X-Amz-Algorithm": ALGORITHM,
            "X-Amz-Credential": f"{identity.access_key_id}/{credential_scope}",
            "X-Amz-Date": timestamp.strftime(SIGV4_TIMESTAMP_FORMAT),
            "X-Amz-Expires": str(expires),
            "X-Amz-SignedHeaders": canonical.signed_headers(request.fields),
        }
        if identity.session_token is not None:
            auth_params[SECURITY_TOKEN_QUERY_PARAM] = identity.session_token

        overwritten = sorted(query_params.keys() & auth_params.keys())
        if overwritten:
            warnings.warn(
                "Request query parameters are reserved for presigning and will be "
                f"overwritten: {', '.join(overwritten)}",
                AWSSDKWarning,
            )
        for key, value in auth_params.items():
            query_params[key] = [value]

        return dict(sorted(query_params.items()))

    def canonical_request(
        self,
        *,
        signing_properties: SigV4PresignProperties,
        request: AWSRequest,
        canonical_query: str,
    ) -> str:
        """The canonical request is a standardized string laying out the components
        used in the SigV4 signing algorithm. This is useful to quickly compare inputs
        to find signature mismatches and unintended variances.

        :param signing_properties:
            SigV4PresignProperties to define signing primitives such as
            the target service, region, and timestamp.
        :param request:
            An AWSRequest to use for generating a SigV4 signature.
        :param canonical_query:
            Canonical query string built from ``presign_query_params``.
        """
        # Hash the payload first so a buffered body is in place before anything
        # else reads the request.
        hashed_payload = canonical.payload_hash(request)
        return canonical.canonical_request(
            method=request.method,
            path=canonical.canonical_path(
                request.destination.path,
                uri_encode_path=signing_properties.get("uri_encode_path", True),
            ),
            query=canonical_query,
            headers=canonical.canonical_headers(request.fields),
            signed=canonical.signed_headers(request.fields),
            payload_hash=hashed_payload,
        )

    def string_to_sign(
        self,
        *,
        canonical_request: str,
        signing_properties: SigV4PresignProperties,
    ) -> str:
        """The string to sign concatenates the formal identifier of our signing
        algorithm, the signing DateTime, the scope of our credentials, and a hash of
        the canonical request.

        The SigV4 specification defines the string to sign as:
            Algorithm \n
            RequestDateTime \n
            CredentialScope  \n
            HashedCanonicalRequest

        :param canonical_request:
            String generated from the `canonical_request` method.
        :param signing_properties:
            SigV4PresignProperties to define signing primitives such as
            the target service, region, and timestamp.
        """
        timestamp = self._signing_timestamp(signing_properties=signing_properties)
        return (
            f"{ALGORITHM}\n"
            f"{timestamp.strftime(SIGV4_TIMESTAMP_FORMAT)}\n"
            f"{self._scope(signing_properties=signing_properties)}\n"
            f"{hex_encode(sha256_hash(canonical_request.encode()))}"
        )

    def _scope(self, *, signing_properties: SigV4PresignProperties) -> str:
        timestamp = self._signing_timestamp(signing_properties=signing_properties)
        formatted_date = timestamp.strftime(SIGV4_DATE_FORMAT)
        region = signing_properties["region"]
        service = signing_properties["service"]
        # Scope format: <YYYYMMDD>/<AWS Region>/<AWS Service>/aws4_request
        return f"{formatted_date}/{region}/{service}/aws4_request"

    def _signing_timestamp(
        self, *, signing_properties: SigV4PresignProperties
    ) -> datetime.datetime:
        return as_utc(signing_properties["timestamp"]).replace(microsecond=0)

    def _host_and_port(self, *, uri: URI) -> str:
        if uri.port is not None and DEFAULT_PORTS.get(uri.scheme) == uri.port:
            return uri.host
        return uri.netloc

    def _validate_identity(self, *, identity: AWSCredentialsIdentity) -> None:
        if not isinstance(identity, AWSCredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"AWSCredentialsIdentity but received {type(identity)}."
            )
        if identity.is_expired:
            logger.debug(
                "Presigning with an identity that expired at %s", identity.expiration
            )

    def _validate_signing_properties(
        self, *, signing_properties: SigV4PresignProperties
    ) -> None:
        for key in ("region", "service", "timestamp"):
            if signing_properties.get(key) is None:
                raise MissingExpectedParameterException(
                    f"Cannot presign a request without a valid {key} in your "
                    "signing_properties."
                )


_DEFAULT_PRESIGNER = SigV4Presigner()


def presign(
    request: AWSRequest,
    signing_properties: SigV4PresignProperties,
    identity: AWSCredentialsIdentity,
) -> str:
    """Return a presigned URL for ``request``.

    Identical inputs always produce the same URL.
    """
    return _DEFAULT_PRESIGNER.presign(
        signing_properties=signing_properties, request=request, identity=identity
    )
