# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""IAM database authentication tokens for Amazon RDS.

The token is a presigned ``connect`` URL that the database client sends as its
password.
"""

import datetime
import logging
from urllib.parse import urlencode, urlsplit

from ._http import AWSRequest, Fields, URI
from .exceptions import InvalidEndpointException
from .interfaces.identity import AWSCredentialsIdentity
from .signers import DEFAULT_PRESIGN_EXPIRES, SigV4PresignProperties, presign

logger = logging.getLogger(__name__)

RDS_SIGNING_NAME: str = "rds-db"


def presign_rds_iam(
    *,
    identity: AWSCredentialsIdentity,
    host_and_port: str,
    username: str,
    region: str,
    expires: int | datetime.timedelta = DEFAULT_PRESIGN_EXPIRES,
    timestamp: datetime.datetime | None = None,
) -> str:
    """Generate an IAM authentication token for a database user.

    :param identity: Credentials of the IAM principal allowed to connect.
    :param host_and_port: Database endpoint in ``{host}:{port}`` form.
    :param username: The database user to log in as.
    :param region: The region the database runs in.
    :param expires: Token lifetime, in seconds or as a ``timedelta``.
    :param timestamp: The signing instant. Defaults to the current UTC time.
    :raises InvalidEndpointException: ``host_and_port`` is not a valid endpoint.
    """
    destination = _parse_endpoint(host_and_port)
    request = AWSRequest(
        destination=URI(
            scheme=destination.scheme,
            host=destination.host,
            port=destination.port,
            path=destination.path,
            query=urlencode([("Action", "connect"), ("DBUser", username)]),
        ),
        method="GET",
        body=b"",
        fields=Fields.from_mapping({"Host": [host_and_port]}),
    )
    if timestamp is None:
        timestamp = datetime.datetime.now(datetime.UTC)

    logger.debug("Generating RDS auth token for %s at %s", username, host_and_port)
    signing_properties = SigV4PresignProperties(
        region=region,
        service=RDS_SIGNING_NAME,
        timestamp=timestamp,
        expires=expires,
        uri_encode_path=True,
    )
    return presign(request, signing_properties, identity)


def _parse_endpoint(host_and_port: str) -> URI:
    try:
        url_parts = urlsplit(f"http://{host_and_port}/")
        port = url_parts.port
    except ValueError as e:
        raise InvalidEndpointException(
            f"Unable to parse database endpoint {host_and_port!r}: {e}"
        ) from e
    host = url_parts.hostname
    if (
        not host
        or url_parts.username is not None
        or url_parts.path != "/"
        or url_parts.query
        or url_parts.fragment
    ):
        raise InvalidEndpointException(
            f"Database endpoint {host_and_port!r} must be of the form host:port."
        )
    if ":" in host:
        host = f"[{host}]"
    return URI(scheme="http", host=host, port=port, path="/")
