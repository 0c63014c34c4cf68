# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Canonical string forms used as SigV4 hash input.

Every function here is pure. The output must match the SigV4 format byte for
byte, so ordering, casing and encoding are fixed.
"""

import io
import warnings
from collections.abc import Iterable, Mapping
from hashlib import sha256

from ._http import AWSRequest
from ._primitives import (
    hex_encode,
    percent_encode_param,
    percent_encode_path,
    sha256_hash,
)
from .exceptions import AWSSDKWarning
from .interfaces.http import Fields
from .interfaces.io import Seekable

EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def request_path(path: str | None) -> str:
    """The path as it appears in the URL: never empty, always starting with ``/``."""
    if not path:
        return "/"
    if not path.startswith("/"):
        return f"/{path}"
    return path


def canonical_path(path: str | None, *, uri_encode_path: bool = True) -> str:
    """Format the path component of the canonical request.

    ``path`` is expected to already be percent-encoded per URI rules. With
    ``uri_encode_path`` enabled it is encoded a second time, turning any ``%``
    into ``%25``. S3 is the only service that signs the singly-encoded path.
    """
    path = request_path(path)
    if uri_encode_path:
        return percent_encode_path(path)
    return path


def canonical_query_string(params: Mapping[str, Iterable[str]]) -> str:
    """Render query parameters sorted by encoded key, then by encoded value.

    Every value of a repeated key becomes its own ``key=value`` entry.
    """
    query_parts = (
        (percent_encode_param(key), percent_encode_param(value))
        for key, values in params.items()
        for value in values
    )
    return "&".join(f"{key}={value}" for key, value in sorted(query_parts))


def _normalize_fields(fields: Fields) -> dict[str, str]:
    normalized = {field.name.lower(): field.as_string(",") for field in fields}
    return dict(sorted(normalized.items()))


def canonical_headers(fields: Fields) -> str:
    """Emit one ``name:value`` line per header in ascending lowercased-name order.

    Values of a multi-valued header are joined with a bare comma.
    """
    return "".join(
        f"{name}:{value}\n" for name, value in _normalize_fields(fields).items()
    )


def signed_headers(fields: Fields) -> str:
    return ";".join(_normalize_fields(fields))


def canonical_request(
    *,
    method: str,
    path: str,
    query: str,
    headers: str,
    signed: str,
    payload_hash: str,
) -> str:
    """Join the six canonical request components.

    The SigV4 specification defines the canonical request to be:
        <HTTPMethod>\n
        <CanonicalURI>\n
        <CanonicalQueryString>\n
        <CanonicalHeaders>\n
        <SignedHeaders>\n
        <HashedPayload>

    ``headers`` already ends in a newline, so the header block is followed by an
    empty line. There is no trailing newline.
    """
    return f"{method}\n{path}\n{query}\n{headers}\n{signed}\n{payload_hash}"


def payload_hash(request: AWSRequest) -> str:
    """Hex SHA-256 of the request body.

    Seekable bodies are restored to their starting position. Other iterables can
    only be read once, so they are buffered and the buffer replaces
    ``request.body``.
    """
    body = request.body

    if body is None:
        return EMPTY_SHA256_HASH

    if isinstance(body, bytes | bytearray):
        return hex_encode(sha256_hash(bytes(body)))

    checksum = sha256()
    if isinstance(body, Seekable):
        position = body.tell()
        for chunk in body:
            checksum.update(chunk)
        body.seek(position)
    else:
        warnings.warn(
            "Request body is a one-shot iterable and will be buffered in memory "
            "to compute the payload hash.",
            AWSSDKWarning,
        )
        buffer = io.BytesIO()
        for chunk in body:
            buffer.write(chunk)
            checksum.update(chunk)
        buffer.seek(0)
        request.body = buffer
    return checksum.hexdigest()
