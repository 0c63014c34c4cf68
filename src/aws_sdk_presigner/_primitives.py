# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Hashing and percent-encoding helpers shared by the canonicalizer and signer.

``urllib.parse.quote`` never encodes ``A-Z a-z 0-9 - . _ ~``, so the two encoders
below differ only in whether ``/`` is left alone.
"""

import hmac
from hashlib import sha256
from urllib.parse import quote


def sha256_hash(data: bytes) -> bytes:
    return sha256(data).digest()


def hmac_sha256(key: bytes, message: str | bytes) -> bytes:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(key=key, msg=message, digestmod=sha256).digest()


def hex_encode(data: bytes) -> str:
    return data.hex()


def percent_encode_path(value: str) -> str:
    """Percent-encode everything except unreserved characters and ``/``."""
    return quote(string=value, safe="/")


def percent_encode_param(value: str) -> str:
    """Percent-encode everything except unreserved characters."""
    return quote(string=value, safe="")
