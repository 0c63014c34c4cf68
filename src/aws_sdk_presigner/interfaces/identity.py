# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


def as_utc(value: datetime) -> datetime:
    """Convert ``value`` to UTC. Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@runtime_checkable
class AWSCredentialsIdentity(Protocol):
    """Resolved AWS credentials used to derive a presigning key."""

    access_key_id: str
    """Identifies the signer. Appears in the ``X-Amz-Credential`` parameter."""

    secret_access_key: str
    """Only used to derive signing keys. It never appears in a presigned URL."""

    session_token: str | None = None
    """Sent as ``X-Amz-Security-Token`` when present."""

    expiration: datetime | None = None
    """When the credentials stop being valid. A naive value is read as UTC."""

    @property
    def is_expired(self) -> bool:
        """Whether ``expiration`` has passed. Presigning does not enforce it."""
        if self.expiration is None:
            return False
        return datetime.now(tz=UTC) >= as_utc(self.expiration)
