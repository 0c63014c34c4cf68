# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator
from typing import Protocol, runtime_checkable


class Field(Protocol):
    """A header name and its ordered values.

    Field names are case insensitive. The name is kept with the casing the caller
    supplied; canonicalization lowercases it.
    """

    name: str
    values: list[str]

    def as_string(self, delimiter: str = ",") -> str:
        """Serialize the ``Field``'s values into a single line string."""
        ...


class Fields(Protocol):
    """Case-insensitive mapping of header names to ``Field`` entries."""

    # Entries are keyed off the lowercased name of a provided Field
    entries: OrderedDict[str, Field]

    def __getitem__(self, name: str) -> Field:
        """Retrieve Field entry."""
        ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]:
        """Allow iteration over entries."""
        ...

    def __len__(self) -> int:
        """Get total number of Field entries."""
        ...


@runtime_checkable
class URI(Protocol):
    """Target location of a request to presign."""

    scheme: str
    """For example ``http`` or ``https``."""

    host: str
    """The hostname, for example ``db.example.us-east-1.rds.amazonaws.com``."""

    port: int | None
    """An explicit port number."""

    path: str | None
    """Path component of the URI, already percent-encoded."""

    query: str | None
    """Query component of the URI as string."""

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{host}:{port}``"""
        ...


class Request(Protocol):
    """Protocol-agnostic representation of a request to presign."""

    method: str
    destination: URI
    fields: Fields
    body: bytes | Iterable[bytes] | None
