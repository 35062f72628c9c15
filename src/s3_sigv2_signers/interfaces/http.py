# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol, runtime_checkable


class Field(Protocol):
    """A single HTTP header: a name and one or more values.

    Field names are case insensitive. Names may be normalized for lookup but the
    original spelling is preserved for transmission.
    """

    name: str
    values: list[str]

    def add(self, value: str) -> None:
        """Append a value to a field."""
        ...

    def set(self, values: list[str]) -> None:
        """Overwrite existing field values."""
        ...

    def as_string(self, delimiter: str = ",") -> str:
        """Serialize the ``Field``'s values into a single line string."""
        ...


class Fields(Protocol):
    """Case-insensitive collection of request headers keyed by field name."""

    def set_field(self, field: Field) -> None:
        """Set or replace the entry for ``field.name``."""
        ...

    def get(self, key: str, default: Field | None = None) -> Field | None:
        """Retrieve a Field entry, or ``default`` if it isn't present."""
        ...

    def __getitem__(self, name: str) -> Field: ...

    def __delitem__(self, name: str) -> None: ...

    def __contains__(self, key: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class URI(Protocol):
    """Target location of a signed request."""

    scheme: str
    """For example ``http`` or ``https``."""

    host: str
    """The hostname, for example ``examplebucket.s3.amazonaws.com``.

    Only used by the signer to detect virtual-hosted-style bucket addressing.
    """

    port: int | None
    """An explicit port number."""

    path: str | None
    """Path component of the URI, used verbatim in the canonical resource."""

    query: str | None
    """Raw query component of the URI, scanned for S3 subresources."""

    fragment: str | None
    """Part of the URI specification, but never transmitted or signed."""

    def build(self) -> str:
        """Construct URI string representation.

        Returns a string of the form ``{scheme}://{host}:{port}{path}?{query}``
        """
        ...

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{host}:{port}``"""
        ...


class Request(Protocol):
    """The parts of an HTTP request that take part in SigV2 signing."""

    destination: URI
    method: str
    fields: Fields
    body: Iterable[bytes] | None
