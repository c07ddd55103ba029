# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator
from typing import Protocol, runtime_checkable


class Field(Protocol):
    """A name-value pair representing a single header of a request.

    All field names are case insensitive and case-variance must be treated as
    equivalent. Names may be normalized for signing but are preserved as given for
    transmission.
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
    """Case-insensitive mapping of header names to :py:class:`Field` entries."""

    # Entries are keyed off the lowercased name of a provided Field
    entries: OrderedDict[str, Field]

    def set_field(self, field: Field) -> None:
        """Alias for __setitem__ to utilize the field.name for the entry key."""
        ...

    def __setitem__(self, name: str, field: Field) -> None: ...

    def __getitem__(self, name: str) -> Field: ...

    def __delitem__(self, name: str) -> None: ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class URI(Protocol):
    """Target location of a :py:class:`Request`."""

    scheme: str
    host: str
    port: int | None
    path: str | None
    query: str | None
    """Query component of the URI as a raw, percent-encoded string."""

    def build(self) -> str:
        """Construct the URI string representation."""
        ...

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{host}:{port}``"""
        ...


class Request(Protocol):
    """Read-only view of an outgoing request as consumed by the signer."""

    method: str
    destination: URI
    fields: Fields
    body: Iterable[bytes] | None
