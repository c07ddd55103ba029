# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Minimal request model handed to the signer by a transport layer.

Only the parts of a request that take part in signing are modelled: the method,
the destination and the header fields. The body is carried along untouched.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator
from copy import deepcopy
from dataclasses import dataclass, replace
from urllib.parse import parse_qsl, urlunparse

import cos_sdk_signers.interfaces.http as interfaces_http

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


class Field(interfaces_http.Field):
    """A single header with one or more values."""

    def __init__(self, *, name: str, values: Iterable[str] | None = None):
        self.name = name
        self.values: list[str] = list(values) if values is not None else []

    def add(self, value: str) -> None:
        """Append a value to a field."""
        self.values.append(value)

    def set(self, values: list[str]) -> None:
        """Overwrite existing field values."""
        self.values = values

    def as_string(self, delimiter: str = ",") -> str:
        """Get delimited string of all values.

        If the ``Field`` has zero values, the empty string is returned. A single
        value is returned unmodified.
        """
        return delimiter.join(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return self.name == other.name and self.values == other.values

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, values={self.values!r})"


class Fields(interfaces_http.Fields):
    def __init__(self, initial: Iterable[interfaces_http.Field] | None = None):
        """Collection of header entries mapped by case-insensitive name.

        :param initial: Initial list of ``Field`` objects. Names must be unique
            once lowercased.
        """
        self.entries: OrderedDict[str, interfaces_http.Field] = OrderedDict()
        for field in initial or ():
            key = self._normalize_field_name(field.name)
            if key in self.entries:
                raise ValueError(
                    "Field names of the initial list of fields must be unique. "
                    f"{key!r} appears more than once."
                )
            self.entries[key] = field

    @classmethod
    def from_mapping(cls, headers: dict[str, str]) -> Fields:
        """Build a collection from a plain ``{name: value}`` mapping."""
        return cls(Field(name=name, values=[value]) for name, value in headers.items())

    def set_field(self, field: interfaces_http.Field) -> None:
        """Alias for __setitem__ to utilize the field.name for the entry key."""
        self[field.name] = field

    def __setitem__(self, name: str, field: interfaces_http.Field) -> None:
        normalized_name = self._normalize_field_name(name)
        if normalized_name != self._normalize_field_name(field.name):
            raise ValueError(
                f"Supplied key {name} does not match Field.name "
                f"provided: {field.name}"
            )
        self.entries[normalized_name] = field

    def get(
        self, key: str, default: interfaces_http.Field | None = None
    ) -> interfaces_http.Field | None:
        return self[key] if key in self else default

    def __getitem__(self, name: str) -> interfaces_http.Field:
        return self.entries[self._normalize_field_name(name)]

    def __delitem__(self, name: str) -> None:
        del self.entries[self._normalize_field_name(name)]

    def items(self) -> list[tuple[str, str]]:
        """``(name, value)`` pairs as given, multiple values comma-joined."""
        return [(field.name, field.as_string()) for field in self.entries.values()]

    def _normalize_field_name(self, name: str) -> str:
        return name.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fields):
            return False
        return self.entries == other.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        yield from self.entries.values()

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Fields({self.entries})"

    def __contains__(self, key: str) -> bool:
        return self._normalize_field_name(key) in self.entries


@dataclass(kw_only=True, frozen=True)
class URI(interfaces_http.URI):
    """Target location of a :py:class:`COSRequest`."""

    scheme: str = "https"
    """For example ``http`` or ``https``."""

    host: str
    """The hostname, for example ``examplebucket-1250000000.cos.myqcloud.com``."""

    port: int | None = None
    """An explicit port number."""

    path: str | None = None
    """Path component of the URI, the object key prefixed with ``/``."""

    query: str | None = None
    """Query component of the URI as a raw, percent-encoded string."""

    fragment: str | None = None

    @property
    def netloc(self) -> str:
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def query_params(self) -> list[tuple[str, str]]:
        """Decoded query parameters in request order, blank values kept."""
        if not self.query:
            return []
        return parse_qsl(self.query, keep_blank_values=True)

    def without_default_port(self) -> URI:
        if self.port is not None and DEFAULT_PORTS.get(self.scheme) == self.port:
            return replace(self, port=None)
        return self

    def build(self) -> str:
        """Construct URI string representation.

        Returns a string of the form ``{scheme}://{netloc}{path}?{query}#{fragment}``
        """
        components = (
            self.scheme,
            self.netloc,
            self.path or "",
            "",  # params
            self.query,
            self.fragment,
        )
        return urlunparse(components)


class COSRequest(interfaces_http.Request):
    def __init__(
        self,
        *,
        destination: URI,
        method: str,
        fields: Fields,
        body: Iterable[bytes] | None = None,
    ):
        self.destination = destination
        self.method = method
        self.body = body
        self.fields = fields

    def __deepcopy__(self, memo: dict[int, COSRequest] | None = None) -> COSRequest:
        if memo is None:
            memo = {}

        if id(self) in memo:
            return memo[id(self)]

        # the destination doesn't need to be copied because it's immutable
        # the body can't be copied because it may be an iterator
        new_instance = self.__class__(
            destination=self.destination,
            body=self.body,
            method=self.method,
            fields=deepcopy(self.fields, memo),
        )
        memo[id(self)] = new_instance
        return new_instance

    def __repr__(self) -> str:
        return (
            f"COSRequest(method={self.method!r}, "
            f"destination={self.destination.build()!r}, fields={self.fields!r})"
        )
