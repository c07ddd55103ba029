# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Canonical form of a request, the text both the client and the service sign.

The canonical string is laid out as::

    <method>\\n
    <path>\\n
    <canonical query>\\n
    <canonical headers>\\n

where the query and header segments are ``name=value`` pairs joined by ``&``,
sorted by lowercased name. Alongside the string, the sorted lists of names that
went into it are returned so the service can rebuild the same text.
"""

from __future__ import annotations

import string
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TypeAlias
from urllib.parse import quote

from .constants import COS_SIGNED_HEADER_PREFIX, COS_SIGNED_HEADERS, LINE_SEPARATOR
from .exceptions import InvalidNameError

# RFC 9110 token characters, less "&" which separates canonical pairs.
HEADER_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%'*+-.^_`|~")

EntryFilter: TypeAlias = Callable[[str, str], bool]
"""Predicate receiving a lowercased name and its value."""

Entries: TypeAlias = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True, kw_only=True)
class CanonicalRequest:
    method: str
    """Lowercased HTTP method, as it appears in ``canonical_string``."""

    signed_headers: tuple[str, ...]
    """Sorted, lowercased header names included in ``canonical_string``."""

    signed_params: tuple[str, ...]
    """Sorted, lowercased, percent-encoded parameter names included in
    ``canonical_string``."""

    canonical_string: str


def sign_all(name: str, value: str) -> bool:
    return True


def allow_list(*names: str) -> EntryFilter:
    """Select only entries whose name is in ``names``, ignoring case."""
    allowed = frozenset(name.lower() for name in names)

    def _filter(name: str, value: str) -> bool:
        return name in allowed

    return _filter


def cos_signable_header(name: str, value: str) -> bool:
    """Select the headers the COS service itself expects to be signed."""
    return name in COS_SIGNED_HEADERS or name.startswith(COS_SIGNED_HEADER_PREFIX)


def encode(value: str) -> str:
    """Percent-encode everything but RFC 3986 unreserved characters.

    A space becomes ``%20``, never ``+``.
    """
    return quote(value, safe="")


def canonicalize(
    method: str,
    path: str | None,
    query_params: Entries,
    headers: Entries,
    header_filter: EntryFilter = sign_all,
    param_filter: EntryFilter = sign_all,
) -> CanonicalRequest:
    """Build the canonical form of a request.

    :param method: The HTTP method, lowercased in the output.
    :param path: The request path, used verbatim. Defaults to ``/``.
    :param query_params: Decoded query parameters. Repeated names are repeated
        entries.
    :param headers: Header names and values. Names differing only in case are
        merged, their values comma-joined in input order.
    :param header_filter: Selects the headers that take part in signing.
    :param param_filter: Selects the parameters that take part in signing.
    :raises InvalidNameError: A selected name is empty or not ASCII, or a
        selected header name is not an HTTP token.
    """
    canonical_headers = _canonical_headers(headers, header_filter)
    canonical_params = _canonical_params(query_params, param_filter)

    header_segment = "&".join(f"{name}={value}" for name, value in canonical_headers)
    param_segment = "&".join(f"{name}={value}" for name, value in canonical_params)
    canonical_string = (
        f"{method.lower()}{LINE_SEPARATOR}"
        f"{path or '/'}{LINE_SEPARATOR}"
        f"{param_segment}{LINE_SEPARATOR}"
        f"{header_segment}{LINE_SEPARATOR}"
    )
    return CanonicalRequest(
        method=method.lower(),
        signed_headers=tuple(name for name, _ in canonical_headers),
        signed_params=tuple(sorted({name for name, _ in canonical_params})),
        canonical_string=canonical_string,
    )


def _canonical_headers(
    headers: Entries, header_filter: EntryFilter
) -> list[tuple[str, str]]:
    merged: dict[str, list[str]] = {}
    for name, value in _entries(headers):
        lowered = name.lower()
        if not header_filter(lowered, value):
            continue
        _validate_name(name, kind="header")
        if not HEADER_NAME_CHARS.issuperset(name):
            raise InvalidNameError(f"Header name is not a token: {name!r}")
        merged.setdefault(lowered, []).append(value)
    return sorted((name, ",".join(values)) for name, values in merged.items())


def _canonical_params(
    query_params: Entries, param_filter: EntryFilter
) -> list[tuple[str, str]]:
    selected: list[tuple[str, str]] = []
    for name, value in _entries(query_params):
        lowered = name.lower()
        if not param_filter(lowered, value):
            continue
        _validate_name(name, kind="parameter")
        selected.append((encode(name).lower(), encode(value)))
    # key-value pairs must be in sorted order for their encoded forms.
    return sorted(selected)


def _entries(entries: Entries) -> Iterable[tuple[str, str]]:
    if isinstance(entries, Mapping):
        return entries.items()
    return entries


def _validate_name(name: str, *, kind: str) -> None:
    if not name:
        raise InvalidNameError(f"Empty {kind} name cannot be signed.")
    if not name.isascii():
        raise InvalidNameError(f"Non-ASCII {kind} name cannot be signed: {name!r}")
