# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest
from cos_sdk_signers import InvalidNameError, allow_list, canonicalize
from cos_sdk_signers.canonical import (
    EntryFilter,
    cos_signable_header,
    encode,
    sign_all,
)

HEADERS = {
    "Host": "example.com",
    "Content-Type": "text/plain",
    "User-Agent": "cos-python",
    "x-cos-meta-Tag": "Hello World",
}
PARAMS = [("versionId", "v1"), ("prefix", "photos/2020 summer"), ("acl", "")]


def test_canonical_string_layout() -> None:
    canonical = canonicalize("PUT", "/bucket/object", PARAMS, HEADERS)
    assert canonical.canonical_string == (
        "put\n"
        "/bucket/object\n"
        "acl=&prefix=photos%2F2020%20summer&versionid=v1\n"
        "content-type=text/plain&host=example.com"
        "&user-agent=cos-python&x-cos-meta-tag=Hello World\n"
    )
    assert canonical.method == "put"


def test_missing_path_defaults_to_root() -> None:
    canonical = canonicalize("GET", None, {}, {})
    assert canonical.canonical_string == "get\n/\n\n\n"
    assert canonical.signed_headers == ()
    assert canonical.signed_params == ()


@pytest.mark.parametrize(
    "header_filter,param_filter,headers,params",
    [
        (
            sign_all,
            sign_all,
            ("content-type", "host", "user-agent", "x-cos-meta-tag"),
            ("acl", "prefix", "versionid"),
        ),
        (
            allow_list("Host", "content-type"),
            allow_list("ACL"),
            ("content-type", "host"),
            ("acl",),
        ),
        (
            cos_signable_header,
            allow_list(),
            ("content-type", "host", "x-cos-meta-tag"),
            (),
        ),
        (allow_list(), allow_list(), (), ()),
    ],
)
def test_manifest_matches_selection(
    header_filter: EntryFilter,
    param_filter: EntryFilter,
    headers: tuple[str, ...],
    params: tuple[str, ...],
) -> None:
    canonical = canonicalize(
        "GET",
        "/",
        PARAMS,
        HEADERS,
        header_filter=header_filter,
        param_filter=param_filter,
    )
    assert canonical.signed_headers == headers
    assert canonical.signed_params == params
    query, header_segment = canonical.canonical_string.split("\n")[2:4]
    assert [pair.split("=")[0] for pair in header_segment.split("&") if pair] == list(
        headers
    )
    assert [pair.split("=")[0] for pair in query.split("&") if pair] == list(params)


def test_header_names_are_case_insensitive() -> None:
    upper = canonicalize("GET", "/", {}, {"Host": "x"})
    lower = canonicalize("GET", "/", {}, {"host": "x"})
    assert upper == lower


def test_headers_differing_in_case_are_merged() -> None:
    canonical = canonicalize("GET", "/", {}, [("X-Cos-Tag", "a"), ("x-cos-tag", "b")])
    assert canonical.signed_headers == ("x-cos-tag",)
    assert canonical.canonical_string.endswith("\nx-cos-tag=a,b\n")


def test_header_values_are_not_encoded() -> None:
    canonical = canonicalize("GET", "/", {}, {"Content-Disposition": "a b/c&d=e"})
    assert canonical.canonical_string.endswith("\ncontent-disposition=a b/c&d=e\n")


def test_empty_values_are_included() -> None:
    canonical = canonicalize("GET", "/", {"uploads": ""}, {"x-cos-meta-empty": ""})
    assert canonical.signed_headers == ("x-cos-meta-empty",)
    assert canonical.signed_params == ("uploads",)
    assert canonical.canonical_string == "get\n/\nuploads=\nx-cos-meta-empty=\n"


def test_repeated_params_are_sorted_by_value() -> None:
    canonical = canonicalize("GET", "/", [("tag", "b"), ("Tag", "a")], {})
    assert canonical.signed_params == ("tag",)
    assert canonical.canonical_string == "get\n/\ntag=a&tag=b\n\n"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("a b", "a%20b"),
        ("a+b", "a%2Bb"),
        ("photos/2020", "photos%2F2020"),
        ("-_.~", "-_.~"),
        ("图片", "%E5%9B%BE%E7%89%87"),
    ],
)
def test_encode(value: str, expected: str) -> None:
    assert encode(value) == expected


@pytest.mark.parametrize(
    "headers,params",
    [
        ({"": "value"}, {}),
        ({"x-cos-météo": "sunny"}, {}),
        ({"x-cos-a;b": "value"}, {}),
        ({"x-cos-a=b&x-cos-c": "d"}, {}),
        ({"x-cos a": "value"}, {}),
        ({"x-cos-a\t": "value"}, {}),
        ({"x-cos-a\x00": "value"}, {}),
        ({}, {"": "value"}),
        ({}, {"préfixe": "value"}),
    ],
)
def test_invalid_names(headers: dict[str, str], params: dict[str, str]) -> None:
    with pytest.raises(InvalidNameError):
        canonicalize("GET", "/", params, headers)


def test_unselected_names_are_not_validated() -> None:
    canonical = canonicalize(
        "GET",
        "/",
        {},
        {"Host": "x", "x-météo": "sunny"},
        header_filter=allow_list("host"),
    )
    assert canonical.signed_headers == ("host",)


def test_non_ascii_values_are_allowed() -> None:
    canonical = canonicalize("GET", "/", {"prefix": "图片"}, {"x-cos-meta-name": "图片"})
    assert canonical.canonical_string == (
        "get\n/\nprefix=%E5%9B%BE%E7%89%87\nx-cos-meta-name=图片\n"
    )


@pytest.mark.parametrize(
    "name,expected",
    [("a/b", "a%2fb"), ("A B", "a%20b"), ("Prefix", "prefix")],
)
def test_param_names_are_lowercased_after_encoding(
    name: str, expected: str
) -> None:
    canonical = canonicalize("GET", "/", [(name, "1")], {})
    assert canonical.signed_params == (expected,)
    assert canonical.canonical_string == f"get\n/\n{expected}=1\n\n"


def test_token_header_names_are_allowed() -> None:
    canonical = canonicalize("GET", "/", {}, {"X-Cos-Meta_Tag.1": "v"})
    assert canonical.signed_headers == ("x-cos-meta_tag.1",)
