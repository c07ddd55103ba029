# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Wire constants of the COS request signature."""

from typing import Final

LINE_SEPARATOR: Final = "\n"

Q_SIGN_ALGORITHM_KEY: Final = "q-sign-algorithm"
Q_SIGN_ALGORITHM_VALUE: Final = "sha1"
Q_AK: Final = "q-ak"
Q_SIGN_TIME: Final = "q-sign-time"
Q_KEY_TIME: Final = "q-key-time"
Q_HEADER_LIST: Final = "q-header-list"
Q_URL_PARAM_LIST: Final = "q-url-param-list"
Q_SIGNATURE: Final = "q-signature"

# Order is part of the wire contract.
AUTHORIZATION_FIELDS: Final = (
    Q_SIGN_ALGORITHM_KEY,
    Q_AK,
    Q_SIGN_TIME,
    Q_KEY_TIME,
    Q_HEADER_LIST,
    Q_URL_PARAM_LIST,
    Q_SIGNATURE,
)

AUTHORIZATION_HEADER: Final = "Authorization"
SECURITY_TOKEN_HEADER: Final = "x-cos-security-token"

NAME_LIST_SEPARATOR: Final = ";"
WINDOW_SEPARATOR: Final = ";"

DEFAULT_SIGN_EXPIRES: Final = 900

# Headers the COS service expects to be signed when present.
COS_SIGNED_HEADERS: Final = frozenset(
    (
        "cache-control",
        "content-disposition",
        "content-encoding",
        "content-length",
        "content-md5",
        "content-type",
        "date",
        "expires",
        "host",
        "origin",
        "range",
        "referer",
        "transfer-encoding",
    )
)
COS_SIGNED_HEADER_PREFIX: Final = "x-cos-"
