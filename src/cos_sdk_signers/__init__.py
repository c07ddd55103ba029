# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""COS SDK Signers provides stand-alone request signing for the COS object storage
API, for use with HTTP tools such as AioHTTP, Curl, Requests, urllib3, etc."""

from __future__ import annotations

from ._http import COSRequest, Field, Fields, URI
from ._identity import COSCredentialIdentity
from .canonical import CanonicalRequest, allow_list, canonicalize, cos_signable_header
from .exceptions import (
    AuthenticationFailed,
    BaseCOSSDKException,
    InvalidNameError,
    InvalidWindowError,
)
from .signers import COSSigner, COSSigningProperties, SignatureResult, derive_key
from .verifier import COSVerifier
from .window import SigningWindow

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "AuthenticationFailed",
    "BaseCOSSDKException",
    "COSCredentialIdentity",
    "COSRequest",
    "COSSigner",
    "COSSigningProperties",
    "COSVerifier",
    "CanonicalRequest",
    "Field",
    "Fields",
    "InvalidNameError",
    "InvalidWindowError",
    "SignatureResult",
    "SigningWindow",
    "allow_list",
    "canonicalize",
    "cos_signable_header",
    "derive_key",
)
