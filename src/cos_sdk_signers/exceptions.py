# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class BaseCOSSDKException(Exception):
    """Top-level exception to capture SDK-related errors."""


class InvalidWindowError(BaseCOSSDKException, ValueError):
    """A signing window is malformed, inverted or has non-positive bounds.

    The caller must generate a new window before signing again.
    """


class InvalidNameError(BaseCOSSDKException, ValueError):
    """A header or query parameter name cannot be canonicalized."""


class AuthenticationFailed(BaseCOSSDKException):
    """A request could not be authenticated.

    Raised for every verification failure, whether the signature is wrong, the
    window has expired or the authorization value is malformed.
    """


class COSIdentityError(BaseCOSSDKException):
    """Credentials could not be resolved."""
