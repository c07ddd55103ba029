# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Service-side check of COS request signatures.

Used by tests and by mock services that need to authenticate requests produced
by :py:class:`~cos_sdk_signers.signers.COSSigner`.
"""

import hmac
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Final, NoReturn

from ._http import COSRequest
from .canonical import canonicalize, encode
from .constants import (
    AUTHORIZATION_HEADER,
    Q_SIGN_ALGORITHM_KEY,
    Q_SIGN_ALGORITHM_VALUE,
)
from .exceptions import AuthenticationFailed, InvalidNameError
from .signers import SignatureResult, compute_signature, derive_key
from .window import SigningWindow

logger: Final = logging.getLogger(__name__)

_REJECTED: Final = "Request signature could not be verified."


class COSVerifier:
    def __init__(
        self, secret_key_for: Callable[[str], str | None], *, clock_skew: int = 0
    ) -> None:
        """Construct a COSVerifier.

        :param secret_key_for: Returns the secret key of an access key id, or
            ``None`` when the id is unknown.
        :param clock_skew: Seconds of tolerance applied to both ends of a window.
        """
        self._secret_key_for = secret_key_for
        self._clock_skew = clock_skew

    def verify(
        self,
        *,
        request: COSRequest,
        authorization: str | SignatureResult | None = None,
    ) -> SignatureResult:
        """Authenticate ``request`` against its claimed signature.

        The names in the claimed header and parameter lists are re-sorted before
        the canonical request is rebuilt, so only the set of names is significant.

        :param request: The request as received.
        :param authorization: The claimed authorization. Taken from the request's
            ``Authorization`` field, or from its query string for pre-signed URLs,
            when absent.
        :raises AuthenticationFailed: For any reason the request is not accepted.
        """
        claimed = self._claimed(request=request, authorization=authorization)

        if claimed.algorithm != Q_SIGN_ALGORITHM_VALUE:
            self._reject("unsupported algorithm %r", claimed.algorithm)
        if claimed.sign_time != claimed.key_time:
            self._reject(
                "sign time %s differs from key time %s",
                claimed.sign_time,
                claimed.key_time,
            )
        try:
            window = SigningWindow.parse(claimed.key_time)
        except ValueError as e:
            self._reject("invalid window: %s", e, cause=e)

        now = int(datetime.now(UTC).timestamp())
        if not window.contains(now, skew=self._clock_skew):
            self._reject("time %d is outside window %s", now, window)

        secret_key = self._secret_key_for(claimed.access_key_id)
        if secret_key is None:
            self._reject("unknown access key id %s", claimed.access_key_id)

        header_names = frozenset(claimed.signed_headers)
        param_names = frozenset(claimed.signed_params)
        try:
            canonical_request = canonicalize(
                request.method,
                request.destination.path,
                request.destination.query_params,
                request.fields.items(),
                header_filter=lambda name, value: name in header_names,
                param_filter=lambda name, value: (
                    encode(name).lower() in param_names
                ),
            )
        except InvalidNameError as e:
            self._reject("request cannot be canonicalized: %s", e, cause=e)

        if set(canonical_request.signed_headers) != header_names:
            self._reject("signed headers missing from request")
        if set(canonical_request.signed_params) != param_names:
            self._reject("signed parameters missing from request")

        expected = compute_signature(
            derive_key(secret_key, window), canonical_request.canonical_string
        )
        if not hmac.compare_digest(expected.encode(), claimed.signature.encode()):
            self._reject("signature mismatch")
        return claimed

    def _claimed(
        self, *, request: COSRequest, authorization: str | SignatureResult | None
    ) -> SignatureResult:
        if isinstance(authorization, SignatureResult):
            return authorization
        try:
            if authorization is not None:
                return SignatureResult.from_authorization(authorization)
            if AUTHORIZATION_HEADER in request.fields:
                return SignatureResult.from_authorization(
                    request.fields[AUTHORIZATION_HEADER].as_string()
                )
            query = dict(request.destination.query_params)
            if Q_SIGN_ALGORITHM_KEY in query:
                return SignatureResult.from_fields(query)
        except ValueError as e:
            self._reject("malformed authorization: %s", e, cause=e)
        self._reject("no authorization present")

    def _reject(
        self, reason: str, *args: object, cause: Exception | None = None
    ) -> NoReturn:
        logger.debug("Rejecting request: " + reason, *args)
        raise AuthenticationFailed(_REJECTED) from cause
