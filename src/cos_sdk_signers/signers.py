# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import hmac
import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from hashlib import sha1
from typing import Final, Self, TypedDict
from urllib.parse import urlencode

from ._http import COSRequest, Field, URI
from ._identity import COSCredentialIdentity
from .canonical import CanonicalRequest, EntryFilter, canonicalize, sign_all
from .constants import (
    AUTHORIZATION_FIELDS,
    AUTHORIZATION_HEADER,
    DEFAULT_SIGN_EXPIRES,
    NAME_LIST_SEPARATOR,
    Q_AK,
    Q_HEADER_LIST,
    Q_KEY_TIME,
    Q_SIGN_ALGORITHM_KEY,
    Q_SIGN_ALGORITHM_VALUE,
    Q_SIGN_TIME,
    Q_SIGNATURE,
    Q_URL_PARAM_LIST,
    SECURITY_TOKEN_HEADER,
)
from .exceptions import InvalidWindowError
from .interfaces.identity import COSCredentialsIdentity as _COSCredentialsIdentity
from .window import SigningWindow

logger: Final = logging.getLogger(__name__)


class COSSigningProperties(TypedDict, total=False):
    sign_time: str | SigningWindow
    """Window to sign with. A fresh window is generated when absent."""

    expires_in: int
    """Lifetime in seconds of a generated window."""

    header_filter: EntryFilter
    param_filter: EntryFilter


@dataclass(frozen=True, kw_only=True)
class SignatureResult:
    """The fields of a COS authorization value."""

    access_key_id: str
    sign_time: str
    key_time: str
    signed_headers: tuple[str, ...]
    signed_params: tuple[str, ...]
    signature: str
    algorithm: str = Q_SIGN_ALGORITHM_VALUE

    @property
    def header_list(self) -> str:
        return NAME_LIST_SEPARATOR.join(self.signed_headers)

    @property
    def param_list(self) -> str:
        return NAME_LIST_SEPARATOR.join(self.signed_params)

    def as_fields(self) -> dict[str, str]:
        """The authorization fields keyed by wire name, in wire order."""
        return {
            Q_SIGN_ALGORITHM_KEY: self.algorithm,
            Q_AK: self.access_key_id,
            Q_SIGN_TIME: self.sign_time,
            Q_KEY_TIME: self.key_time,
            Q_HEADER_LIST: self.header_list,
            Q_URL_PARAM_LIST: self.param_list,
            Q_SIGNATURE: self.signature,
        }

    def to_authorization(self) -> str:
        """Render the single-string ``Authorization`` value."""
        return "&".join(f"{key}={value}" for key, value in self.as_fields().items())

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> Self:
        """Build a result from wire fields.

        :raises ValueError: A field is missing.
        """
        missing = [key for key in AUTHORIZATION_FIELDS if key not in fields]
        if missing:
            raise ValueError(f"Authorization is missing fields: {', '.join(missing)}")
        return cls(
            algorithm=fields[Q_SIGN_ALGORITHM_KEY],
            access_key_id=fields[Q_AK],
            sign_time=fields[Q_SIGN_TIME],
            key_time=fields[Q_KEY_TIME],
            signed_headers=_split_names(fields[Q_HEADER_LIST]),
            signed_params=_split_names(fields[Q_URL_PARAM_LIST]),
            signature=fields[Q_SIGNATURE],
        )

    @classmethod
    def from_authorization(cls, value: str) -> Self:
        """Parse a rendered ``Authorization`` value.

        :raises ValueError: The value is malformed or a field is missing.
        """
        fields: dict[str, str] = {}
        for pair in value.split("&"):
            key, sep, field_value = pair.partition("=")
            if not sep:
                raise ValueError(f"Malformed authorization pair: {pair!r}")
            if key in fields:
                raise ValueError(f"Authorization field {key!r} appears more than once")
            fields[key] = field_value
        return cls.from_fields(fields)

    def __str__(self) -> str:
        return self.to_authorization()


def derive_key(secret_key: str, window: SigningWindow) -> str:
    """Derive the signing key bound to ``window``.

    The key is ``HMAC-SHA1(secret_key, "<start>;<end>")`` rendered as lowercase
    hex. It is only ever used as the key of the final signature.

    :raises InvalidWindowError: The window is malformed.
    """
    window.validate()
    return _hmac_sha1_hex(secret_key, str(window))


def compute_signature(signing_key: str, canonical_string: str) -> str:
    return _hmac_sha1_hex(signing_key, canonical_string)


def _hmac_sha1_hex(key: str, value: str) -> str:
    return hmac.new(key=key.encode(), msg=value.encode(), digestmod=sha1).hexdigest()


def _split_names(value: str) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(value.split(NAME_LIST_SEPARATOR))


def resolve_window(properties: COSSigningProperties) -> SigningWindow:
    """Get the window named by ``properties`` or open a new one."""
    sign_time = properties.get("sign_time")
    if sign_time is None:
        return SigningWindow.from_now(
            properties.get("expires_in", DEFAULT_SIGN_EXPIRES)
        )
    if isinstance(sign_time, SigningWindow):
        sign_time.validate()
        return sign_time
    if isinstance(sign_time, str):
        return SigningWindow.parse(sign_time)
    raise InvalidWindowError(f"Unsupported sign_time value: {sign_time!r}")


class COSSigner:
    """Request signer for the COS ``q-sign-algorithm=sha1`` authorization scheme.

    The signer holds no state and may be shared between threads.
    """

    def sign(
        self,
        *,
        properties: COSSigningProperties,
        request: COSRequest,
        identity: COSCredentialIdentity,
    ) -> COSRequest:
        """Generate and apply a signature to a copy of the supplied request.

        Missing ``Host`` and ``x-cos-security-token`` fields are added to the copy
        before signing, and the result is set as its ``Authorization`` field.

        :param properties: COSSigningProperties selecting the window and the
            headers and parameters to sign.
        :param request: A COSRequest to sign prior to sending to the service.
        :param identity: The credentials to sign with.
        """
        self._validate_identity(identity=identity)
        window = resolve_window(properties)

        new_request = self._generate_new_request(request=request)
        self._apply_required_fields(request=new_request, identity=identity)

        result = self.generate_signature(
            identity=identity,
            request=new_request,
            window=window,
            header_filter=properties.get("header_filter"),
            param_filter=properties.get("param_filter"),
        )
        new_request.fields.set_field(
            Field(name=AUTHORIZATION_HEADER, values=[result.to_authorization()])
        )
        return new_request

    def presign(
        self,
        *,
        properties: COSSigningProperties,
        request: COSRequest,
        identity: COSCredentialIdentity,
    ) -> URI:
        """Generate a URI carrying the signature in its query string.

        The signature fields are appended after the signed query. A session token
        is passed as the ``x-cos-security-token`` parameter.
        """
        self._validate_identity(identity=identity)
        window = resolve_window(properties)

        new_request = self._generate_new_request(request=request)
        # The token travels in the query, outside the signed headers.
        self._apply_required_fields(request=new_request, identity=None)

        result = self.generate_signature(
            identity=identity,
            request=new_request,
            window=window,
            header_filter=properties.get("header_filter"),
            param_filter=properties.get("param_filter"),
        )
        extra = result.as_fields()
        if identity.session_token is not None:
            extra[SECURITY_TOKEN_HEADER] = identity.session_token
        encoded = urlencode(extra, safe=";")
        query = request.destination.query
        return replace(
            request.destination, query=f"{query}&{encoded}" if query else encoded
        )

    def generate_signature(
        self,
        *,
        identity: COSCredentialIdentity,
        request: COSRequest,
        window: SigningWindow | None = None,
        header_filter: EntryFilter | None = None,
        param_filter: EntryFilter | None = None,
    ) -> SignatureResult:
        """Compute the signature of a request without modifying it.

        :param identity: The credentials to sign with.
        :param request: The request to sign.
        :param window: The signing window. A window of ``DEFAULT_SIGN_EXPIRES``
            seconds starting now is used when absent.
        :param header_filter: Selects the headers to sign, all by default.
        :param param_filter: Selects the query parameters to sign, all by default.
        """
        self._validate_identity(identity=identity)
        if window is None:
            window = SigningWindow.from_now()
        # Validate up front so invalid input does no partial work.
        window.validate()

        canonical_request = self.canonical_request(
            request=request, header_filter=header_filter, param_filter=param_filter
        )
        signing_key = derive_key(identity.secret_key, window)
        signature = compute_signature(signing_key, canonical_request.canonical_string)
        logger.debug(
            "Signed request for %s with window %s, headers [%s], params [%s].",
            identity.access_key_id,
            window,
            ";".join(canonical_request.signed_headers),
            ";".join(canonical_request.signed_params),
        )

        window_str = str(window)
        return SignatureResult(
            access_key_id=identity.access_key_id,
            sign_time=window_str,
            key_time=window_str,
            signed_headers=canonical_request.signed_headers,
            signed_params=canonical_request.signed_params,
            signature=signature,
        )

    def canonical_request(
        self,
        *,
        request: COSRequest,
        header_filter: EntryFilter | None = None,
        param_filter: EntryFilter | None = None,
    ) -> CanonicalRequest:
        """The canonical request is the text that is signed. This is useful to
        compare against the service's canonical string when a signature is
        rejected.
        """
        canonical_request = canonicalize(
            request.method,
            request.destination.path,
            request.destination.query_params,
            request.fields.items(),
            header_filter=header_filter or sign_all,
            param_filter=param_filter or sign_all,
        )
        logger.debug("Canonical request: %r", canonical_request.canonical_string)
        return canonical_request

    def _validate_identity(self, *, identity: COSCredentialIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, _COSCredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"COSCredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _generate_new_request(self, *, request: COSRequest) -> COSRequest:
        new_request = deepcopy(request)
        # A previous signature is replaced, never signed.
        if AUTHORIZATION_HEADER in new_request.fields:
            del new_request.fields[AUTHORIZATION_HEADER]
        return new_request

    def _apply_required_fields(
        self, *, request: COSRequest, identity: COSCredentialIdentity | None
    ) -> None:
        if "Host" not in request.fields:
            host = request.destination.without_default_port().netloc
            request.fields.set_field(Field(name="Host", values=[host]))
        if (
            identity is not None
            and identity.session_token is not None
            and SECURITY_TOKEN_HEADER not in request.fields
        ):
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_HEADER, values=[identity.session_token])
            )
