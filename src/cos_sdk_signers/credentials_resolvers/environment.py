#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import os

from .._identity import COSCredentialIdentity
from ..exceptions import COSIdentityError
from .interfaces import CredentialsResolver

SECRET_ID_ENV_VAR = "COS_SECRET_ID"
SECRET_KEY_ENV_VAR = "COS_SECRET_KEY"
SESSION_TOKEN_ENV_VAR = "COS_SESSION_TOKEN"


class EnvironmentCredentialsResolver(CredentialsResolver):
    """Resolves COS credentials from system environment variables."""

    def __init__(self) -> None:
        self._credentials: COSCredentialIdentity | None = None

    def get_identity(self) -> COSCredentialIdentity:
        if self._credentials is not None:
            return self._credentials

        access_key_id = os.getenv(SECRET_ID_ENV_VAR)
        secret_key = os.getenv(SECRET_KEY_ENV_VAR)
        session_token = os.getenv(SESSION_TOKEN_ENV_VAR)

        if not access_key_id or not secret_key:
            raise COSIdentityError(
                f"{SECRET_ID_ENV_VAR} and {SECRET_KEY_ENV_VAR} are required"
            )

        self._credentials = COSCredentialIdentity(
            access_key_id=access_key_id,
            secret_key=secret_key,
            session_token=session_token or None,
        )
        return self._credentials
