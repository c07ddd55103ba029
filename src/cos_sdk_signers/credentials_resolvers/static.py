#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from .._identity import COSCredentialIdentity
from .interfaces import CredentialsResolver


class StaticCredentialsResolver(CredentialsResolver):
    """Resolve static COS credentials."""

    def __init__(self, *, credentials: COSCredentialIdentity) -> None:
        self._credentials = credentials

    def get_identity(self) -> COSCredentialIdentity:
        return self._credentials
