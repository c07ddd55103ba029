#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from typing import Protocol

from .._identity import COSCredentialIdentity


class CredentialsResolver(Protocol):
    """Used to load COS credentials from a given source."""

    def get_identity(self) -> COSCredentialIdentity:
        """Load credentials from a source.

        :raises COSIdentityError: The source holds no usable credentials.
        """
        ...
