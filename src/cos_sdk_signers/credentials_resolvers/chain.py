#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import Sequence
from typing import Final

from .._identity import COSCredentialIdentity
from ..exceptions import COSIdentityError
from .interfaces import CredentialsResolver

logger: Final = logging.getLogger(__name__)


class ChainedCredentialsResolver(CredentialsResolver):
    """Attempts to resolve credentials by checking a sequence of sub-resolvers.

    If a nested resolver raises a :py:class:`COSIdentityError`, the next resolver
    in the chain will be attempted. The first credentials found are cached until
    they expire.
    """

    def __init__(self, resolvers: Sequence[CredentialsResolver]) -> None:
        """Construct a ChainedCredentialsResolver.

        :param resolvers: The sequence of resolvers to resolve credentials from.
        """
        self._resolvers = resolvers
        self._cached: COSCredentialIdentity | None = None

    def get_identity(self) -> COSCredentialIdentity:
        if self._cached is None or self._cached.is_expired:
            self._cached = self._resolve()
        return self._cached

    def _resolve(self) -> COSCredentialIdentity:
        logger.debug("Attempting to resolve credentials from resolver chain.")
        for resolver in self._resolvers:
            try:
                logger.debug(
                    "Attempting to resolve credentials from %s.", type(resolver)
                )
                return resolver.get_identity()
            except COSIdentityError as e:
                logger.debug(
                    "Failed to resolve credentials from %s: %s", type(resolver), e
                )

        raise COSIdentityError("Failed to resolve credentials from resolver chain.")
