#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from .chain import ChainedCredentialsResolver
from .environment import EnvironmentCredentialsResolver
from .interfaces import CredentialsResolver
from .static import StaticCredentialsResolver

__all__ = (
    "ChainedCredentialsResolver",
    "CredentialsResolver",
    "EnvironmentCredentialsResolver",
    "StaticCredentialsResolver",
)
