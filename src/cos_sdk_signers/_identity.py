# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from datetime import datetime

from .interfaces.identity import COSCredentialsIdentity


@dataclass(kw_only=True, frozen=True)
class COSCredentialIdentity(COSCredentialsIdentity):
    access_key_id: str
    secret_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None
