# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Identity(Protocol):
    """An entity available to the client representing who the user is."""

    expiration: datetime | None = None
    """The expiration time of the identity, in UTC."""

    @property
    def is_expired(self) -> bool:
        """Whether the identity is expired."""
        if self.expiration is None:
            return False
        return datetime.now(tz=UTC) >= self.expiration


@runtime_checkable
class S3CredentialsIdentity(Identity, Protocol):
    """Credentials able to produce S3 Signature Version 2 signatures."""

    access_key_id: str
    """Identifier placed verbatim in the ``Authorization`` header."""

    secret_access_key: str
    """Secret used only as the HMAC-SHA1 key."""

    session_token: str | None = None
    """A temporary token sent as ``X-Amz-Security-Token`` and signed with the
    request."""

    def sign_bytes(self, content: bytes) -> bytes:
        """Return the raw HMAC-SHA1 digest of ``content`` keyed by the secret."""
        ...
