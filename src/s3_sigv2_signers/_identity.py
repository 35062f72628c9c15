# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import hmac
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import cached_property
from hashlib import sha1
from typing import Any

from .exceptions import MissingExpectedParameterException
from .interfaces.identity import S3CredentialsIdentity

_ACCESS_KEY_ID_KEYS = ("accesskeyid",)
_SECRET_ACCESS_KEY_KEYS = ("secretaccesskey",)
_SESSION_TOKEN_KEYS = ("token", "sessiontoken")
_EXPIRATION_KEYS = ("expiration",)


@dataclass(kw_only=True)
class S3CredentialIdentity(S3CredentialsIdentity):
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @classmethod
    def from_credentials_document(
        cls, document: Mapping[str, Any]
    ) -> S3CredentialIdentity:
        """Build an identity from a JSON credentials document.

        Accepts the shapes returned by STS and the container and instance metadata
        credential endpoints, e.g. ``{"AccessKeyId": ..., "SecretAccessKey": ...,
        "Token": ..., "Expiration": "2024-05-01T00:00:00Z"}``. Keys are matched
        case-insensitively.
        """
        normalized = {key.lower(): value for key, value in document.items()}
        access_key_id = _lookup(normalized, _ACCESS_KEY_ID_KEYS)
        secret_access_key = _lookup(normalized, _SECRET_ACCESS_KEY_KEYS)
        if not access_key_id or not secret_access_key:
            raise MissingExpectedParameterException(
                "Credentials document must contain both AccessKeyId and "
                "SecretAccessKey."
            )
        return cls(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=_lookup(normalized, _SESSION_TOKEN_KEYS) or None,
            expiration=_parse_expiration(_lookup(normalized, _EXPIRATION_KEYS)),
        )

    def sign_bytes(self, content: bytes) -> bytes:
        """Return the raw HMAC-SHA1 digest of ``content``.

        The keyed state is built once per identity and each call digests on a copy
        of it, so nothing carries over from one call to the next.
        """
        mac = self._hmac_sha1.copy()
        mac.update(content)
        return mac.digest()

    @cached_property
    def _hmac_sha1(self) -> hmac.HMAC:
        return hmac.new(self.secret_access_key.encode("utf-8"), digestmod=sha1)


def _lookup(document: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in document:
            return document[key]
    return None


def _parse_expiration(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    expiration = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if expiration.tzinfo is None:
        return expiration.replace(tzinfo=UTC)
    return expiration.astimezone(UTC)
