# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""S3 SigV2 Signers provides stand-alone AWS S3 Signature Version 2 signing for
S3-compatible object stores that don't support newer signature schemes."""

from __future__ import annotations

from ._http import AWSRequest, Field, Fields, URI
from ._identity import S3CredentialIdentity
from .signers import (
    SignatureEncoding,
    SigV2Signer,
    SigV2SigningProperties,
)

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "AWSRequest",
    "Field",
    "Fields",
    "S3CredentialIdentity",
    "SigV2Signer",
    "SigV2SigningProperties",
    "SignatureEncoding",
)
