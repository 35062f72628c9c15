# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class SigV2SignerWarning(UserWarning): ...


class BaseSigV2SignerException(Exception):
    """Top-level exception to capture signer-related errors."""


class MissingExpectedParameterException(BaseSigV2SignerException, ValueError):
    """A credentials source is missing a value required for signing."""


class InvalidSigningPropertyException(BaseSigV2SignerException, ValueError):
    """A signing property was given a value the signer doesn't support."""
