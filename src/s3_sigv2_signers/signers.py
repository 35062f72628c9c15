# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import logging
import warnings
from base64 import b64encode
from email.utils import format_datetime
from enum import Enum
from typing import Final, TypedDict

from ._http import AWSRequest, Field
from .exceptions import InvalidSigningPropertyException, SigV2SignerWarning
from .interfaces.http import Field as _Field
from .interfaces.identity import S3CredentialsIdentity

logger: Final = logging.getLogger(__name__)

# Checked against the raw query string in this order.
S3_SUBRESOURCES: tuple[str, ...] = (
    "acl",
    "lifecycle",
    "location",
    "logging",
    "notification",
    "partNumber",
    "policy",
    "requestPayment",
    "torrent",
    "uploadId",
    "uploads",
    "versionId",
    "versioning",
    "versions",
    "website",
)
AMZ_HEADER_PREFIX: str = "x-amz"
AUTHORIZATION_PREFIX: str = "AWS:"
SECURITY_TOKEN_HEADER: str = "X-Amz-Security-Token"


class SignatureEncoding(Enum):
    """How the HMAC digest is written into the ``Authorization`` header."""

    BASE64 = "base64"
    """Base64 encoded digest, as documented for S3 REST authentication."""

    RAW = "raw"
    """Digest bytes written as-is, one header character per byte.

    Only for byte-for-byte compatibility with deployments that expect the legacy
    unencoded form. S3 itself rejects these signatures.
    """


class SigV2SigningProperties(TypedDict, total=False):
    date: str
    signature_encoding: SignatureEncoding


class SigV2Signer:
    """Request signer for applying the AWS S3 Signature Version 2 algorithm.

    Unlike the newer signers, the request passed in is modified in place: the
    ``Date``, ``X-Amz-Security-Token`` and ``Authorization`` fields are written
    to it and an empty path is replaced with ``/``. A single request must not be
    signed from several threads at once.
    """

    def sign(
        self,
        *,
        request: AWSRequest,
        identity: S3CredentialsIdentity,
        properties: SigV2SigningProperties | None = None,
    ) -> AWSRequest:
        """Generate and apply a SigV2 signature to the supplied request.

        :param request: An AWSRequest to sign prior to sending to the service.
        :param identity: The credentials to sign with.
        :param properties: Optional SigV2SigningProperties to fix the date or
            choose the signature encoding.
        :returns: The same request, with an ``Authorization`` field of the form
            ``AWS:<access_key_id>:<signature>``.
        """
        properties = properties or SigV2SigningProperties()
        self._validate_identity(identity=identity)
        signature_encoding = self._resolve_signature_encoding(properties=properties)

        signature = self._signature(
            request=request, identity=identity, properties=properties
        )
        authorization = self.generate_authorization_field(
            access_key_id=identity.access_key_id,
            signature=signature,
            signature_encoding=signature_encoding,
        )
        request.fields.set_field(authorization)
        return request

    def signature(
        self,
        *,
        request: AWSRequest,
        identity: S3CredentialsIdentity,
        properties: SigV2SigningProperties | None = None,
    ) -> bytes:
        """Prepare the request and return the raw signature bytes.

        The request is prepared exactly as in :meth:`sign`, but no
        ``Authorization`` field is attached. Useful for building a custom
        authentication scheme around the signature.
        """
        properties = properties or SigV2SigningProperties()
        self._validate_identity(identity=identity)
        return self._signature(
            request=request, identity=identity, properties=properties
        )

    def sign_bytes(self, *, identity: S3CredentialsIdentity, content: bytes) -> bytes:
        """HMAC-SHA1 sign arbitrary bytes with the identity's secret key."""
        return identity.sign_bytes(content)

    def generate_authorization_field(
        self,
        *,
        access_key_id: str,
        signature: bytes,
        signature_encoding: SignatureEncoding = SignatureEncoding.BASE64,
    ) -> Field:
        """Generate the ``Authorization`` field.

        :param access_key_id: Placed verbatim in the header.
        :param signature: Raw HMAC-SHA1 digest of the string to sign.
        :param signature_encoding: How the digest is written into the header.
        """
        if signature_encoding is SignatureEncoding.RAW:
            warnings.warn(
                "Writing the raw signature digest into the Authorization header. "
                "S3 only accepts base64 encoded signatures.",
                SigV2SignerWarning,
            )
            encoded_signature = signature.decode("latin-1")
        else:
            encoded_signature = b64encode(signature).decode("ascii")
        auth_str = f"{AUTHORIZATION_PREFIX}{access_key_id}:{encoded_signature}"
        return Field(name="Authorization", values=[auth_str])

    def prepare_request(
        self,
        *,
        request: AWSRequest,
        properties: SigV2SigningProperties,
        session_token: str | None = None,
    ) -> None:
        """Put the request into a signable state.

        ``Date`` is always overwritten, with the ``date`` property if given and
        the current time otherwise. A non-empty ``session_token`` is set as
        ``X-Amz-Security-Token`` and an empty path becomes ``/``.
        """
        date = properties.get("date")
        if date is None:
            date = format_datetime(datetime.datetime.now(datetime.UTC))
        request.fields.set_field(Field(name="Date", values=[date]))

        if session_token:
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_HEADER, values=[session_token])
            )

        if not request.destination.path:
            request.destination = request.destination.with_path("/")

    def string_to_sign(self, *, request: AWSRequest) -> str:
        """The exact string that is HMAC-SHA1 signed.

        S3 defines the string to sign as:
            <HTTP-Verb>\n
            <Content-MD5>\n
            <Content-Type>\n
            <Date>\n
            <CanonicalizedAmzHeaders><CanonicalizedResource>

        The request should already have been through :meth:`prepare_request`.
        """
        fields = request.fields
        return (
            f"{request.method}\n"
            f"{_field_value(fields.get('Content-MD5'))}\n"
            f"{_field_value(fields.get('Content-Type'))}\n"
            f"{_field_value(fields.get('Date'))}\n"
            f"{self.canonical_amz_headers(request=request)}"
            f"{self.canonical_resource(request=request)}"
        )

    def canonical_amz_headers(self, *, request: AWSRequest) -> str:
        """Sorted ``x-amz`` fields, one ``name:value\\n`` line each.

        Names are trimmed and lowercased, newlines inside values are folded into
        a single space. Returns the empty string if there are no such fields.
        """
        amz_fields: dict[str, str] = {}
        for field in request.fields:
            name = field.name.strip().lower()
            if name.startswith(AMZ_HEADER_PREFIX):
                amz_fields[name] = _field_value(field).replace("\n", " ")
        return "".join(f"{name}:{value}\n" for name, value in sorted(amz_fields.items()))

    def canonical_resource(self, *, request: AWSRequest) -> str:
        """The bucket, path and subresource the request addresses.

        A host with exactly three dots, such as ``bucket.s3.amazonaws.com``, is
        treated as virtual-hosted-style and contributes ``/bucket``. The path and
        query are used without any decoding.
        """
        destination = request.destination
        resource = ""
        if destination.host.count(".") == 3:
            resource += "/" + destination.host.split(".")[0]
        resource += destination.path or ""

        query = destination.query or ""
        for subresource in S3_SUBRESOURCES:
            if query.startswith(subresource):
                resource += f"?{subresource}"

        logger.debug("Canonical resource: %s", resource)
        return resource

    def _signature(
        self,
        *,
        request: AWSRequest,
        identity: S3CredentialsIdentity,
        properties: SigV2SigningProperties,
    ) -> bytes:
        self.prepare_request(
            request=request,
            properties=properties,
            session_token=identity.session_token,
        )
        string_to_sign = self.string_to_sign(request=request)
        logger.debug("String to sign: %r", _redact_security_token(string_to_sign))
        return self.sign_bytes(identity=identity, content=string_to_sign.encode())

    def _validate_identity(self, *, identity: S3CredentialsIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, S3CredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"S3CredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _resolve_signature_encoding(
        self, *, properties: SigV2SigningProperties
    ) -> SignatureEncoding:
        value = properties.get("signature_encoding", SignatureEncoding.BASE64)
        try:
            return SignatureEncoding(value)
        except ValueError:
            raise InvalidSigningPropertyException(
                f"Unsupported signature_encoding: {value!r}. Expected one of "
                f"{', '.join(repr(e.value) for e in SignatureEncoding)}."
            ) from None


def _field_value(field: _Field | None) -> str:
    # Only the first value of a repeated field is signed.
    if field is None or not field.values:
        return ""
    return field.values[0]


def _redact_security_token(string_to_sign: str) -> str:
    token_prefix = f"{SECURITY_TOKEN_HEADER.lower()}:"
    return "\n".join(
        f"{token_prefix}<redacted>" if line.startswith(token_prefix) else line
        for line in string_to_sign.split("\n")
    )
