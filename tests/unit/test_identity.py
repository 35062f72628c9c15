import hmac
from datetime import UTC, datetime, timedelta, timezone
from hashlib import sha1

import pytest
from s3_sigv2_signers import S3CredentialIdentity
from s3_sigv2_signers.exceptions import MissingExpectedParameterException


@pytest.mark.parametrize(
    "access_key_id,secret_access_key,session_token,expiration",
    [
        (
            "AKID1234EXAMPLE",
            "SECRET1234",
            None,
            None,
        ),
        (
            "AKID1234EXAMPLE",
            "SECRET1234",
            "SESS_TOKEN_1234",
            None,
        ),
        (
            "AKID1234EXAMPLE",
            "SECRET1234",
            "SESS_TOKEN_1234",
            datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC),
        ),
    ],
)
def test_s3_credential_identity(
    access_key_id: str,
    secret_access_key: str,
    session_token: str | None,
    expiration: datetime | None,
) -> None:
    creds = S3CredentialIdentity(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
        expiration=expiration,
    )
    assert creds.access_key_id == access_key_id
    assert creds.secret_access_key == secret_access_key
    assert creds.session_token == session_token
    assert creds.expiration == expiration


@pytest.mark.parametrize(
    "expiration,is_expired",
    [
        (None, False),
        (datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC), True),
        (datetime.now(UTC) + timedelta(hours=1), False),
    ],
)
def test_s3_credential_identity_expired(
    expiration: datetime | None, is_expired: bool
) -> None:
    creds = S3CredentialIdentity(
        access_key_id="AKID1234EXAMPLE",
        secret_access_key="SECRET1234",
        expiration=expiration,
    )
    assert creds.is_expired is is_expired


def test_repr_hides_secrets() -> None:
    creds = S3CredentialIdentity(
        access_key_id="AKID1234EXAMPLE",
        secret_access_key="SECRET1234",
        session_token="SESS_TOKEN_1234",
    )
    assert "AKID1234EXAMPLE" in repr(creds)
    assert "SECRET1234" not in repr(creds)
    assert "SESS_TOKEN_1234" not in repr(creds)


class TestSignBytes:
    def test_matches_hmac_sha1(self) -> None:
        creds = S3CredentialIdentity(
            access_key_id="AKID1234EXAMPLE", secret_access_key="SECRET1234"
        )
        expected = hmac.new(b"SECRET1234", b"some content", sha1).digest()
        assert creds.sign_bytes(b"some content") == expected
        assert len(expected) == 20

    def test_no_state_carries_over_between_calls(self) -> None:
        creds = S3CredentialIdentity(
            access_key_id="AKID1234EXAMPLE", secret_access_key="SECRET1234"
        )
        first = creds.sign_bytes(b"first")
        creds.sign_bytes(b"second")
        assert creds.sign_bytes(b"first") == first
        assert first == hmac.new(b"SECRET1234", b"first", sha1).digest()

    def test_keyed_state_is_per_identity(self) -> None:
        one = S3CredentialIdentity(access_key_id="AKID1", secret_access_key="ONE")
        two = S3CredentialIdentity(access_key_id="AKID2", secret_access_key="TWO")
        assert one.sign_bytes(b"content") != two.sign_bytes(b"content")
        assert one.sign_bytes(b"content") == (
            hmac.new(b"ONE", b"content", sha1).digest()
        )

    def test_empty_content(self) -> None:
        creds = S3CredentialIdentity(
            access_key_id="AKID1234EXAMPLE", secret_access_key="SECRET1234"
        )
        assert creds.sign_bytes(b"") == hmac.new(b"SECRET1234", b"", sha1).digest()


class TestFromCredentialsDocument:
    def test_full_document(self) -> None:
        creds = S3CredentialIdentity.from_credentials_document(
            {
                "AccessKeyId": "AKID1234EXAMPLE",
                "SecretAccessKey": "SECRET1234",
                "Token": "SESS_TOKEN_1234",
                "Expiration": "2024-05-01T00:00:00Z",
            }
        )
        assert creds.access_key_id == "AKID1234EXAMPLE"
        assert creds.secret_access_key == "SECRET1234"
        assert creds.session_token == "SESS_TOKEN_1234"
        assert creds.expiration == datetime(2024, 5, 1, tzinfo=UTC)

    def test_keys_are_case_insensitive(self) -> None:
        creds = S3CredentialIdentity.from_credentials_document(
            {
                "AccessKeyID": "AKID1234EXAMPLE",
                "secretaccesskey": "SECRET1234",
                "SessionToken": "SESS_TOKEN_1234",
            }
        )
        assert creds.access_key_id == "AKID1234EXAMPLE"
        assert creds.secret_access_key == "SECRET1234"
        assert creds.session_token == "SESS_TOKEN_1234"
        assert creds.expiration is None

    def test_empty_token_is_dropped(self) -> None:
        creds = S3CredentialIdentity.from_credentials_document(
            {"AccessKeyId": "AKID", "SecretAccessKey": "SECRET", "Token": ""}
        )
        assert creds.session_token is None

    @pytest.mark.parametrize(
        "expiration,expected",
        [
            ("2024-05-01T02:00:00+02:00", datetime(2024, 5, 1, tzinfo=UTC)),
            ("2024-05-01T00:00:00", datetime(2024, 5, 1, tzinfo=UTC)),
            (
                datetime(2024, 5, 1, 2, tzinfo=timezone(timedelta(hours=2))),
                datetime(2024, 5, 1, tzinfo=UTC),
            ),
        ],
    )
    def test_expiration_normalized_to_utc(
        self, expiration: str | datetime, expected: datetime
    ) -> None:
        creds = S3CredentialIdentity.from_credentials_document(
            {
                "AccessKeyId": "AKID",
                "SecretAccessKey": "SECRET",
                "Expiration": expiration,
            }
        )
        assert creds.expiration == expected
        assert creds.expiration is not None
        assert creds.expiration.tzinfo is UTC

    @pytest.mark.parametrize(
        "document",
        [
            {},
            {"AccessKeyId": "AKID"},
            {"SecretAccessKey": "SECRET"},
            {"AccessKeyId": "", "SecretAccessKey": "SECRET"},
        ],
    )
    def test_missing_keys(self, document: dict[str, str]) -> None:
        with pytest.raises(MissingExpectedParameterException):
            S3CredentialIdentity.from_credentials_document(document)
