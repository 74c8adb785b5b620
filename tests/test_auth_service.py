"""
Unit tests for the credential store and token issuer.
"""

import time

import jwt
import pytest

from electricity_api.exceptions import ConfigurationError
from electricity_api.models.auth import TokenPayload
from electricity_api.services.auth_service import (
    ALGORITHM,
    TOKEN_EXPIRES_IN,
    AuthService,
    parse_api_users,
)

from .conftest import TEST_SECRET


class TestConstruction:
    """Tests for configuration handling at construction time."""

    def test_missing_secret_raises(self):
        """Test a missing or empty signing secret raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="JWT_SECRET"):
            AuthService(jwt_secret=None, api_users="admin:secret")

        with pytest.raises(ConfigurationError, match="JWT_SECRET"):
            AuthService(jwt_secret="", api_users="admin:secret")

    def test_no_users_raises(self):
        """Test construction without users raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="No users configured"):
            AuthService(jwt_secret=TEST_SECRET)

    def test_legacy_single_user(self):
        """Test the single username/password pair is accepted."""
        service = AuthService(jwt_secret=TEST_SECRET, api_username="legacy", api_password="pw")

        assert service.user_count == 1
        assert service.verify_credentials("legacy", "pw")

    def test_legacy_requires_both_fields(self):
        """Test the single-user form needs both username and password."""
        with pytest.raises(ConfigurationError):
            AuthService(jwt_secret=TEST_SECRET, api_username="legacy")

    def test_multi_user_form_takes_priority(self):
        """Test API_USERS wins over the single-user form."""
        service = AuthService(
            jwt_secret=TEST_SECRET,
            api_users="admin:secret",
            api_username="legacy",
            api_password="pw",
        )

        assert service.user_count == 1
        assert service.verify_credentials("admin", "secret")
        assert not service.verify_credentials("legacy", "pw")

    def test_falls_back_to_legacy_when_multi_user_form_yields_nothing(self):
        """Test an API_USERS value with no valid pairs falls back to the single-user form."""
        service = AuthService(
            jwt_secret=TEST_SECRET,
            api_users="broken,:nopass,nouser:",
            api_username="legacy",
            api_password="pw",
        )

        assert service.verify_credentials("legacy", "pw")


class TestParseApiUsers:
    """Tests for the 'user:pass,user:pass' parser."""

    def test_parses_pairs(self):
        """Test comma separated pairs are parsed."""
        assert parse_api_users("a:1,b:2") == {"a": "1", "b": "2"}

    def test_strips_whitespace_around_pairs(self):
        """Test whitespace around pairs is stripped."""
        assert parse_api_users(" a:1 , b:2 ") == {"a": "1", "b": "2"}

    def test_skips_incomplete_pairs(self):
        """Test pairs missing a username or password are skipped."""
        assert parse_api_users("a:1,b:,:3,c,") == {"a": "1"}

    def test_last_duplicate_wins(self):
        """Test a repeated username keeps the last password."""
        assert parse_api_users("a:1,a:2") == {"a": "2"}

    def test_password_may_contain_colons(self):
        """Test a pair is split on the first colon only."""
        assert parse_api_users("a:x:y") == {"a": "x:y"}

    def test_empty_input(self):
        """Test empty input yields no users."""
        assert parse_api_users(None) == {}
        assert parse_api_users("") == {}


class TestVerifyCredentials:
    """Tests for username/password verification."""

    @pytest.mark.parametrize("username,password", [
        ("admin", "secret"),
        ("analyst", "s3cr3t:with:colons"),
    ])
    def test_configured_pairs_are_valid(self, auth_service, username, password):
        """Test configured pairs verify."""
        assert auth_service.verify_credentials(username, password) is True

    @pytest.mark.parametrize("username,password", [
        ("admin", "wrong"),
        ("admin", "secret "),
        ("admin", "Secret"),
        ("Admin", "secret"),
        ("admin ", "secret"),
        ("unknown", "secret"),
        ("analyst", "s3cr3t"),
    ])
    def test_mutated_pairs_are_invalid(self, auth_service, username, password):
        """Test near-miss pairs do not verify."""
        assert auth_service.verify_credentials(username, password) is False

    @pytest.mark.parametrize("username,password", [
        ("", "secret"),
        ("admin", ""),
        (None, "secret"),
        ("admin", None),
        (None, None),
    ])
    def test_missing_values_are_invalid(self, auth_service, username, password):
        """Test empty or missing values do not verify."""
        assert auth_service.verify_credentials(username, password) is False

    def test_non_ascii_password(self):
        """Test non-ASCII passwords compare correctly."""
        service = AuthService(jwt_secret=TEST_SECRET, api_users="user:pässwörd")

        assert service.verify_credentials("user", "pässwörd")
        assert not service.verify_credentials("user", "passwort")


class TestTokens:
    """Tests for token issuing and verification."""

    def test_issue_then_verify(self, auth_service):
        """Test an issued token verifies with a 24 hour lifetime."""
        result = auth_service.issue_token("admin")
        payload = auth_service.verify_token(result.token)

        assert isinstance(payload, TokenPayload)
        assert payload.username == "admin"
        assert payload.exp - payload.iat == 86400
        assert payload.lifetime == TOKEN_EXPIRES_IN
        assert result.expires_in == 86400

    def test_issue_does_not_check_user_exists(self, auth_service):
        """Test issuing does not look up the user."""
        result = auth_service.issue_token("nobody")

        assert auth_service.verify_token(result.token).username == "nobody"

    def test_wire_format(self, auth_service):
        """Test tokens are HS256 JWTs with exactly username, iat and exp."""
        token = auth_service.issue_token("admin").token

        assert token.count(".") == 2
        header = jwt.get_unverified_header(token)
        assert header["alg"] == "HS256"
        claims = jwt.decode(token, TEST_SECRET, algorithms=[ALGORITHM])
        assert set(claims) == {"username", "iat", "exp"}

    def test_uses_clock_for_issue_time(self):
        """Test issue time comes from the injected clock."""
        now = int(time.time())
        service = AuthService(jwt_secret=TEST_SECRET, api_users="admin:secret", clock=lambda: now)

        payload = service.verify_token(service.issue_token("admin").token)

        assert payload.iat == now
        assert payload.exp == now + 86400

    def test_expired_token_is_rejected(self):
        """Test a token issued two days ago is rejected."""
        two_days_ago = time.time() - 2 * 86400
        issuer = AuthService(jwt_secret=TEST_SECRET, api_users="admin:secret", clock=lambda: two_days_ago)
        verifier = AuthService(jwt_secret=TEST_SECRET, api_users="admin:secret")

        token = issuer.issue_token("admin").token

        assert verifier.verify_token(token) is None

    def test_expired_token_with_valid_signature_is_rejected(self, auth_service):
        """Test a correctly signed expired token is rejected."""
        now = int(time.time())
        token = jwt.encode(
            {"username": "admin", "iat": now - 100, "exp": now - 10},
            TEST_SECRET,
            algorithm=ALGORITHM,
        )

        assert auth_service.verify_token(token) is None

    def test_wrong_secret_is_rejected(self, auth_service):
        """Test a token signed with another secret is rejected."""
        other = AuthService(jwt_secret="another-secret", api_users="admin:secret")
        token = other.issue_token("admin").token

        assert auth_service.verify_token(token) is None

    def test_tampered_signature_is_rejected(self, auth_service):
        """Test a token with an altered signature is rejected."""
        token = auth_service.issue_token("admin").token
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"

        assert auth_service.verify_token(tampered) is None

    def test_tampered_payload_is_rejected(self, auth_service):
        """Test a token with a swapped payload is rejected."""
        token = auth_service.issue_token("admin").token
        forged = jwt.encode({"username": "root", "iat": 0, "exp": 2 ** 40}, "guess", algorithm=ALGORITHM)
        header, _, signature = token.split(".")
        _, forged_payload, _ = forged.split(".")

        assert auth_service.verify_token(f"{header}.{forged_payload}.{signature}") is None

    @pytest.mark.parametrize("token", ["", None, "garbage", "a.b.c", "a.b"])
    def test_malformed_tokens_are_rejected(self, auth_service, token):
        """Test malformed token strings are rejected."""
        assert auth_service.verify_token(token) is None

    def test_missing_username_claim_is_rejected(self, auth_service):
        """Test a token without a username claim is rejected."""
        now = int(time.time())
        token = jwt.encode({"iat": now, "exp": now + 60}, TEST_SECRET, algorithm=ALGORITHM)

        assert auth_service.verify_token(token) is None

    def test_non_string_username_is_rejected(self, auth_service):
        """Test a token with a non-string username is rejected."""
        now = int(time.time())
        token = jwt.encode({"username": 42, "iat": now, "exp": now + 60}, TEST_SECRET, algorithm=ALGORITHM)

        assert auth_service.verify_token(token) is None

    def test_unsigned_token_is_rejected(self, auth_service):
        """Test an unsigned token is rejected."""
        now = int(time.time())
        token = jwt.encode({"username": "admin", "iat": now, "exp": now + 60}, None, algorithm="none")

        assert auth_service.verify_token(token) is None
