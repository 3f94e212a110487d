"""Unit tests for the session service.

Tests for:
- Register / login credential handling
- Revoke-all-on-login
- Refresh token lookup, expiry and (lack of) rotation
- Logout idempotence
- Profile update / delete
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from models.refresh_token import RefreshToken
from models.user import User
from utils.exceptions import ConflictError, NotFoundError, UnauthorizedError

from conftest import PASSWORD


def _token_record(storage, token):
    session = storage.get_session()
    return session.query(RefreshToken).filter(RefreshToken.token == token).one()


def _expire(storage, token):
    record = _token_record(storage, token)
    record.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    storage.new(record)
    storage.save()


class TestRegister:
    def test_register_returns_tokens_and_user(self, auth_service, register_data, signer):
        payload = auth_service.register(register_data())

        assert payload.user.id == 1
        assert payload.user.email == "a@x.com"
        assert signer.verify_access(payload.access_token).subject == payload.user.id
        assert payload.refresh_token

    def test_register_stores_hash_not_plaintext(self, auth_service, register_data, hasher):
        user = auth_service.register(register_data()).user

        assert user.password_hash != PASSWORD
        assert hasher.verify(PASSWORD, user.password_hash)

    def test_register_persists_active_refresh_token(self, auth_service, register_data, storage):
        payload = auth_service.register(register_data())

        record = _token_record(storage, payload.refresh_token)
        assert record.user_id == payload.user.id
        assert record.revoked is False
        assert not record.is_expired()

    def test_duplicate_email_conflicts_without_new_rows(self, auth_service, register_data, storage):
        auth_service.register(register_data())

        with pytest.raises(ConflictError):
            auth_service.register(register_data(username="bob"))

        assert storage.count(User) == 1
        assert storage.count(RefreshToken) == 1

    def test_password_attribute_is_write_only(self, auth_service, register_data):
        user = auth_service.register(register_data()).user

        with pytest.raises(AttributeError):
            user.password


class TestLogin:
    def test_register_then_login(self, auth_service, register_data):
        auth_service.register(register_data())

        payload = auth_service.login("a@x.com", PASSWORD)

        assert payload.user.email == "a@x.com"

    def test_wrong_password_is_unauthorized_and_issues_nothing(self, auth_service, register_data, storage):
        auth_service.register(register_data())

        with pytest.raises(UnauthorizedError) as exc:
            auth_service.login("a@x.com", "wrong")

        assert exc.value.message == "Invalid credentials"
        assert storage.count(RefreshToken) == 1

    def test_unknown_email_looks_like_wrong_password(self, auth_service, register_data):
        auth_service.register(register_data())

        with pytest.raises(UnauthorizedError) as unknown:
            auth_service.login("nobody@x.com", PASSWORD)
        with pytest.raises(UnauthorizedError) as wrong:
            auth_service.login("a@x.com", "wrong")

        assert unknown.value.message == wrong.value.message

    def test_login_revokes_previous_tokens(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())
        first = auth_service.login("a@x.com", PASSWORD)

        second = auth_service.login("a@x.com", PASSWORD)

        assert _token_record(storage, registered.refresh_token).revoked is True
        assert _token_record(storage, first.refresh_token).revoked is True
        assert _token_record(storage, second.refresh_token).revoked is False
        active = [t for t in auth_service.refresh_tokens.for_user(second.user.id) if not t.revoked]
        assert [t.token for t in active] == [second.refresh_token]

    def test_login_leaves_other_users_tokens_alone(self, auth_service, register_data, storage):
        alice = auth_service.register(register_data())
        auth_service.register(register_data(email="b@x.com", username="bob"))

        auth_service.login("b@x.com", PASSWORD)

        assert _token_record(storage, alice.refresh_token).revoked is False

    def test_alice_scenario(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())
        assert registered.user.id == 1

        auth_service.login("a@x.com", "Passw0rd1")
        assert _token_record(storage, registered.refresh_token).revoked is True

        with pytest.raises(UnauthorizedError):
            auth_service.login("a@x.com", "wrong")


class TestRefresh:
    def test_unknown_token_is_unauthorized(self, auth_service):
        with pytest.raises(UnauthorizedError) as exc:
            auth_service.refresh_access_token("never-issued")

        assert exc.value.message == "Invalid refresh token"

    def test_refresh_returns_new_access_token_and_same_refresh_token(self, auth_service, register_data, signer):
        registered = auth_service.register(register_data())

        first = auth_service.refresh_access_token(registered.refresh_token)
        second = auth_service.refresh_access_token(first.refresh_token)

        assert first.refresh_token == registered.refresh_token
        assert second.refresh_token == registered.refresh_token
        assert signer.verify_access(first.access_token).subject == registered.user.id
        assert first.user.id == registered.user.id

    def test_successful_refresh_is_logged(self, auth_service, register_data, caplog):
        registered = auth_service.register(register_data())

        with caplog.at_level(logging.INFO, logger="profile_api.services.auth_service"):
            auth_service.refresh_access_token(registered.refresh_token)

        assert f"Refreshed access token for user id={registered.user.id}" in caplog.text

    def test_expired_token_is_revoked(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())
        _expire(storage, registered.refresh_token)

        with pytest.raises(UnauthorizedError) as exc:
            auth_service.refresh_access_token(registered.refresh_token)

        assert "expired" in exc.value.message.lower()
        assert _token_record(storage, registered.refresh_token).revoked is True

        # a second attempt still fails and the token stays revoked
        with pytest.raises(UnauthorizedError):
            auth_service.refresh_access_token(registered.refresh_token)
        assert _token_record(storage, registered.refresh_token).revoked is True

    def test_revoked_token_is_unauthorized(self, auth_service, register_data):
        registered = auth_service.register(register_data())
        auth_service.logout(registered.refresh_token)

        with pytest.raises(UnauthorizedError):
            auth_service.refresh_access_token(registered.refresh_token)


class TestLogout:
    def test_logout_revokes_active_token(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())

        assert auth_service.logout(registered.refresh_token) is True
        assert _token_record(storage, registered.refresh_token).revoked is True

    def test_second_logout_returns_false(self, auth_service, register_data):
        registered = auth_service.register(register_data())
        auth_service.logout(registered.refresh_token)

        assert auth_service.logout(registered.refresh_token) is False

    def test_logout_unknown_token_returns_false(self, auth_service):
        assert auth_service.logout("never-issued") is False

    def test_conditional_revoke_flips_only_once(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())
        record = auth_service.refresh_tokens.find_active(registered.refresh_token)

        first = auth_service.refresh_tokens.revoke(record)
        second = auth_service.refresh_tokens.revoke(record)

        assert first is True
        assert second is False
        assert _token_record(storage, registered.refresh_token).revoked is True

    def test_revoke_all_user_tokens_counts_only_active(self, auth_service, register_data):
        registered = auth_service.register(register_data())
        auth_service.login("a@x.com", PASSWORD)

        assert auth_service.revoke_all_user_tokens(registered.user.id) == 1
        assert auth_service.revoke_all_user_tokens(registered.user.id) == 0


class TestProfile:
    def test_partial_update_changes_only_supplied_fields(self, auth_service, register_data, hasher):
        user = auth_service.register(register_data(display_name="Alice")).user
        old_hash = user.password_hash

        updated = auth_service.update_profile(user.id, {"display_name": "X"})

        assert updated.display_name == "X"
        assert updated.username == "alice"
        assert updated.email == "a@x.com"
        assert updated.password_hash == old_hash

    def test_update_profile_ignores_password(self, auth_service, register_data):
        user = auth_service.register(register_data()).user
        old_hash = user.password_hash

        auth_service.update_profile(user.id, {"password": "Different1"})

        assert user.password_hash == old_hash
        auth_service.login("a@x.com", PASSWORD)

    def test_update_profile_missing_user(self, auth_service):
        with pytest.raises(NotFoundError):
            auth_service.update_profile(99, {"display_name": "X"})

    def test_update_profile_email_taken(self, auth_service, register_data):
        user = auth_service.register(register_data()).user
        auth_service.register(register_data(email="b@x.com", username="bob"))

        with pytest.raises(ConflictError):
            auth_service.update_profile(user.id, {"email": "b@x.com"})

    def test_update_profile_keeping_own_email(self, auth_service, register_data):
        user = auth_service.register(register_data()).user

        updated = auth_service.update_profile(user.id, {"email": "a@x.com", "username": "al"})

        assert updated.username == "al"

    def test_delete_missing_profile_returns_false(self, auth_service):
        assert auth_service.delete_profile(99) is False

    def test_delete_profile_removes_user_and_tokens(self, auth_service, register_data, storage):
        registered = auth_service.register(register_data())
        auth_service.login("a@x.com", PASSWORD)

        assert auth_service.delete_profile(registered.user.id) is True

        assert auth_service.validate_user_by_id(registered.user.id) is None
        assert storage.count(RefreshToken) == 0
        with pytest.raises(UnauthorizedError):
            auth_service.refresh_access_token(registered.refresh_token)
