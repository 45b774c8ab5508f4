"""Tests for signup and login."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from bookshelf.exceptions import AuthError, ConflictError, ServerError, ValidationError
from bookshelf.models.user import User
from bookshelf.services import auth as auth_service
from bookshelf.services.tokens import TokenService

tokens = TokenService(secret="s3cret")


class TestSignup:
    def test_creates_user_and_issues_token(self, db):
        result = auth_service.signup(db, "reader@example.com", "hunter22", tokens)

        assert result.email == "reader@example.com"
        assert tokens.verify(result.token) == result.id
        assert db.query(User).count() == 1

    def test_password_is_hashed(self, db):
        result = auth_service.signup(db, "reader@example.com", "hunter22", tokens)
        user = db.query(User).filter(User.id == result.id).one()

        assert user.password_hash != "hunter22"
        assert "hunter22" not in user.password_hash
        assert auth_service.verify_password("hunter22", user.password_hash)

    def test_same_password_hashes_differently(self):
        assert auth_service.get_password_hash("same") != auth_service.get_password_hash("same")

    def test_duplicate_email_conflicts_regardless_of_password(self, db):
        auth_service.signup(db, "reader@example.com", "hunter22", tokens)

        for password in ("hunter22", "something-else"):
            with pytest.raises(ConflictError):
                auth_service.signup(db, "reader@example.com", password, tokens)

        assert db.query(User).count() == 1

    def test_unique_constraint_race_is_a_conflict(self, db):
        auth_service.signup(db, "reader@example.com", "hunter22", tokens)

        # Simulate a concurrent signup that passed the existence check
        with patch.object(auth_service, "get_user_by_email", return_value=None):
            with pytest.raises(ConflictError):
                auth_service.signup(db, "reader@example.com", "hunter22", tokens)

    @pytest.mark.parametrize(
        ("email", "password"),
        [("", "hunter22"), ("reader@example.com", ""), (None, "hunter22"), ("a@b.c", None)],
    )
    def test_requires_both_fields(self, db, email, password):
        with pytest.raises(ValidationError):
            auth_service.signup(db, email, password, tokens)
        assert db.query(User).count() == 0

    def test_database_failure_is_a_server_error(self, db):
        with patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception())):
            with pytest.raises(ServerError) as exc_info:
                auth_service.signup(db, "reader@example.com", "hunter22", tokens)

        assert exc_info.value.message == "Server error"


class TestLogin:
    @pytest.fixture(autouse=True)
    def registered(self, db):
        return auth_service.signup(db, "reader@example.com", "hunter22", tokens)

    def test_login(self, db, registered):
        result = auth_service.login(db, "reader@example.com", "hunter22", tokens)
        assert result.id == registered.id
        assert tokens.verify(result.token) == registered.id

    def test_failures_are_indistinguishable(self, db):
        with pytest.raises(AuthError) as wrong_password:
            auth_service.login(db, "reader@example.com", "wrong", tokens)
        with pytest.raises(AuthError) as unknown_email:
            auth_service.login(db, "stranger@example.com", "hunter22", tokens)

        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    def test_login_writes_nothing(self, db):
        with patch.object(db, "commit") as commit, patch.object(db, "add") as add:
            auth_service.login(db, "reader@example.com", "hunter22", tokens)
        commit.assert_not_called()
        add.assert_not_called()

    def test_requires_both_fields(self, db):
        with pytest.raises(ValidationError):
            auth_service.login(db, "reader@example.com", "", tokens)
