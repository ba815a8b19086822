import pytest
from jose import jwt

from chatflow.core.config import settings
from chatflow.core.errors import EmailAlreadyRegisteredError, IncorrectPasswordError, InvalidCredentialsError
from chatflow.services.auth_service import (
    authenticate_user,
    change_password,
    create_access_token,
    register_user,
    resolve_session,
    verify_password,
)


def test_register_stores_hash_not_plaintext(db, user):
    assert user.password_hash != "correct-horse"
    assert verify_password("correct-horse", user.password_hash)


def test_register_duplicate_email_conflicts(db, user):
    with pytest.raises(EmailAlreadyRegisteredError):
        register_user(db, name="Other", email="alice@example.com", password="whatever123")


def test_login_errors_do_not_reveal_whether_email_exists(db, user):
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        authenticate_user(db, email="alice@example.com", password="nope-nope")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        authenticate_user(db, email="nobody@example.com", password="correct-horse")
    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid credentials"


def test_authenticate_success(db, user):
    assert authenticate_user(db, email="alice@example.com", password="correct-horse").id == user.id


def test_change_password_requires_current_password(db, user):
    with pytest.raises(IncorrectPasswordError):
        change_password(db, user_id=user.id, current_password="wrong-password", new_password="brand-new-pass")

    db.refresh(user)
    assert verify_password("correct-horse", user.password_hash)


def test_change_password_rehashes(db, user):
    old_hash = user.password_hash
    change_password(db, user_id=user.id, current_password="correct-horse", new_password="brand-new-pass")

    db.refresh(user)
    assert user.password_hash != old_hash
    assert verify_password("brand-new-pass", user.password_hash)
    assert not verify_password("correct-horse", user.password_hash)


def test_resolve_session_valid_token():
    token = create_access_token(user_id=7, email="a@b.c")
    session = resolve_session(token)
    assert session is not None
    assert session.id == 7
    assert session.email == "a@b.c"


@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
def test_resolve_session_malformed_tokens(token):
    assert resolve_session(token) is None


def test_resolve_session_expired_token():
    token = create_access_token(user_id=7, email="a@b.c", expires_minutes=-5)
    assert resolve_session(token) is None


def test_resolve_session_bad_signature():
    token = jwt.encode({"id": 7, "email": "a@b.c"}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
    assert resolve_session(token) is None


def test_resolve_session_missing_claims():
    token = jwt.encode({"sub": "7"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    assert resolve_session(token) is None
