import datetime as dt
import logging
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from chatflow.core.config import settings
from chatflow.core.errors import (
    EmailAlreadyRegisteredError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from chatflow.models.user import User
from chatflow.schemas.auth_schema import SessionUser

logger = logging.getLogger(__name__)

# Use PBKDF2-SHA256 to avoid bcrypt backend/version issues and the 72-byte input limit.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # malformed or unknown hash format
        return False


def create_access_token(*, user_id: int, email: str, expires_minutes: Optional[int] = None) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    expire_minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = now + dt.timedelta(minutes=int(expire_minutes))

    payload: dict[str, Any] = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise ValueError("Invalid token") from e


def resolve_session(token: Optional[str]) -> Optional[SessionUser]:
    """Map a session token to the identity it carries.

    Every failure (missing, malformed, expired, bad signature, incomplete
    claims) yields ``None``; this function never raises.
    """
    if not token:
        return None
    try:
        payload = decode_token(token)
        return SessionUser(id=int(payload["id"]), email=str(payload["email"]))
    except (ValueError, KeyError, TypeError):
        return None


def register_user(db: Session, *, name: str, email: str, password: str) -> User:
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise EmailAlreadyRegisteredError()

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return user


def authenticate_user(db: Session, *, email: str, password: str) -> User:
    # Same error for unknown email and wrong password.
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError()
    return user


def change_password(db: Session, *, user_id: int, current_password: str, new_password: str) -> None:
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise IncorrectPasswordError()

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed for user id=%s", user_id)
