from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from chatflow.api.dependencies import get_db
from chatflow.core.config import settings
from chatflow.models.user import User
from chatflow.schemas.auth_schema import SessionUser
from chatflow.services.auth_service import resolve_session


_http_bearer = HTTPBearer(auto_error=False)

UNAUTHORIZED_DETAIL = "You must be logged in to access this resource"


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    # Session cookie first (browser clients), then an explicit bearer header.
    cookie_token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if cookie_token:
        return cookie_token

    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials

    return None


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_http_bearer),
) -> Optional[SessionUser]:
    return resolve_session(_extract_token(request, credentials))


def get_current_user(
    user: Optional[SessionUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> SessionUser:
    # A valid signature is not enough; the account must still exist.
    if user is None or db.query(User.id).filter(User.id == user.id).first() is None:
        raise HTTPException(
            status_code=401,
            detail=UNAUTHORIZED_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        max_age=0,
    )
