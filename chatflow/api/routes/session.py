import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from chatflow.api.dependencies import get_db
from chatflow.api.security import clear_session_cookie, get_optional_user, set_session_cookie
from chatflow.core.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from chatflow.schemas.auth_schema import (
    AuthCheckResponse,
    LoginRequest,
    LoginResponse,
    MessageOnlyResponse,
    RegisterRequest,
    UserResponse,
)
from chatflow.services.auth_service import authenticate_user, create_access_token, register_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", status_code=201, response_model=MessageOnlyResponse)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    try:
        register_user(db, name=request.name.strip(), email=request.email.strip().lower(), password=request.password)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return MessageOnlyResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    try:
        user = authenticate_user(db, email=request.email.strip().lower(), password=request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=e.message)

    token = create_access_token(user_id=user.id, email=user.email)
    set_session_cookie(response, token)
    logger.info("User id=%s logged in", user.id)
    return LoginResponse(user=UserResponse.model_validate(user))


@router.post("/auth/logout", response_model=MessageOnlyResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return MessageOnlyResponse()


@router.get("/auth/check", response_model=AuthCheckResponse)
def check(user=Depends(get_optional_user)):
    if user is None:
        return JSONResponse(status_code=401, content={"isAuthenticated": False, "user": None})
    return AuthCheckResponse(is_authenticated=True, user=user)
