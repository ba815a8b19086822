from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chatflow.api.dependencies import get_db
from chatflow.api.security import get_current_user
from chatflow.core.errors import IncorrectPasswordError, UserNotFoundError
from chatflow.schemas.auth_schema import ChangePasswordRequest, MessageOnlyResponse, SessionUser, UserResponse
from chatflow.services.auth_service import change_password, get_user


router = APIRouter()


@router.get("/getUser", response_model=UserResponse)
def get_user_procedure(db: Session = Depends(get_db), user: SessionUser = Depends(get_current_user)):
    try:
        return get_user(db, user.id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/changePassword", response_model=MessageOnlyResponse)
def change_password_procedure(
    request: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    try:
        change_password(
            db,
            user_id=user.id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except IncorrectPasswordError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return MessageOnlyResponse(message="Password updated successfully")
