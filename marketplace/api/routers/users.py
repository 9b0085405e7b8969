from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_current_user
from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.schemas import ApiResponse, ProfileOut, ProfileUpdateIn, PasswordChangeIn
from marketplace.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["profile"])


@router.get("/profile", response_model=ApiResponse[ProfileOut])
def get_profile(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": UserService(db).get_user(user.id)}


@router.put("/profile", response_model=ApiResponse[ProfileOut])
def update_profile(
    payload: ProfileUpdateIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = UserService(db).update_profile(user.id, payload)
    return {"message": "Profile updated successfully", "data": updated}


@router.put("/password", response_model=ApiResponse[None])
def change_password(
    payload: PasswordChangeIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UserService(db).change_password(user.id, payload.current_password, payload.new_password)
    return {"message": "Password changed successfully"}
