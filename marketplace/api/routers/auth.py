# marketplace/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_current_user
from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.schemas import ApiResponse, SignupIn, LoginIn, TokenOut, SessionOut
from marketplace.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=ApiResponse[TokenOut], status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    data = AuthService(db).signup(payload)
    return {"message": "User registered successfully", "data": data}


@router.post("/login", response_model=ApiResponse[TokenOut])
def login(payload: LoginIn, db: Session = Depends(get_db)):
    data = AuthService(db).login(payload.email, payload.password)
    return {"message": "Login successful", "data": data}


@router.get("/authenticate", response_model=ApiResponse[SessionOut])
def authenticate(user: UserModel = Depends(get_current_user)):
    # odtworzenie sesji po stronie klienta, rola z bazy
    return {"data": {"user_id": user.id, "role": user.role}}
