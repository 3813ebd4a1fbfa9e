"""
Authentication API router
"""

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from novel_api.core.database import get_db
from novel_api.schemas import (
    AccessTokenResponse,
    AvailabilityResponse,
    RefreshTokenRequest,
    RegisterResponse,
    Token,
    UserCreate,
    UserLogin,
)
from novel_api.services import user_service

# Handlers are plain def: pymongo is blocking, so FastAPI runs them in its threadpool
router = APIRouter()


@router.get("/check-email", response_model=AvailabilityResponse)
def check_email(email: str = Query(..., min_length=1), db: Database = Depends(get_db)):
    """Is the email still free"""
    return {"available": user_service.get_user_by_email(db, email) is None}


@router.get("/check-username", response_model=AvailabilityResponse)
def check_username(username: str = Query(..., min_length=1), db: Database = Depends(get_db)):
    """Is the username still free"""
    return {"available": user_service.get_user_by_username(db, username.strip()) is None}


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Database = Depends(get_db)):
    """Register a user"""
    user_service.register(db, user_data.username, user_data.email, user_data.password)
    return RegisterResponse()


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, db: Database = Depends(get_db)):
    """Log in and receive an access and a refresh token"""
    tokens = user_service.login(db, user_data.email, user_data.password)
    return Token(token=tokens["token"], refresh_token=tokens["refresh_token"])


@router.post("/refreshToken", response_model=AccessTokenResponse)
def refresh_token(token_data: RefreshTokenRequest):
    """Issue a new access token"""
    return AccessTokenResponse(access_token=user_service.refresh_access_token(token_data.refresh_token))
