"""
Authentication endpoints
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.schemas.auth import AuthResponse, LogoutResponse
from app.schemas.user import UserCreate, UserLogin, UserRead
from app.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    access_token_expiry,
    get_current_active_user,
)
from app.models.user import User
from app.crud.user import get_user_by_email, create_user
from app.core.exceptions import CustomHTTPException
from app.core.error_codes import (
    INVALID_CREDENTIALS,
    ACCOUNT_DEACTIVATION,
    EMAIL_ALREADY_REGISTERED,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, message: str) -> AuthResponse:
    expires_at = access_token_expiry()
    return AuthResponse(
        message=message,
        access_token=create_access_token(user.id),
        expires_at=expires_at,
        user=UserRead.model_validate(user),
    )


async def _authenticate(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for: {email}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            error_code=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated. Please contact support",
            error_code=ACCOUNT_DEACTIVATION,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    if await get_user_by_email(db, payload.email):
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
            error_code=EMAIL_ALREADY_REGISTERED
        )

    user = await create_user(
        db,
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password.get_secret_value()),
    )
    return _auth_response(user, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await _authenticate(db, payload.email, payload.password.get_secret_value())
    logger.info(f"User {user.id} logged in")
    return _auth_response(user, "Login successful")


@router.post("/token", response_model=AuthResponse)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """OAuth2 password flow; the username field carries the email"""
    user = await _authenticate(db, form_data.username, form_data.password)
    return _auth_response(user, "Login successful")


@router.post("/logout", response_model=LogoutResponse)
async def logout(current_user: User = Depends(get_current_active_user)):
    # Tokens are stateless; the client discards its copy
    logger.info(f"User {current_user.id} logged out")
    return LogoutResponse(message="Successfully logged out")


@router.get("/me", response_model=UserRead)
async def read_current_user(current_user: User = Depends(get_current_active_user)):
    return current_user
