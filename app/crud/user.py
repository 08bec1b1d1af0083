"""
User CRUD operations: the user directory the relationship code resolves ids against.
"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, func
from fastapi import status
from app.models.user import User
from app.core.exceptions import CustomHTTPException, NotFoundError
from app.core.error_codes import EMAIL_ALREADY_REGISTERED, INTERNAL_ERROR

logger = logging.getLogger(__name__)

async def create_user(session: AsyncSession, name: str, email: str, hashed_password: str) -> User:
    """Create a new user account; emails are stored lower-cased"""
    user = User(name=name.strip(), email=email.lower(), hashed_password=hashed_password)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
            error_code=EMAIL_ALREADY_REGISTERED
        )
    except SQLAlchemyError:
        await session.rollback()
        logger.error("Database error creating user", exc_info=True)
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
            error_code=INTERNAL_ERROR
        )
    await session.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.id == str(user_id))
    )
    return result.scalars().first()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive email lookup"""
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalars().first()


async def require_user(session: AsyncSession, user_id: str, detail: str = "User not found") -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError(detail)
    return user
