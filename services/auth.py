from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from jose import JWTError

from core.logger import get_logger
from core.security import hash_password, verify_password, create_access_token, decode_token, seconds_until_expiry
from schemas.auth import RegisterUser, Login
from models.user import User
from services.token_blacklist import TokenBlacklistService
from tasks.email import send_welcome_email

logger = get_logger(__name__)


class AuthService:

    @staticmethod
    async def register_user(db: AsyncSession, user_data:RegisterUser ) -> User:
        result = await db.execute(select(User).where(User.email == user_data.email))
        existing_user = result.scalar_one_or_none()

        if existing_user:
            logger.warning(f"Registration attempt with existing email: {user_data.email}")
            raise HTTPException(
                status_code = status.HTTP_400_BAD_REQUEST,
                detail= "User already exists"
            )
        new_user = User(
            name = user_data.name,
            email = user_data.email,
            password_hash = hash_password(user_data.password),
            role = user_data.role
        )

        db.add(new_user)
        try:
            await db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration for the same email
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
        await db.refresh(new_user)

        logger.info(f"User registered: {new_user.email} ({new_user.role.value})")

        try:
            send_welcome_email.delay(
                user_email=new_user.email,
                user_name=new_user.name
            )
        except Exception as e:
            # Don't fail registration if email fails
            logger.error(f"Failed to queue welcome email: {e}")

        return new_user


    @staticmethod
    async def authenticate_user(db: AsyncSession, login_data:Login ) -> User:
        #authenticate user by email and password(log them in essentially)
        result = await db.execute(select(User).where(User.email == login_data.email))
        user = result.scalar_one_or_none()

        if not user:
            logger.warning(f"Login attempt with non-existent email: {login_data.email}")
            raise HTTPException(
                status_code= status.HTTP_401_UNAUTHORIZED,
                detail= "Invalid credentials"
            )

        if not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Invalid password for user: {user.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        logger.info(f"user authenticated: {user.email}")
        return user

    @staticmethod
    def create_token(user: User) -> str:
        return create_access_token({"sub": str(user.id), "role": user.role.value})

    @staticmethod
    async def logout(token: str) -> bool:
        #revoke the token for the rest of its lifetime
        try:
            payload = decode_token(token)
        except JWTError:
            # an unreadable token grants nothing, so there is nothing to revoke
            return False
        return await TokenBlacklistService.blacklist_token(token, expiry_seconds=seconds_until_expiry(payload))
