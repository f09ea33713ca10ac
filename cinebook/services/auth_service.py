"""
Account service: registration, login and profile maintenance.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationFailure
from cinebook.core.logging import get_logger
from cinebook.core.security import hash_password, verify_password, create_access_token
from cinebook.models.user import User, UserRole
from cinebook.repositories.user_repository import UserRepository
from cinebook.schemas.user import UserCreate, UserLogin, UserUpdate, PasswordChange

logger = get_logger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(
        data={"sub": str(user.id), "email": user.email, "role": user.role.value}
    )


class AuthService:
    def __init__(self, db: AsyncSession, users: UserRepository):
        self.db = db
        self.users = users

    async def register_user(self, user_data: UserCreate, role: UserRole = UserRole.USER) -> User:
        """Raises 409 if the email is already registered."""
        if await self.users.get_by_email(user_data.email):
            logger.warning("registration_failed", reason="email_exists", email=user_data.email)
            raise ConflictError("Email already registered")

        user = User(
            email=user_data.email.lower(),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
            hashed_password=hash_password(user_data.password),
            role=role,
        )
        await self.users.add(user)
        await self.db.commit()

        logger.info("user_registered", user_id=user.id, email=user.email)
        return user

    async def authenticate_user(self, login_data: UserLogin) -> tuple[User, str]:
        """Return the user and a fresh JWT. Raises 401 on bad credentials."""
        user = await self.users.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.hashed_password):
            logger.warning("login_failed", email=login_data.email)
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthorizationError("Account is deactivated")

        logger.info("user_logged_in", user_id=user.id)
        return user, issue_token(user)

    async def update_profile(self, user: User, update: UserUpdate) -> User:
        for field, value in update.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("profile_updated", user_id=user.id)
        return user

    async def change_password(self, user: User, change: PasswordChange) -> None:
        if not verify_password(change.current_password, user.hashed_password):
            raise ValidationFailure("Current password is incorrect")
        user.hashed_password = hash_password(change.new_password)
        await self.db.commit()
        logger.info("password_changed", user_id=user.id)
