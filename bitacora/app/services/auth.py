# bitacora/app/services/auth.py
import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.core.exceptions import Conflict, NotFound, Unauthorized
from bitacora.app.db.base import utcnow
from bitacora.app.models import User
from bitacora.app.models.user import ROLE_USER
from bitacora.app.repositories.interfaces import UserStore
from bitacora.app.schemas.user import LoginRequest, ProfileUpdate, UserCreate
from bitacora.app.security import hashing
from bitacora.app.security.jwt import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, session: AsyncSession, users: UserStore, tokens: TokenService):
        self._session = session
        self._users = users
        self._tokens = tokens

    async def register(self, data: UserCreate) -> Tuple[User, str]:
        """
        Create the account and mint its first token.

        Raises:
            Conflict: the email is already registered
        """
        email = str(data.email).strip().lower()
        if await self._users.get_by_email(email):
            logger.info("Registration rejected, email already in use: %s", email)
            raise Conflict("A user with this email already exists")

        user = await self._users.create(
            {
                "name": data.name.strip(),
                "email": email,
                "password_hash": hashing.get_password_hash(data.password),
                "role": ROLE_USER,
                "is_active": True,
                "profile_image": "",
            }
        )
        # A concurrent registration with the same email fails here with an
        # IntegrityError, which the global handler reports as Conflict
        await self._session.commit()
        logger.info("User registered: %s", user.id)
        return user, self._tokens.issue(user.id)

    async def login(self, credentials: LoginRequest) -> Tuple[User, str]:
        user = await self._users.get_by_email(str(credentials.email))
        if user is None:
            raise Unauthorized("Invalid email or password")
        if not user.is_active:
            raise Unauthorized("Account is disabled")
        if not hashing.verify_password(credentials.password, user.password_hash):
            raise Unauthorized("Invalid email or password")

        await self._users.update(user, {"last_login": utcnow()})
        await self._session.commit()
        logger.info("User logged in: %s", user.id)
        return user, self._tokens.issue(user.id)

    async def get_profile(self, user_id: str) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        user = await self.get_profile(user_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if update_data:
            await self._users.update(user, update_data)
            await self._session.commit()
        return user
