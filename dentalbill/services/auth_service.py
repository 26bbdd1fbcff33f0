import json
import re
import secrets
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.config import settings
from dentalbill.core.exceptions import AuthError
from dentalbill.core.logger import logger
from dentalbill.core.redis import redis_client
from dentalbill.core.security import create_access_token, get_password_hash, verify_password
from dentalbill.db.models import ClinicProfile, Dentist
from dentalbill.schemas.auth import DentistInfo, LoginRequest, LoginResponse, SignupRequest

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_dentist_by_email(self, email: str) -> Dentist | None:
        stmt = select(Dentist).where(Dentist.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def signup(self, data: SignupRequest) -> LoginResponse:
        if not data.name.strip() or not data.email.strip() or not data.password:
            raise AuthError("auth/missing-fields")
        if not EMAIL_PATTERN.match(data.email.strip()):
            raise AuthError("auth/invalid-email")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise AuthError("auth/weak-password")
        if await self.get_dentist_by_email(data.email):
            raise AuthError("auth/email-already-in-use")

        dentist = Dentist(
            name=data.name.strip(),
            email=data.email.strip().lower(),
            password_hash=get_password_hash(data.password),
        )
        self.session.add(dentist)
        await self.session.flush()

        # Every account starts with an empty clinic profile
        self.session.add(ClinicProfile(dentist_id=dentist.id))
        await self.session.commit()
        await self.session.refresh(dentist)

        logger.info(f"Dentist account created: {dentist.id}")
        return await self._issue_token(dentist)

    async def login(self, data: LoginRequest) -> LoginResponse:
        email = data.email.strip().lower()
        if not email or not data.password:
            raise AuthError("auth/missing-fields")
        if not EMAIL_PATTERN.match(email):
            raise AuthError("auth/invalid-email")

        if await redis_client.get_failed_logins(email) >= settings.LOGIN_MAX_ATTEMPTS:
            raise AuthError("auth/too-many-requests")

        dentist = await self.get_dentist_by_email(email)
        if not dentist or not verify_password(data.password, dentist.password_hash):
            attempts = await redis_client.register_failed_login(email, settings.LOGIN_LOCKOUT_SECONDS)
            logger.warning(f"Failed login for {email} (attempt {attempts})")
            raise AuthError("auth/invalid-credential")

        if not dentist.is_active:
            raise AuthError("auth/user-disabled")

        await redis_client.clear_failed_logins(email)
        return await self._issue_token(dentist)

    async def logout(self, token: str) -> None:
        await redis_client.delete_token(token)

    async def _issue_token(self, dentist: Dentist) -> LoginResponse:
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": str(dentist.id)}, expires_delta=access_token_expires
        )

        token_data = {
            "dentist_id": str(dentist.id),
            "type": "dentist"
        }
        await redis_client.set_token(
            access_token,
            json.dumps(token_data),
            settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )

        return LoginResponse(
            access_token=access_token,
            token_type="bearer",
            dentist=DentistInfo.model_validate(dentist),
        )


async def admin_login(username: str, password: str) -> str | None:
    """Check the admin panel credentials; returns a session token stored in redis, or None."""
    expected_user = settings.ADMIN_USERNAME
    expected_password = settings.ADMIN_PASSWORD
    if not expected_user or not expected_password:
        logger.warning("ADMIN_USERNAME/ADMIN_PASSWORD not set, falling back to insecure defaults")
        expected_user = expected_user or "admin"
        expected_password = expected_password or "admin"

    user_ok = secrets.compare_digest(username.encode("utf-8"), expected_user.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    if not (user_ok and password_ok):
        logger.warning(f"Failed admin login for {username!r}")
        return None

    token = secrets.token_urlsafe(32)
    await redis_client.set_token(token, json.dumps({"type": "admin"}), settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)
    return token
