"""Authentication service: JWT tokens, password hashing, sessions."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from stackit.config import settings
from stackit.core.context import SessionContext
from stackit.core.exceptions import ValidationFailure
from stackit.models.profile import Profile
from stackit.models.user import User
from stackit.services.cache_service import CacheService

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded access token."""

    user_id: str
    token_id: Optional[str]
    expires_at: Optional[datetime]


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: uuid.UUID) -> str:
    """Create a JWT access token for the given user ID.

    Each token gets a random ``jti`` so it can be revoked on sign-out.
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "jti": uuid.uuid4().hex,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenClaims]:
    """Decode a JWT token, or return None if it is invalid or expired."""
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    sub = payload.get("sub")
    if not sub:
        return None
    exp = payload.get("exp")
    return TokenClaims(
        user_id=sub,
        token_id=payload.get("jti"),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
    )


class AuthService:
    """Handles sign-up, sign-in, sign-out and session lookup."""

    def __init__(self, db: AsyncSession, cache: Optional[CacheService] = None):
        self.db = db
        self.cache = cache
        self.logger = logger.bind(service="auth_service")

    async def sign_up(self, email: str, password: str) -> User:
        """Create an account and its profile.

        Raises:
            ValidationFailure: If the email is already registered
        """
        email = email.lower()
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none():
            raise ValidationFailure("This email is already registered", field="email")

        user = User(
            email=email,
            hashed_password=hash_password(password),
            profile=Profile(email=email),
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationFailure("This email is already registered", field="email")

        self.logger.info("user_signed_up", user_id=str(user.id))
        return user

    async def sign_in(self, email: str, password: str) -> Optional[User]:
        """Verify credentials and return the user, or None if invalid."""
        stmt = (
            select(User)
            .options(selectinload(User.profile))
            .where(User.email == email.lower())
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            self.logger.info("sign_in_rejected", email=email)
            return None

        if not user.is_active:
            return None

        user.last_login_at = datetime.now(timezone.utc)
        self.logger.info("user_signed_in", user_id=str(user.id))
        return user

    async def sign_out(self, ctx: SessionContext) -> bool:
        """Revoke the caller's token until it expires.

        Raises:
            AuthorizationError: If the caller is not signed in
        """
        user = ctx.require_user("sign out")
        if not ctx.token_id or self.cache is None:
            return False

        ttl = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
        if ctx.expires_at is not None:
            ttl = int((ctx.expires_at - datetime.now(timezone.utc)).total_seconds())
        if ttl <= 0:
            return True

        revoked = await self.cache.revoke_token(ctx.token_id, ttl)
        self.logger.info("user_signed_out", user_id=str(user.id), revoked=revoked)
        return revoked

    async def resolve_session(self, token: Optional[str]) -> SessionContext:
        """Build the session context for a bearer token.

        Missing, invalid, expired or revoked tokens give an anonymous context.
        """
        if not token:
            return SessionContext.anonymous()

        claims = decode_access_token(token)
        if claims is None:
            return SessionContext.anonymous()

        try:
            user_id = uuid.UUID(claims.user_id)
        except ValueError:
            return SessionContext.anonymous()

        if claims.token_id and self.cache is not None:
            if await self.cache.is_token_revoked(claims.token_id):
                return SessionContext.anonymous()

        user = await self.get_user_by_id(user_id)
        if not user or not user.is_active:
            return SessionContext.anonymous()

        return SessionContext(
            user=user,
            token_id=claims.token_id,
            expires_at=claims.expires_at,
        )

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Fetch user by ID with the profile loaded."""
        stmt = (
            select(User)
            .options(selectinload(User.profile))
            .where(User.id == user_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
