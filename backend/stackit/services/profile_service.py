"""Profile service for the signed-in user's public data."""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.models.profile import Profile

logger = structlog.get_logger(__name__)


class ProfileService:
    """Reads and updates the caller's profile row."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="profile_service")

    async def get_profile(self, ctx: SessionContext) -> Profile:
        """Return the caller's profile, creating it if the row is missing."""
        user = ctx.require_user("view your profile")
        profile = await self.db.get(Profile, user.id)
        if profile is None:
            profile = Profile(user_id=user.id, email=user.email)
            self.db.add(profile)
            await self.db.flush()
            self.logger.info("profile_backfilled", user_id=str(user.id))
        return profile

    async def update_avatar(self, ctx: SessionContext, avatar_url: Optional[str]) -> Profile:
        """Set or clear the caller's avatar."""
        profile = await self.get_profile(ctx)
        profile.avatar_url = avatar_url
        await self.db.flush()
        self.logger.info("profile_avatar_updated", user_id=str(profile.user_id), cleared=avatar_url is None)
        return profile
