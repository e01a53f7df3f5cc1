"""Per-request session context passed explicitly to service operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from stackit.core.exceptions import AuthorizationError

if TYPE_CHECKING:
    from stackit.models.user import User


@dataclass(frozen=True)
class SessionContext:
    """Who is calling, as resolved from the bearer token.

    ``user`` is None for anonymous callers, including callers presenting an
    expired or revoked token.
    """

    user: Optional["User"] = None
    token_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require_user(self, action: str = "perform this action") -> "User":
        """Return the signed-in user or raise AuthorizationError."""
        if self.user is None:
            raise AuthorizationError(action)
        return self.user
