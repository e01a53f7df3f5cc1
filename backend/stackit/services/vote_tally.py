"""Vote tally state machine shared by listing cards and the vote service.

A tally pairs a displayed count with the viewer's current vote direction.
Clicking the active direction retracts it, clicking the other direction
flips it, and clicking from neutral casts a fresh vote. The displayed count
is always ``base_count + weight(user_vote)`` no matter how it was reached.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class VoteDirection(str, Enum):
    """Direction of a single user's vote on a target."""

    UP = "up"
    DOWN = "down"
    NONE = "none"

    @classmethod
    def coerce(cls, value: Optional[Union[str, "VoteDirection"]]) -> "VoteDirection":
        """Map a stored vote_type (or None) onto a direction.

        Raises:
            ValueError: If value is not a known direction
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"vote_type must be 'up' or 'down', got {value!r}") from None


def weight(direction: VoteDirection) -> int:
    """Signed contribution of a single vote to an aggregate count."""
    if direction is VoteDirection.UP:
        return 1
    if direction is VoteDirection.DOWN:
        return -1
    return 0


@dataclass
class VoteTally:
    """Displayed vote count plus the viewer's current direction."""

    votes: int
    user_vote: VoteDirection = VoteDirection.NONE

    def __post_init__(self) -> None:
        self.user_vote = VoteDirection.coerce(self.user_vote)

    @property
    def base_count(self) -> int:
        """Count with the viewer's own vote removed."""
        return self.votes - weight(self.user_vote)

    def click(self, direction: Union[str, VoteDirection]) -> int:
        """Apply an up/down click and return the change to ``votes``.

        Args:
            direction: "up" or "down"

        Returns:
            Delta applied to the count: -1/+1 for a retraction, +1/-1 for a
            fresh vote, +2/-2 for a flip

        Raises:
            ValueError: If direction is not "up" or "down"
        """
        direction = VoteDirection.coerce(direction)
        if direction is VoteDirection.NONE:
            raise ValueError("vote_type must be 'up' or 'down'")

        if self.user_vote is direction:
            new_direction = VoteDirection.NONE
        else:
            new_direction = direction

        delta = weight(new_direction) - weight(self.user_vote)
        self.votes += delta
        self.user_vote = new_direction
        return delta

    @property
    def user_vote_value(self) -> Optional[str]:
        """The direction as stored on a vote record, None when neutral."""
        if self.user_vote is VoteDirection.NONE:
            return None
        return self.user_vote.value
