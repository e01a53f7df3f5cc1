"""Vote service for per-user question and answer votes."""

import uuid
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Union

import structlog
from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.core.exceptions import NotFoundError, RemoteServiceError
from stackit.models.answer import Answer
from stackit.models.question import Question
from stackit.models.user_vote import UserVote
from stackit.services.vote_tally import VoteDirection, VoteTally

logger = structlog.get_logger(__name__)

TargetKind = Literal["question", "answer"]


@dataclass(frozen=True)
class VoteTarget:
    """The question or answer a vote applies to."""

    kind: TargetKind
    id: uuid.UUID

    @property
    def model(self):
        return Question if self.kind == "question" else Answer

    @property
    def column(self):
        return UserVote.question_id if self.kind == "question" else UserVote.answer_id


@dataclass
class VoteResult:
    """Committed aggregate count after a vote."""

    target_type: TargetKind
    target_id: uuid.UUID
    vote_count: int
    user_vote: Optional[str]

    def to_dict(self) -> Dict[str, Optional[Union[str, int]]]:
        return {
            "target_type": self.target_type,
            "target_id": str(self.target_id),
            "vote_count": self.vote_count,
            "user_vote": self.user_vote,
        }


class VoteService:
    """Handles voting with per-user tracking.

    The vote record and the target's aggregate ``vote_count`` change in the
    same transaction, so the aggregate always equals the signed sum of the
    target's records.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="vote_service")

    async def vote(
        self,
        ctx: SessionContext,
        target: VoteTarget,
        vote_type: Union[str, VoteDirection],
    ) -> VoteResult:
        """Cast, switch or retract a vote.

        Voting the same way twice removes the vote. Voting the other way
        replaces the existing record.

        Raises:
            AuthorizationError: If the caller is not signed in
            NotFoundError: If the target does not exist
            ValueError: If vote_type is not "up" or "down"
            RemoteServiceError: If the data layer rejects the change
        """
        user = ctx.require_user("vote")
        direction = VoteDirection.coerce(vote_type)
        if direction is VoteDirection.NONE:
            raise ValueError("vote_type must be 'up' or 'down'")

        # Row lock on the target serializes concurrent votes on it
        lock_stmt = (
            select(target.model)
            .where(target.model.id == target.id)
            .with_for_update()
        )
        row = (await self.db.execute(lock_stmt)).scalar_one_or_none()
        if row is None:
            raise NotFoundError(target.kind.capitalize(), str(target.id))

        existing = await self._current_vote(user.id, target)

        tally = VoteTally(
            votes=row.vote_count,
            user_vote=existing.vote_type if existing else VoteDirection.NONE,
        )
        delta = tally.click(direction)

        try:
            applied = await self._write_vote_record(user.id, target, existing, tally.user_vote)
            if applied:
                row.vote_count = target.model.vote_count + delta
                await self.db.flush()
                await self.db.refresh(row, ["vote_count"])
        except SQLAlchemyError as e:
            self.logger.error(
                "vote_failed",
                target=target.kind,
                target_id=str(target.id),
                error=str(e),
            )
            raise RemoteServiceError("Failed to submit vote") from e

        if not applied:
            # Record changed since it was read; the count is left untouched
            self.logger.warning(
                "vote_conflict",
                target=target.kind,
                target_id=str(target.id),
                user_id=str(user.id),
            )
            raise RemoteServiceError("Failed to submit vote")

        self.logger.info(
            "vote_recorded",
            target=target.kind,
            target_id=str(target.id),
            user_id=str(user.id),
            delta=delta,
            vote_count=row.vote_count,
        )

        return VoteResult(
            target_type=target.kind,
            target_id=target.id,
            vote_count=row.vote_count,
            user_vote=tally.user_vote_value,
        )

    async def _current_vote(
        self,
        user_id: uuid.UUID,
        target: VoteTarget,
    ) -> Optional[UserVote]:
        stmt = select(UserVote).where(
            UserVote.user_id == user_id,
            target.column == target.id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _write_vote_record(
        self,
        user_id: uuid.UUID,
        target: VoteTarget,
        existing: Optional[UserVote],
        new_direction: VoteDirection,
    ) -> bool:
        """Apply the record change implied by a click.

        Deletes and updates only match the record as it was read, so a
        record changed by another request in the meantime matches no rows.

        Returns:
            False if the stored record no longer matches ``existing``
        """
        if existing is None:
            self.db.add(UserVote(
                user_id=user_id,
                question_id=target.id if target.kind == "question" else None,
                answer_id=target.id if target.kind == "answer" else None,
                vote_type=new_direction.value,
            ))
            await self.db.flush()
            return True

        matches_read = (UserVote.id == existing.id) & (UserVote.vote_type == existing.vote_type)
        if new_direction is VoteDirection.NONE:
            stmt = delete(UserVote).where(matches_read)
        else:
            stmt = update(UserVote).where(matches_read).values(vote_type=new_direction.value)
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def get_user_vote(
        self,
        ctx: SessionContext,
        target: VoteTarget,
    ) -> Optional[str]:
        """Get the caller's vote type for a target, or None."""
        if not ctx.is_authenticated:
            return None
        stmt = select(UserVote.vote_type).where(
            UserVote.user_id == ctx.user.id,
            target.column == target.id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_votes(
        self,
        ctx: SessionContext,
        question_id: uuid.UUID,
    ) -> Dict[str, str]:
        """Map target id to vote type for a question and all of its answers.

        Anonymous callers get an empty map.
        """
        if not ctx.is_authenticated:
            return {}

        answer_ids = select(Answer.id).where(Answer.question_id == question_id)
        stmt = select(UserVote).where(
            UserVote.user_id == ctx.user.id,
            or_(
                UserVote.question_id == question_id,
                UserVote.answer_id.in_(answer_ids),
            ),
        )
        result = await self.db.execute(stmt)
        return {str(v.target_id): v.vote_type for v in result.scalars().all()}

    async def recount_vote_totals(self, dry_run: bool = False) -> int:
        """Recompute every aggregate vote_count from vote records.

        Args:
            dry_run: Report drift without writing corrections

        Returns:
            Number of questions and answers whose stored count was wrong
        """
        signed = func.coalesce(
            func.sum(case((UserVote.vote_type == "up", 1), else_=-1)), 0
        )
        corrected = 0

        for model, column in (
            (Question, UserVote.question_id),
            (Answer, UserVote.answer_id),
        ):
            totals_stmt = (
                select(column, signed)
                .where(column.isnot(None))
                .group_by(column)
            )
            totals = {
                target_id: int(total)
                for target_id, total in (await self.db.execute(totals_stmt)).all()
            }

            rows = (await self.db.execute(select(model))).scalars().all()
            for row in rows:
                expected = totals.get(row.id, 0)
                if row.vote_count != expected:
                    self.logger.warning(
                        "vote_count_drift",
                        target=model.__tablename__,
                        target_id=str(row.id),
                        stored=row.vote_count,
                        expected=expected,
                    )
                    corrected += 1
                    if not dry_run:
                        row.vote_count = expected

        if not dry_run:
            await self.db.flush()

        self.logger.info("vote_totals_recounted", corrected=corrected, dry_run=dry_run)
        return corrected
