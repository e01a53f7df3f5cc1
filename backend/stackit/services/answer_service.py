"""Answer service for question discussions."""

import uuid
from typing import List

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.core.exceptions import NotFoundError, ValidationFailure
from stackit.models.answer import Answer
from stackit.models.question import Question

logger = structlog.get_logger(__name__)


class AnswerService:
    """Handles posting and listing answers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="answer_service")

    async def list_answers(self, question_id: uuid.UUID) -> List[Answer]:
        """Get all answers for a question, highest voted first."""
        stmt = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(Answer.vote_count.desc(), Answer.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_answer(
        self,
        ctx: SessionContext,
        question_id: uuid.UUID,
        content: str,
    ) -> Answer:
        """Answer a question and bump its answer_count.

        Raises:
            AuthorizationError: If the caller is not signed in
            ValidationFailure: If the answer body is empty
            NotFoundError: If the question does not exist
        """
        user = ctx.require_user("submit an answer")

        if not content or not content.strip():
            raise ValidationFailure("Please enter your answer", field="content")

        question = await self.db.get(Question, question_id)
        if question is None:
            raise NotFoundError("Question", str(question_id))

        answer = Answer(
            question_id=question_id,
            user_id=user.id,
            content=content,
            vote_count=0,
        )
        self.db.add(answer)
        question.answer_count = Question.answer_count + 1
        await self.db.flush()
        await self.db.refresh(question, ["answer_count"])

        self.logger.info(
            "answer_created",
            answer_id=str(answer.id),
            question_id=str(question_id),
            user_id=str(user.id),
        )
        return answer
