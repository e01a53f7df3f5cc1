"""Question service: posting, lookup and listing.

Listings are derived in memory from the full question collection on every
call (see ``stackit.services.listing``), then paginated.
"""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.core.context import SessionContext
from stackit.core.exceptions import NotFoundError
from stackit.models.question import Question
from stackit.schemas.question import normalize_tags
from stackit.services.listing import paginate, popular_tags, render_listing

logger = structlog.get_logger(__name__)


class QuestionService:
    """Handles question CRUD and listing."""

    def __init__(self, db: AsyncSession):
        """Initialize question service.

        Args:
            db: Async database session
        """
        self.db = db
        self.logger = logger.bind(service="question_service")

    async def create_question(
        self,
        ctx: SessionContext,
        title: str,
        description: str,
        tags: Sequence[str],
    ) -> Question:
        """Post a new question as the signed-in user.

        Raises:
            AuthorizationError: If the caller is not signed in
        """
        user = ctx.require_user("ask a question")

        question = Question(
            user_id=user.id,
            title=title,
            description=description,
            tags=normalize_tags(list(tags)),
            vote_count=0,
            answer_count=0,
        )
        self.db.add(question)
        await self.db.flush()

        self.logger.info(
            "question_created",
            question_id=str(question.id),
            user_id=str(user.id),
            tags=question.tags,
        )
        return question

    async def get_question(self, question_id: UUID) -> Question:
        """Get a single question.

        Raises:
            NotFoundError: If the question does not exist
        """
        question = await self.db.get(Question, question_id)
        if question is None:
            raise NotFoundError("Question", str(question_id))
        return question

    async def get_all_questions(self) -> List[Question]:
        """Load the full question collection."""
        result = await self.db.execute(select(Question))
        return list(result.scalars().all())

    async def list_questions(
        self,
        sort_by: str = "newest",
        tag: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Question], int]:
        """Get one page of questions filtered by tag and ordered by sort_by.

        Args:
            sort_by: "newest", "votes" or "answers"
            tag: Case-insensitive substring matched against each tag
            page: Page number (1-indexed)
            limit: Results per page

        Returns:
            Tuple of (questions on this page, total matching questions)
        """
        questions = await self.get_all_questions()
        ordered = render_listing(questions, sort_by=sort_by, tag=tag)
        items, total = paginate(ordered, page=page, limit=limit)

        self.logger.info(
            "questions_listed",
            sort=sort_by,
            tag=tag,
            page=page,
            count=len(items),
            total=total,
        )
        return items, total

    async def get_popular_tags(self, limit: int = 12) -> List[Tuple[str, int]]:
        """Most used tags across all questions."""
        questions = await self.get_all_questions()
        return popular_tags(questions, limit=limit)
