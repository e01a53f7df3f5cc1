"""Demo content for development databases.

Populates an empty database with a handful of questions so the listing,
tag filter and sort orders have something to show.
Run with: python -m stackit.db.seed
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add backend directory to path
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import select

from stackit.db.session import async_session_factory, create_tables
from stackit.models import Profile, Question, User
from stackit.services.auth_service import hash_password

DEMO_PASSWORD = "stackit-demo"

DEMO_QUESTIONS = [
    {
        "author": "john_dev",
        "age": timedelta(hours=2),
        "title": "How to use React hooks effectively in a large application?",
        "description": (
            "I'm working on a large React application and I'm struggling with state "
            "management using hooks. What are the best practices for organizing hooks "
            "in a complex component hierarchy?"
        ),
        "tags": ["React", "Hooks", "JavaScript"],
    },
    {
        "author": "sarah_codes",
        "age": timedelta(hours=4),
        "title": "Best practices for TypeScript with React components",
        "description": (
            "I'm new to TypeScript and want to know the best way to type React "
            "components, props, and state. What are the common patterns?"
        ),
        "tags": ["TypeScript", "React", "Frontend"],
    },
    {
        "author": "mike_web",
        "age": timedelta(days=1),
        "title": "How to optimize performance in Next.js applications?",
        "description": (
            "My Next.js app is getting slower as it grows. What are the key "
            "optimization techniques I should implement?"
        ),
        "tags": ["Next.js", "Performance", "Optimization"],
    },
    {
        "author": "anna_designer",
        "age": timedelta(days=2),
        "title": "Understanding CSS Grid vs Flexbox - when to use which?",
        "description": (
            "I'm often confused about when to use CSS Grid and when to use Flexbox. "
            "Can someone explain the key differences and use cases?"
        ),
        "tags": ["CSS", "Grid", "Flexbox", "Layout"],
    },
    {
        "author": "dev_security",
        "age": timedelta(days=3),
        "title": "JWT authentication in Node.js - security best practices",
        "description": (
            "I'm implementing JWT authentication in my Node.js API. What are the "
            "security considerations and best practices I should follow?"
        ),
        "tags": ["Node.js", "JWT", "Security", "Authentication"],
    },
]


async def seed_demo_content() -> int:
    """Insert demo authors and questions unless questions already exist.

    Returns:
        Number of questions inserted
    """
    async with async_session_factory() as session:
        result = await session.execute(select(Question).limit(1))
        if result.scalar_one_or_none():
            print("Questions already seeded. Skipping...")
            return 0

        now = datetime.now(timezone.utc)
        password_hash = hash_password(DEMO_PASSWORD)
        authors = {}

        for data in DEMO_QUESTIONS:
            author = authors.get(data["author"])
            if author is None:
                email = f"{data['author']}@stackit.dev"
                author = User(
                    email=email,
                    hashed_password=password_hash,
                    profile=Profile(email=email),
                )
                session.add(author)
                authors[data["author"]] = author

            session.add(Question(
                user=author,
                title=data["title"],
                description=data["description"],
                tags=data["tags"],
                created_at=now - data["age"],
            ))

        await session.commit()
        print(f"✓ Seeded {len(DEMO_QUESTIONS)} questions from {len(authors)} authors")
        return len(DEMO_QUESTIONS)


async def main():
    """Create tables and seed demo content."""
    print("Starting database seeding...")

    try:
        await create_tables()
        await seed_demo_content()
        print("\n✅ Database seeding completed successfully!")
    except Exception as e:
        print(f"\n❌ Error during seeding: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
