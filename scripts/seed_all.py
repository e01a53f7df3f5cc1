"""Seed a development database with demo content.

This script prepares a fresh StackIt database:
1. Tables - created if missing
2. Demo questions - five sample questions from five demo authors

Usage:
    python scripts/seed_all.py
"""

import asyncio
import os
import sys

# Add backend to path so we can import stackit modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from stackit.db.seed import DEMO_PASSWORD, main as seed_main


async def seed_all():
    """Run the seeding steps in order."""
    print("\n" + "=" * 70)
    print("  StackIt Database Seeding")
    print("=" * 70)

    try:
        await seed_main()

        print("\n📋 Next Steps:")
        print("   1. Start the backend server: cd backend && uvicorn stackit.main:app --reload")
        print(f"   2. Log in as john_dev@stackit.dev with password '{DEMO_PASSWORD}'")
        print("   3. Check the API docs: http://localhost:8000/docs\n")

    except Exception as e:
        print(f"\n🔥 Error: {e}")
        print("\n💡 Troubleshooting:")
        print("   - Make sure PostgreSQL is running")
        print("   - Check your DATABASE_URL in .env\n")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(seed_all())
