"""
SocialNet Backend — Database Bootstrap
========================================

What:  Creates the schema from the ORM metadata and optionally inserts a
       small sample data set.
Usage:
    python -m socialnet.seed                 # create missing tables
    python -m socialnet.seed --reset         # drop and recreate every table
    python -m socialnet.seed --test-data     # ... and add sample rows
    CREATE_TEST_DATA=true python -m socialnet.seed

Sample data (skipped when testuser already exists):
    user testuser / test@example.com / password123 (age 25, Taipei)
    one post, one comment on it and one like on it, all by testuser

Production schemas are managed by Alembic; this is for local runs and demos.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from socialnet.config import settings
from socialnet.database import async_session_factory, check_connection, create_tables, engine
from socialnet.repositories import CommentRepository, LikeRepository, PostRepository, UserRepository
from socialnet.security import hash_password

logger = logging.getLogger("socialnet.seed")

TEST_USER = {
    "username": "testuser",
    "email": "test@example.com",
    "password": "password123",
    "age": 25,
    "city": "Taipei",
}
TEST_POST_CONTENT = "This is the first post on the platform. Welcome!"
TEST_COMMENT_CONTENT = "Great post!"


async def create_test_data(session_factory: async_sessionmaker = async_session_factory) -> bool:
    """
    Inserts the sample user, post, comment and like in one transaction.

    Returns False (and changes nothing) when the sample user already exists.
    """
    async with session_factory() as session:
        async with session.begin():
            users = UserRepository(session)
            if await users.find_by_username(TEST_USER["username"]) is not None:
                logger.info("Test data already present, skipping")
                return False

            user = await users.create(
                {
                    "username": TEST_USER["username"],
                    "email": TEST_USER["email"],
                    "password_hash": hash_password(TEST_USER["password"]),
                    "age": TEST_USER["age"],
                    "city": TEST_USER["city"],
                }
            )
            post = await PostRepository(session).create(
                {"user_id": user.id, "content": TEST_POST_CONTENT}
            )
            await CommentRepository(session).create(
                {"post_id": post.id, "user_id": user.id, "content": TEST_COMMENT_CONTENT}
            )
            await LikeRepository(session).toggle(post.id, user.id)

    logger.info("Created test user %s with one post, comment and like", TEST_USER["username"])
    return True


async def bootstrap(
    with_test_data: bool = False,
    reset: bool = False,
    db_engine: AsyncEngine = engine,
    session_factory: async_sessionmaker = async_session_factory,
) -> None:
    connected, error = await check_connection(db_engine)
    if not connected:
        raise RuntimeError(f"Cannot connect to the database: {error}")
    logger.info("Database connection established")

    await create_tables(db_engine, drop_first=reset)
    logger.info("Tables %s", "recreated" if reset else "created")

    if with_test_data:
        await create_test_data(session_factory)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m socialnet.seed",
        description="Create the SocialNet database schema.",
    )
    parser.add_argument("--test-data", action="store_true", help="insert sample user, post, comment and like")
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> None:
    try:
        await bootstrap(
            with_test_data=args.test_data or settings.create_test_data,
            reset=args.reset,
        )
    finally:
        await engine.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    args = parse_args(argv)
    try:
        asyncio.run(_main(args))
    except Exception as e:
        logger.error("Database bootstrap failed: %s", e, exc_info=True)
        return 1
    logger.info("Database bootstrap complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
