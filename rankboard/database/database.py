import random
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import select, func
from contextlib import asynccontextmanager

from rankboard.config import Config
from rankboard.database.models import Base, Account, Character, Score
import logging

USERNAME_PREFIXES = [
    "shadow", "iron", "swift", "crimson", "silent", "golden", "frost", "storm",
    "ember", "lunar", "rogue", "wild", "night", "stone", "arcane", "steel",
]
USERNAME_SUFFIXES = [
    "blade", "fang", "hunter", "mage", "wolf", "knight", "hawk", "warden",
    "seer", "rider", "smith", "caller", "strider", "thorn", "vow", "spark",
]

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.database_url = database_url
        self.engine = None
        self.async_session = None

    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        database_url = self.database_url or Config.get_database_url()

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        # Create all tables
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

        if Config.SEED_ON_STARTUP:
            await self.initialize_default_data()

    @property
    def session_factory(self):
        """Async session factory handed to the service layer"""
        return self.async_session

    async def initialize_default_data(self, account_count: Optional[int] = None):
        """Populate accounts, characters and scores if the store is empty"""
        if account_count is None:
            account_count = Config.SEED_ACCOUNT_COUNT

        async with self.transaction() as session:
            result = await session.execute(select(func.count(Account.acc_id)))
            existing = result.scalar()

            if existing > 0:
                self.logger.info("Data exists. Skipping generation.")
                return

            self.logger.info(f"Generating {account_count} accounts with scores...")
            for index in range(account_count):
                username = f"{random.choice(USERNAME_PREFIXES)}{random.choice(USERNAME_SUFFIXES)}{index}"
                account = Account(username=username, email=f"{username}@example.com")
                for class_id in Config.CLASS_IDS:
                    character = Character(class_id=class_id)
                    character.scores.append(
                        Score(reward_score=random.randint(Config.SEED_MIN_SCORE, Config.SEED_MAX_SCORE))
                    )
                    account.characters.append(character)
                session.add(account)

        self.logger.info("Data generation complete!")

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.

        All operations within the context are committed together on success,
        or rolled back together on failure.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")
