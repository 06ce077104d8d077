"""
Score generation and submission for accounts.

Writes here never touch the result cache; listings may serve the previous
standings until their cache entries expire.
"""

import logging
import random

from sqlalchemy import select

from rankboard.config import Config
from rankboard.database.models import Account, Character, Score
from rankboard.services.base import BaseService

logger = logging.getLogger(__name__)


class ScoreService(BaseService):
    """Creates characters and records reward scores."""

    async def generate_scores_for_account(self, acc_id: int) -> int:
        """
        Give an account one character per configured class, each with a random score.

        Classes the account already owns are skipped. Returns the number of
        characters created.
        """
        async with self.write_session() as session:
            account = await session.get(Account, acc_id)
            if account is None:
                raise ValueError(f"Account {acc_id} does not exist")

            result = await session.execute(
                select(Character.class_id).where(Character.acc_id == acc_id)
            )
            owned = set(result.scalars().all())

            created = 0
            for class_id in Config.CLASS_IDS:
                if class_id in owned:
                    continue
                character = Character(acc_id=acc_id, class_id=class_id)
                character.scores.append(
                    Score(reward_score=random.randint(Config.SEED_MIN_SCORE, Config.SEED_MAX_SCORE))
                )
                session.add(character)
                created += 1

        logger.info(f"Scores generated successfully for account ID {acc_id} ({created} characters).")
        return created

    async def submit_score(self, acc_id: int, class_id: int, reward_score: int) -> Score:
        """Append a score for the account's character of the given class."""
        if class_id not in Config.CLASS_IDS:
            raise ValueError(f"Unknown class id: {class_id}")

        async with self.write_session() as session:
            character = await session.scalar(
                select(Character).where(
                    Character.acc_id == acc_id,
                    Character.class_id == class_id
                )
            )

            if character is None:
                if await session.get(Account, acc_id) is None:
                    raise ValueError(f"Account {acc_id} does not exist")
                character = Character(acc_id=acc_id, class_id=class_id)
                session.add(character)
                await session.flush()  # Get the char_id without committing

            score = Score(char_id=character.char_id, reward_score=reward_score)
            session.add(score)
            await session.flush()

        logger.info(f"Recorded score {reward_score} for account ID {acc_id}, class {class_id}")
        return score
