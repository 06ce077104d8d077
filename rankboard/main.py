from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from rankboard import __version__
from rankboard.config import Config
from rankboard.database.database import Database
from rankboard.routes import leaderboard
from rankboard.services.leaderboard import LeaderboardService
from rankboard.services.result_cache import ResultCache
from rankboard.services.score_store import ScoreStore
from rankboard.utils.logger import setup_logger

logger = setup_logger("rankboard")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the API with a lifespan that owns the database and the result cache."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting rankboard API...")
        Config.validate()

        database = Database(database_url)
        await database.initialize()

        cache = ResultCache()
        await cache.init()

        app.state.database = database
        app.state.cache = cache
        app.state.leaderboard_service = LeaderboardService(
            ScoreStore(database.session_factory), cache
        )
        logger.info("Startup complete")

        try:
            yield
        finally:
            logger.info("Shutting down rankboard API...")
            await cache.shutdown()
            await database.close()
            logger.info("Shutdown complete")

    app = FastAPI(title="rankboard", version=__version__, lifespan=lifespan)
    app.include_router(leaderboard.router)
    return app


def main():
    """Run the API server"""
    uvicorn.run(create_app(), host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    main()
