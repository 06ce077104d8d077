import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Service configuration settings"""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite+aiosqlite:///rankboard.db')

    # Server settings
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 8080))
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Cache settings (seconds)
    CACHE_EXPIRATION = int(os.getenv('CACHE_EXPIRATION', 300))         # 5 minutes
    CACHE_CLEANUP_INTERVAL = int(os.getenv('CACHE_CLEANUP_INTERVAL', 600))  # 10 minutes

    # Pagination settings
    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = 10
    MAX_RESULTS_PER_PAGE = 100

    # Character classes
    CLASS_IDS = tuple(range(1, 9))

    # Data generation settings
    SEED_ON_STARTUP = os.getenv('SEED_ON_STARTUP', 'False').lower() == 'true'
    SEED_ACCOUNT_COUNT = int(os.getenv('SEED_ACCOUNT_COUNT', 1000))
    SEED_MIN_SCORE = 10
    SEED_MAX_SCORE = 1000

    @classmethod
    def get_database_url(cls) -> str:
        """Get the database URL with an async driver"""
        database_url = cls.DATABASE_URL
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        elif database_url.startswith('postgresql://'):
            database_url = database_url.replace('postgresql://', 'postgresql+asyncpg://')
        return database_url

    @classmethod
    def validate(cls):
        """Validate that configuration values are usable"""
        if cls.CACHE_EXPIRATION <= 0:
            raise ValueError("CACHE_EXPIRATION must be a positive number of seconds")
        if cls.CACHE_CLEANUP_INTERVAL <= 0:
            raise ValueError("CACHE_CLEANUP_INTERVAL must be a positive number of seconds")
        if not 1 <= cls.DEFAULT_LIMIT <= cls.MAX_RESULTS_PER_PAGE:
            raise ValueError("DEFAULT_LIMIT must be between 1 and MAX_RESULTS_PER_PAGE")
        if cls.SEED_ACCOUNT_COUNT < 0:
            raise ValueError("SEED_ACCOUNT_COUNT cannot be negative")
