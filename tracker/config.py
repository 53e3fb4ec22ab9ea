from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Central configuration loaded from environment variables (or a .env file).
    Every value has a development default so the app starts with no setup.
    """

    # SQLite file by default; point at PostgreSQL in production
    DATABASE_URL: str = "sqlite:///./tracker.db"

    # JWT settings
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 24

    # bcrypt work factor, fixed for every stored hash
    BCRYPT_ROUNDS: int = 10

    # slowapi limits, in its "<count>/<period>" notation
    RATE_LIMIT: str = "60/minute"
    AUTH_RATE_LIMIT: str = "10/minute"
    RATE_LIMIT_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"

    # uvicorn bind address for the `investment-tracker` command
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        env_file = ".env"


settings = Settings()
