from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import Optional

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Email delivery. Without SMTP_HOST emails are written to the log instead.
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    FROM_EMAIL: str = "noreply@travelplan.app"
    FRONTEND_BASE_URL: str = "http://localhost:3000"

    PROJECT_NAME: str = "Travel Plan API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Trip planning with shared membership and invitations"
    APP_NAME: str = "Travel Plan"

    PASSWORD_MIN_LENGTH: int = 6
    VERIFICATION_TOKEN_TTL_HOURS: int = 24
    USER_SEARCH_LIMIT: int = 10
    USER_SEARCH_MIN_QUERY_LENGTH: int = 2

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
