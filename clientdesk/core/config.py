from typing import List
from pydantic_settings import BaseSettings
from pydantic import validator

class Settings(BaseSettings):
    PROJECT_NAME: str = "ClientDesk"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Client, project and payment management for freelancers and agencies"
    API_V1_STR: str = "/api/v1"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://localhost:8000",  # Backend development
    ]

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str
    SUPABASE_CLIENT_TIMEOUT: int = 10
    STORAGE_BUCKET: str = "project-files"

    # Client portal links are built against the frontend origin.
    # When empty, the origin of the incoming request is used.
    PORTAL_ORIGIN: str = ""

    # Request queue
    REQUEST_QUEUE_CONCURRENCY: int = 2
    REQUEST_QUEUE_DELAY_MS: int = 100

    # Notifications
    TOAST_DURATION_MS: int = 4000
    NOTIFICATION_CAPACITY: int = 50

    # Dashboard
    ACTIVITY_WINDOW_DAYS: int = 30
    RECENT_ACTIVITY_LIMIT: int = 4

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""

    # Performance
    ENABLE_RESPONSE_COMPRESSION: bool = True

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @validator("PORTAL_ORIGIN")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
