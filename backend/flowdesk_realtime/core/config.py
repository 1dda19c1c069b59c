from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "flowdesk-realtime"
    APP_ENV: str = os.getenv("APP_ENV", "development")
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4001
    SOCKETIO_PATH: str = "socket.io"

    # CORS (comma separated allow-list)
    CORS_ORIGIN: str = "http://localhost:3000"

    # JWT (shared with the API layer that mints realtime tokens)
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM: str = "HS256"

    # Realtime tokens
    REALTIME_TOKEN_ISSUER: str = "flowdesk"
    REALTIME_TOKEN_AUDIENCE: str = "flowdesk-realtime"
    REALTIME_TOKEN_TTL_SECONDS: int = 120
    REALTIME_VERIFY_ISSUER: bool = True

    # Emit gateway
    REALTIME_SERVER_SECRET: str = os.getenv("REALTIME_SERVER_SECRET", "")
    REALTIME_SERVER_URL: str = os.getenv("REALTIME_SERVER_URL", "")
    EMIT_MAX_BODY_BYTES: int = 1024 * 1024
    EMIT_CLIENT_TIMEOUT_SECONDS: float = 5.0

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGIN.split(",")]
        return [o for o in origins if o] or ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
