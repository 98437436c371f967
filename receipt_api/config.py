import os

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel

load_dotenv()

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


class Settings(BaseModel):
    receipt_provider: str = "gemini"
    google_api_key: str | None = None
    openai_api_key: str | None = None
    gemini_model: str = "gemini-1.5-pro"
    openai_model: str = "gpt-4o"
    app_env: str = "production"
    max_upload_bytes: int = MAX_FILE_SIZE
    cors_origins: list[str] = ["*"]
    sentry_dsn: str | None = None

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*").split(",")
        return cls(
            receipt_provider=os.getenv("RECEIPT_PROVIDER", "gemini").strip().lower(),
            google_api_key=_env("GOOGLE_API_KEY"),
            openai_api_key=_env("OPENAI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-pro"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            app_env=os.getenv("APP_ENV", "production"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(MAX_FILE_SIZE))),
            cors_origins=[o.strip() for o in origins if o.strip()],
            sentry_dsn=_env("SENTRY_DSN"),
        )


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings
