from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "DentalBill"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "dentalbill"
    DATABASE_URL: Optional[str] = None
    REDIS_URL: str = "redis://localhost:6379/0"

    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALLOW_CACHED_TENANT_FALLBACK: bool = True
    LOGIN_MAX_ATTEMPTS: int = 5
    LOGIN_LOCKOUT_SECONDS: int = 300

    # Admin panel basic credentials; the defaults are insecure on purpose
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_MESSAGING_SID: Optional[str] = None
    SMS_COUNTRY_CODE: str = "+91"

    S3_BUCKET: Optional[str] = None
    S3_PUBLIC_URL: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "ap-south-1"

    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MIN_BILL_AMOUNT: float = 10
    MIN_UPLOAD_BYTES: int = int(0.1 * 1024 * 1024)
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    IMAGE_FETCH_TIMEOUT_SECONDS: float = 10.0

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

    @property
    def sms_enabled(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_MESSAGING_SID)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.S3_BUCKET)

settings = Settings()
