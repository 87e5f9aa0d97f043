from pydantic_settings import BaseSettings
from typing import Optional

from satledger.core.errors import FieldPolicy


class Settings(BaseSettings):
    PROJECT_NAME: str = "SatLedger"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: str = "scraped.db"

    CELESTRAK_SUPPLEMENTAL_URL: str = "https://celestrak.org/NORAD/elements/supplemental/"
    REQUEST_TIMEOUT_SECONDS: float = 60.0
    INGEST_INTERVAL_MINUTES: int = 60

    # zero_fill keeps the record and logs each unparseable field, strict rejects it
    FIELD_POLICY: FieldPolicy = FieldPolicy.ZERO_FILL
    LOG_LEVEL: str = "INFO"

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            # SQLAlchemy no longer accepts the 'postgres://' scheme some providers hand out
            url = self.DATABASE_URL
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url
        return f"sqlite:///{self.SQLITE_PATH}"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
