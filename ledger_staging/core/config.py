from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    database_url: str = "sqlite:///./ledger_staging.db"
    # new_batch: every upload gets a fresh batch; append: reuse the current batch for the same bank account
    ingestion_mode: Literal["new_batch", "append"] = "new_batch"
    connector_url: str = "http://localhost:5000/api/tallyConnector"
    connector_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
