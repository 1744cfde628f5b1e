from dotenv import load_dotenv
from pydantic import BaseModel
from typing import Optional
import os

# Load .env automatically
load_dotenv()


def _postgres_url() -> str:
    return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}".format(
        user=os.getenv("POSTGRES_USER", "postgres"),
        password=os.getenv("POSTGRES_PASSWORD", "123"),
        host=os.getenv("POSTGRES_HOST", "localhost"),
        port=int(os.getenv("POSTGRES_PORT") or 5432),
        name=os.getenv("POSTGRES_DB", "accounting_app"),
    )


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "development")
    database_url: str = os.getenv("DATABASE_URL") or _postgres_url()
    database_name: str = os.getenv("POSTGRES_DB", "accounting_app")
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT") or 5700)
    static_dir: Optional[str] = os.getenv("STATIC_DIR", "public")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() == "true"

    @property
    def is_test(self) -> bool:
        return self.environment.lower() == "test"


# Global settings instance
settings = Settings()
