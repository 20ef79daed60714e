import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Database settings
    database_file: str = os.getenv("LIBRARY_DB_FILE", "books.db")
    test_database_file: str = os.getenv("LIBRARY_TEST_DB_FILE", "books-test.db")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Bookstore API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def db_file(self) -> str:
        """SQLite file for the current environment; test runs get their own database."""
        if self.environment == "test":
            return self.test_database_file
        return self.database_file


settings = Settings()
