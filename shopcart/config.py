# shopcart/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from pathlib import Path

class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # where the local store file lives
    STORE_FILE: str = "storage.csv"
    CART_STORAGE_KEY: str = "@RocketShoes:cart"

    # catalog + stock API (json-server style: /products/{id}, /stock/{id})
    API_BASE_URL: str = "http://localhost:3333"
    HTTP_TIMEOUT: float = 5.0

    LOG_LEVEL: str = "INFO"

    # Example .env:
    # DATA_DIR=./data
    # API_BASE_URL=http://localhost:3333

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
