
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" or "json"
    DATA_DIR: str = "./data/shops"

    DIRECTORY_PROVIDER: str = "static"  # "static" or "http"
    DIRECTORY_SEED_PATH: str | None = None
    USER_SERVICE_URL: str = "http://127.0.0.1:8001/api/users/"
    SHOP_SERVICE_URL: str = "http://127.0.0.1:8001/api/shops/"
    DIRECTORY_TIMEOUT_SECONDS: float = 5.0

    DEFAULT_FAMILY_MEMBERS: int = 4
    RESERVATION_MAX_RETRIES: int = 3


settings = Settings()
