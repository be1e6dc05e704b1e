from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    PROJECT_NAME: str = "Droguerie Inventory"
    DEBUG: bool = False

    # MySQL
    DB_HOST: str = "localhost"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "droguerie_jamal_inventory"
    DB_PORT: int = 3306
    USE_MYSQL: bool = True  # False -> JSON files under DATA_DIR
    DATABASE_URL: str | None = None  # overrides the DB_* options, e.g. sqlite+aiosqlite:///./inventory.db
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0  # seconds a request waits for a free connection

    # Storage
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 5_000_000  # bytes
    DATA_DIR: str = "data"
    SERVERLESS_DATA_DIR: str = "/tmp"
    CATEGORY_PLACEHOLDER: str = "Unknown"

    # Client side (facade)
    API_BASE_URL: str = "http://localhost:5000/api"
    CLIENT_TIMEOUT: float = 10.0
    OFFLINE_STORAGE_PATH: str = "offline_storage.json"

    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str | URL:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "mysql+aiomysql",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
            query={"charset": "utf8mb4"},
        )

    @property
    def database_label(self) -> str:
        if not self.USE_MYSQL:
            return "JSON file"
        if self.DATABASE_URL:
            return self.DATABASE_URL.split("+", 1)[0].split(":", 1)[0]
        return "MySQL"


settings = Settings()
