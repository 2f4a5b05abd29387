from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Remote product API
    PRODUCT_API_BASE_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Session
    SESSION_SECRET_KEY: str = "change-me"

    # App
    APP_NAME: str = "Product Catalog"
    LOG_LEVEL: str = "DEBUG"

    # File uploads
    MAX_IMAGE_SIZE_MB: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
