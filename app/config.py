from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}
    DATABASE_URL: str = "sqlite:///./strings.db"

    # Logging configuration used by app.logging
    LOG_LEVEL: str = "INFO"
    CONSOLE_LOG_LEVEL: str = "INFO"
    SLOW_QUERY_THRESHOLD_MS: int = 200


settings = Settings()
