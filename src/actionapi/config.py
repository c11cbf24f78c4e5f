from pydantic_settings import BaseSettings

LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = 8000


class Settings(BaseSettings):
    app_env: str = "development"
    log_level: str = "info"

    read_timeout_seconds: float = 15
    write_timeout_seconds: float = 15
    idle_timeout_seconds: float = 60
    graceful_timeout_seconds: float = 15

    model_config = {"env_prefix": "ACTIONAPI_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
