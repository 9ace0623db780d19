from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    sql_echo: bool = False
    # Создание таблиц при старте, без alembic
    auto_create_tables: bool = True

    # Уведомление об отключении всем сокетам процесса, а не только группам сессии
    relay_global_disconnect_notice: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
