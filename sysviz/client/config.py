from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Настройки клиентской сессии, база данных не нужна"""
    server_url: str = "http://localhost:5000"
    autosave_delay_seconds: float = 3.0

    model_config = {"env_file": ".env", "extra": "ignore"}


client_settings = ClientSettings()
