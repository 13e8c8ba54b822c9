# config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_title: str = "HVAR - WHIRLPOOL"

    # --- Remote products API ---
    api_base_url: str = "http://localhost:3333"
    api_timeout: float = Field(10.0, gt=0)

    # --- Session cookie / auth gate ---
    session_cookie_name: str = "HVAR-WHIRLPOOL_USER"
    session_cookie_max_age: int = 60 * 60 * 24 * 30
    signin_path: str = "/signin"

    # Dates are stored as display strings on the product (dd/MM/yyyy)
    date_format: str = "%d/%m/%Y"

    log_level: str = "INFO"


settings = Settings()
