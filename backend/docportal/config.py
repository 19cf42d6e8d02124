"""Configuração da aplicação a partir de variáveis de ambiente, centralizada em um único objeto."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./docportal.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:4000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    BCRYPT_ROUNDS: int = 12

    # Listagem de documentos
    DOCUMENTS_PAGE_SIZE: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Conta inicial criada por scripts/seed_data.py
    BOOTSTRAP_ADMIN_EMAIL: str = "gerente@empresa.com.br"
    BOOTSTRAP_ADMIN_PASSWORD: str = "change-me"

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
