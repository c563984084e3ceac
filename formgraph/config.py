"""
FORMGRAPH - Configuration
Paramètres de binding des formulaires imbriqués
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration du populator"""

    # Nested attributes convention
    attributes_suffix: str = "_attributes"
    id_key: str = "id"

    # Database (SQLAlchemy adapter)
    database_url: str = "sqlite://"
    database_echo: bool = False

    # Logging
    log_level: str = "WARNING"

    class Config:
        env_prefix = "FORMGRAPH_"
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure le logging racine pour les applications hôtes"""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())
