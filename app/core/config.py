from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import field_validator


def _parse_bool(v):
    if isinstance(v, str):
        return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
    return bool(v)


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = 'gestion_user'
    POSTGRES_PASSWORD: str = 'gestion_pass'
    POSTGRES_DB: str = 'gestion_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Clientes / proveedores
    PARTY_SEARCH_LIMIT: int = 20
    AUTO_RECONCILE_PARTIES: bool = True  # Alta/actualización implícita al guardar documentos

    # Display
    CURRENCY_SYMBOL: str = '$'

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        return _parse_bool(v)

    @field_validator("AUTO_RECONCILE_PARTIES", mode="before")
    @classmethod
    def parse_auto_reconcile(cls, v):
        return _parse_bool(v)


settings = Settings()
