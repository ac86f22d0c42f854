# backend/bookit/core/settings.py
# Configuration applicative (variables d'environnement / .env), construite une seule fois.

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich import print


class Settings(BaseSettings):
    # === App settings ===
    app_name: str = "BookIt"
    app_version: str = "0.1.0"
    environment: str = "development"  # or "production"
    cors_origins: list[str] = ["http://localhost:5173"]

    # === Profile store ===
    profile_store_backend: str = "mongodb"  # or "memory"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "bookit"
    profiles_collection: str = "profiles"
    profile_write_retries: int = 3

    # === JWT (identity provider) ===
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # === LOGS ===
    logs_dir: str = "logs"
    log_retention_days: int = 30

    # UPLOAD
    one_kb: int = 1024
    max_body_kb: int = 256

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def max_body_bytes(self) -> int:
        return self.max_body_kb * self.one_kb


@lru_cache
def get_settings() -> Settings:
    """Retourne l'instance de settings (construite au premier appel)."""
    settings = Settings()
    print(f"--- Settings loaded ({settings.environment}, store={settings.profile_store_backend}) ---")
    return settings
