"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Flowtrack"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Supabase ---
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str  # server-side only — never expose to client
    supabase_jwt_secret: str  # HS256 secret used to sign Supabase auth tokens
    supabase_jwt_audience: str = "authenticated"
    supabase_db_url: str  # direct postgres connection string for asyncpg

    # --- Tracking database pool ---
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_command_timeout_s: float = 30.0

    # --- Profile store (PostgREST) ---
    profile_table: str = "profiles"
    profile_request_timeout_s: float = 10.0

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
