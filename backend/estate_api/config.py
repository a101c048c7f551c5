from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Estate Listings API"
    debug: bool = False
    api_prefix: str = ""
    log_level: str = "INFO"

    database_url: str = "sqlite:///./estate.db"
    # Ignored for SQLite, which does not use a queue pool
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: float = 30.0

    cors_origins: str = "http://localhost:3000"

    # Header carrying the authenticated agent id, set by the session layer
    user_id_header: str = "x-user-id"

    search_similarity_threshold: float = 0.1
    # Run the listing fetch and its count inside one REPEATABLE READ
    # transaction (PostgreSQL only)
    snapshot_reads: bool = False

    model_config = {"env_file": ".env"}


settings = Settings()
