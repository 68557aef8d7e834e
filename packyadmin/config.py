from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PackyAdmin"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://localhost:5432/packyadmin"

    # Cards submitted per insert call during CSV import
    import_batch_size: int = 50

    # Rows shown to the operator before committing an import
    preview_rows: int = 5


settings = Settings()
