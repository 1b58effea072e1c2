from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="STAMPBOOK_")

    app_name: str = "Stampbook"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./stampbook.db"

    # Base URL that share links point at; the token goes in `share_query_param`
    public_base_url: str = "http://localhost:8000/open"
    share_query_param: str = "s"

    # Key the serialized card collection is stored under
    storage_key: str = "loyaltyCards"


settings = Settings()
