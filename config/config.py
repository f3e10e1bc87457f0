from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    # Application
    app_name: str = Field("User Update API", env="APP_NAME")
    app_version: str = Field("1.0.0", env="APP_VERSION")
    api_prefix: str = Field("/api", env="API_PREFIX")

    # Logging
    log_level: str = Field("INFO", env="LOG_LEVEL")
    log_format: str = Field("structured", env="LOG_FORMAT")

    # Storage: "memory" or "supabase"
    repository_backend: str = Field("memory", env="REPOSITORY_BACKEND")
    seed_demo_users: bool = Field(True, env="SEED_DEMO_USERS")

    # Supabase
    supabase_url: Optional[str] = Field(None, env="SUPABASE_URL")
    supabase_key: Optional[str] = Field(None, env="SUPABASE_KEY")
    supabase_table_users: str = Field("users", env="SUPABASE_TABLE_USERS")

    # Rate limiting
    rate_limit_enabled: bool = Field(True, env="RATE_LIMIT_ENABLED")
    rate_limit_default: str = Field("200/minute", env="RATE_LIMIT_DEFAULT")
    rate_limit_storage_uri: Optional[str] = Field(None, env="RATE_LIMIT_STORAGE_URI")

    class Config:
        env_file = ".env"
        extra = "ignore"

    def uses_supabase(self) -> bool:
        return self.repository_backend.lower() == "supabase"

settings = Settings()

tags_metadata = [
    {
        "name": "Health",
        "description": "Health-check and diagnostics endpoints.",
    },
    {
        "name": "Users",
        "description": "User listing and partial updates guarded by a field allow-list.",
    },
]
