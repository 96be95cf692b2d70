from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"

    # Where saved symptom logs go: process memory or the SQL database below
    LOG_STORE_BACKEND: Literal["memory", "sql"] = "memory"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./symptom_logs.db"

    # Directory of *.json flow configurations served by the API
    FLOW_CONFIG_DIR: Optional[str] = None

    # "none" disables lazy weather seeding
    WEATHER_PROVIDER: Literal["simulated", "none"] = "simulated"

    # Client viewport width used to size card visualizations
    VIEWPORT_WIDTH: float = 390

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
