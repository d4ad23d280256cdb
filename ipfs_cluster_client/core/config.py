# ipfs_cluster_client/core/config.py
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import AnyHttpUrl # AnyHttpUrl stays in pydantic core
from functools import lru_cache
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "IPFS Cluster Client"
    CLUSTER_API_URL: AnyHttpUrl = "http://127.0.0.1:9094" # validates that it's a URL

    # Basic auth for the cluster REST API. Only used when both are set.
    CLUSTER_API_USERNAME: Optional[str] = None
    CLUSTER_API_PASSWORD: Optional[str] = None

    # Timeouts in seconds
    CLUSTER_REQUEST_TIMEOUT: float = 10
    CLUSTER_UPLOAD_TIMEOUT: float = 120

    # Reject unknown enum values (format, mode, cid version) before sending
    CLUSTER_VALIDATE_OPTIONS: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env

@lru_cache() # Cache the settings object for performance
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
