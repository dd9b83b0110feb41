from typing import List, Literal, Union
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Origin Gate"
    APP_ENV: str = "dev"

    # Gate: "allow" rejects anything off the list, "block" rejects anything on it,
    # "open" answers every origin with Access-Control-Allow-Origin: *
    CORS_MODE: Literal["allow", "block", "open"] = "allow"

    # IPs, CIDR ranges, hostnames or URLs (JSON list or "|"-separated string in .env)
    CORS_LIST: Union[List[str], str] = "127.0.0.1|localhost"
    CORS_INCLUDE_REMOTE_ADDR: bool = True
    CORS_EXEMPT_PATHS: List[str] = Field(default_factory=lambda: ["/healthz"])

    # Headers written for accepted origins
    CORS_ALLOW_METHODS: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    CORS_ALLOW_HEADERS: List[str] = Field(
        default_factory=lambda: ["Authorization", "Content-Type", "Accept"]
    )
    CORS_EXPOSE_HEADERS: List[str] = Field(default_factory=lambda: ["X-Request-Id"])
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_MAX_AGE: int = 86400

    # Security / Limits
    # Read once from the environment when the routes are imported; a Settings
    # passed to create_app() does not change it
    RATE_CHECK_PER_MIN: int = 60
    TRUSTED_HOSTS: list[str] = ["127.0.0.1", "localhost"]

    # Meta
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
