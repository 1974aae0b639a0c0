"""AuthGate configuration management."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "authgate-dev-secret"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class StateBackend(str, Enum):
    """Key-value store backing the state driver."""

    MEMORY = "memory"
    REDIS = "redis"


class Settings(BaseSettings):
    """AuthGate configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # State store
    state_backend: StateBackend = Field(
        default=StateBackend.MEMORY, description="State backend: memory or redis"
    )
    redis_url: Optional[str] = None
    state_root: str = Field(
        default="/authgate", description="Root of the hierarchical key space"
    )

    # Tokens
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = Field(default=3600, description="Token lifetime (1 hour)")
    reject_inactive_tokens: bool = Field(
        default=False,
        description="Reject tokens whose local user is disabled/deleted or whose principals are gone",
    )

    # Passwords
    bcrypt_rounds: int = Field(default=12, description="bcrypt cost factor")

    # Built-in users
    bootstrap_default_users: bool = Field(
        default=True, description="Create the built-in admin/ops users at startup"
    )
    admin_password: str = "admin"
    ops_password: str = "ops"

    # Server
    host: str = "0.0.0.0"
    port: int = 10000

    # Validators
    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors 4 through 31."""
        if not 4 <= v <= 31:
            raise ValueError(f"bcrypt_rounds must be between 4 and 31, got {v}")
        return v

    @field_validator("state_root")
    @classmethod
    def validate_state_root(cls, v: str) -> str:
        """Normalize the key root to a leading slash and no trailing slash."""
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("state_root must not be empty")
        return v

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate the Redis URL scheme."""
        if v and not v.startswith(("redis://", "rediss://")):
            raise ValueError(f"URL must start with redis:// or rediss://, got {v}")
        return v

    @model_validator(mode="after")
    def validate_deployment(self) -> "Settings":
        """Cross-field checks; defaults are not seen by field validators."""
        if self.state_backend == StateBackend.REDIS and not self.redis_url:
            raise ValueError("redis_url is required when state_backend=redis")

        # Production/staging must not sign tokens with the development secret
        if (
            self.env in [Environment.PRODUCTION, Environment.STAGING]
            and self.jwt_secret == DEV_JWT_SECRET
        ):
            raise ValueError(f"jwt_secret must be set in {self.env.value} environment")
        return self


settings = Settings()
