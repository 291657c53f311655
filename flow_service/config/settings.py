"""
Flow Service configuration.

Every key is read from the environment (or a .env file) by its exact
upper-case name.
"""

from typing import List, Optional
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class UnknownComponentPolicy(str, Enum):
    """What the flow compiler does with component types it does not know."""
    OMIT = "omit"
    REJECT = "reject"


class Settings(BaseSettings):
    """Service settings, grouped by the component that reads them."""

    # Environment Configuration
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Server Configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server host address"
    )
    PORT: int = Field(
        default=8500,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level"
    )
    LOG_FORMAT: str = Field(
        default="json",
        pattern=r"^(json|text)$",
        description="Log output format"
    )

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = Field(
        default=["*"],
        description="CORS allowed origins"
    )

    # Document store
    MONGODB_URI: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DATABASE: str = Field(
        default="flow_builder",
        min_length=1,
        max_length=64,
        description="MongoDB database holding users, workspaces and bots"
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        ge=100,
        le=60000,
        description="MongoDB server selection timeout in milliseconds"
    )

    # WhatsApp Graph API
    GRAPH_API_BASE_URL: str = Field(
        default="https://graph.facebook.com",
        description="Graph API host"
    )
    GRAPH_API_VERSION: str = Field(
        default="v20.0",
        pattern=r"^v\d+\.\d+$",
        description="Graph API version segment"
    )
    GRAPH_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="Bearer token for the Graph API"
    )
    BUSINESS_PHONE_NUMBER_ID: Optional[str] = Field(
        default=None,
        description="WhatsApp business phone number id used to send messages"
    )
    WABA_ID: Optional[str] = Field(
        default=None,
        description="WhatsApp business account id owning flows and templates"
    )
    GRAPH_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for outbound Graph API calls"
    )

    # Flow compiler policy
    FLOW_MAX_SCREENS: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum number of screens in one flow"
    )
    FLOW_MAX_COMPONENTS_PER_SCREEN: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum number of components on one screen"
    )
    FLOW_ENFORCE_COMPONENT_LIMIT: bool = Field(
        default=True,
        description="Reject screens exceeding FLOW_MAX_COMPONENTS_PER_SCREEN"
    )
    FLOW_REQUIRE_COMPONENT_NAMES: bool = Field(
        default=True,
        description="Reject interactive components without a name"
    )
    FLOW_LABEL_MAX_LENGTH: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Labels longer than this are truncated"
    )
    FLOW_UNKNOWN_COMPONENT_POLICY: UnknownComponentPolicy = Field(
        default=UnknownComponentPolicy.OMIT,
        description="omit: drop unknown component types, reject: fail compilation"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("GRAPH_API_BASE_URL")
    @classmethod
    def validate_graph_base_url(cls, v):
        """Require a scheme and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid Graph API base URL: {v}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production(self):
        if self.ENVIRONMENT == Environment.PRODUCTION:
            if self.DEBUG:
                raise ValueError("Debug mode should not be enabled in production")

            if "*" in self.ALLOWED_ORIGINS:
                raise ValueError("Wildcard CORS origins not allowed in production")

            if not self.GRAPH_ACCESS_TOKEN:
                raise ValueError("GRAPH_ACCESS_TOKEN is required in production")

        return self

    @property
    def graph_api_url(self) -> str:
        """Versioned Graph API root, e.g. https://graph.facebook.com/v20.0/"""
        return f"{self.GRAPH_API_BASE_URL}/{self.GRAPH_API_VERSION}/"

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached instance and read the environment again"""
    get_settings.cache_clear()
    return get_settings()
