from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from files
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.docker"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="docker", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="gst_filing_desk", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Ledger store
    DATABASE_URL: str = Field(
        default="postgresql+asyncpg://postgres:postgres@db:5432/gst_filing_desk",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )
    DATABASE_SSL: bool = Field(default=False, validation_alias=AliasChoices("DATABASE_SSL", "database_ssl"))

    # Auth (tokens are issued by the external identity provider)
    USER_JWT_SECRET: str = Field(default="change-me", validation_alias=AliasChoices("USER_JWT_SECRET", "user_jwt_secret"))
    JWT_ALGORITHM: str = Field(default="HS256", validation_alias=AliasChoices("JWT_ALGORITHM", "jwt_algorithm"))

    # GST insights worker (status, details, filing status)
    GST_INSIGHTS_BASE_URL: str = Field(
        default="https://kaagaz-gst-insights.kaagazwork.workers.dev",
        validation_alias=AliasChoices("GST_INSIGHTS_BASE_URL", "gst_insights_base_url"),
    )
    GSTIN_VERIFY_BASE_URL: str = Field(
        default="https://kaagaz-mitrax-api-proxy.kaagazwork.workers.dev",
        validation_alias=AliasChoices("GSTIN_VERIFY_BASE_URL", "gstin_verify_base_url"),
    )
    GST_INSIGHTS_TIMEOUT: float = Field(default=15.0, validation_alias=AliasChoices("GST_INSIGHTS_TIMEOUT", "gst_insights_timeout"))

    # GSTR-2B uploads
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, validation_alias=AliasChoices("MAX_UPLOAD_BYTES", "max_upload_bytes"))


settings = Settings()
