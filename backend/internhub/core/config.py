from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    admin_token: str | None = None

    # auth
    auth_secret: str = "change-me-auth-secret"
    auth_token_ttl_seconds: int = 12 * 60 * 60
    auth_refresh_token_ttl_seconds: int = 30 * 24 * 60 * 60
    auth_login_max_attempts: int = 8
    auth_login_window_seconds: int = 10 * 60

    # workflow and feeds
    allow_reopen_withdrawn_applications: bool = False
    notifications_limit: int = 50

    # uploads
    local_upload_dir: str = "uploads"
    max_upload_size_bytes: int = 10 * 1024 * 1024
    s3_bucket: str | None = None
    s3_region: str | None = None
    s3_endpoint_url: str | None = None
    s3_presign_expiry_seconds: int = 15 * 60
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None

    # LLM
    ai_enabled: bool = False
    llm_provider: str = "groq"
    groq_api_key: str | None = None
    groq_model: str = "llama-3.1-8b-instant"
    groq_api_base: str = "https://api.groq.com/openai/v1"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_api_base: str = "https://api.openai.com/v1"

    # GitHub OAuth
    github_client_id: str | None = None
    github_client_secret: str | None = None
    github_callback_url: str | None = None

    # mail
    mail_enabled: bool = False
    mail_from: str | None = None
    mail_provider_order: str = "smtp,resend,ses"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout_seconds: int = 20
    resend_api_key: str | None = None
    resend_api_base: str = "https://api.resend.com"
    ses_region: str | None = None
    ses_access_key_id: str | None = None
    ses_secret_access_key: str | None = None
    ses_session_token: str | None = None
    ses_configuration_set: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value):
        # Heroku-style postgres:// is not a registered SQLAlchemy dialect name.
        if isinstance(value, str) and value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value


settings = Settings()
