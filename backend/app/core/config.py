from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(default="development", validation_alias="APP_ENV")
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")

    data_dir: str = Field(default="./data", validation_alias="DATA_DIR")
    upload_max_bytes: int = Field(default=10 * 1024 * 1024, validation_alias="UPLOAD_MAX_BYTES")

    cors_allow_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOW_ORIGINS")
    trust_proxy_headers: bool = Field(default=False, validation_alias="TRUST_PROXY_HEADERS")

    password_min_length: int = Field(default=6, validation_alias="PASSWORD_MIN_LENGTH")

    jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    jwt_access_token_minutes: int = Field(default=60 * 24 * 7, validation_alias="JWT_ACCESS_TOKEN_MINUTES")
    jwt_issuer: str = Field(default="eduia-ciel", validation_alias="JWT_ISSUER")
    auth_cookie_name: str = Field(default="eduia_token", validation_alias="AUTH_COOKIE_NAME")

    default_admin_email: str = Field(default="admin@eduia-ciel.local", validation_alias="DEFAULT_ADMIN_EMAIL")
    default_admin_password: str = Field(default="admin123", validation_alias="DEFAULT_ADMIN_PASSWORD")

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias="REDIS_URL",
    )
    evaluation_session_ttl_seconds: int = Field(default=4 * 60 * 60, validation_alias="EVALUATION_SESSION_TTL_SECONDS")

    ollama_enabled: bool = Field(default=True, validation_alias="OLLAMA_ENABLED")
    ollama_base_url: str = Field(default="http://localhost:11434", validation_alias="OLLAMA_BASE_URL")
    ollama_model: str = Field(default="llama2", validation_alias="OLLAMA_MODEL")
    ollama_timeout_read_seconds: float = Field(default=120.0, validation_alias="OLLAMA_TIMEOUT_READ_SECONDS")

    smtp_enabled: bool = Field(default=False, validation_alias="SMTP_ENABLED")
    smtp_host: str = Field(default="localhost", validation_alias="SMTP_HOST")
    smtp_port: int = Field(default=587, validation_alias="SMTP_PORT")
    smtp_user: str = Field(default="", validation_alias="SMTP_USER")
    smtp_pass: str = Field(default="", validation_alias="SMTP_PASS")
    from_email: str = Field(default="noreply@eduia-ciel.local", validation_alias="FROM_EMAIL")
    server_domain: str = Field(default="localhost:3000", validation_alias="SERVER_DOMAIN")

    github_repo: str = Field(default="toto789520/eduIA-CIEL", validation_alias="GITHUB_REPO")

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @property
    def users_file(self) -> Path:
        return self.data_path / "users.json"

    @property
    def documents_file(self) -> Path:
        return self.data_path / "documents.json"

    @property
    def docs_file(self) -> Path:
        return self.data_path / "docs.json"

    @property
    def uploads_dir(self) -> Path:
        return self.data_path / "uploads"


settings = Settings()


def _is_prod() -> bool:
    return (settings.app_env or "").strip().lower() in {"prod", "production"}


if _is_prod():
    if not settings.jwt_secret_key or settings.jwt_secret_key.strip().lower() in {"change-me", "your-secret", "secret"}:
        raise RuntimeError("JWT_SECRET_KEY must be set to a strong value in production")
    if settings.default_admin_password.strip() in {"admin123", "admin", "change-me"}:
        raise RuntimeError("DEFAULT_ADMIN_PASSWORD must be set to a non-default value in production")
