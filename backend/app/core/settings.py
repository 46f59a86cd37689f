# app/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Contact API", alias="API_TITLE")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # Email verifier: "fake" (offline dev) or "hunter"
    email_verifier_provider: str = Field(default="fake", alias="EMAIL_VERIFIER_PROVIDER")
    hunter_api_key: Optional[str] = Field(default=None, alias="HUNTER_API_KEY")
    hunter_base_url: str = Field(default="https://api.hunter.io/v2", alias="HUNTER_BASE_URL")

    # Phone verifier: "fake" (offline dev) or "numverify"
    phone_verifier_provider: str = Field(default="fake", alias="PHONE_VERIFIER_PROVIDER")
    numverify_access_key: Optional[str] = Field(default=None, alias="NUMVERIFY_ACCESS_KEY")
    numverify_base_url: str = Field(default="https://apilayer.net/api", alias="NUMVERIFY_BASE_URL")

    # Outbound mail: "fake" (logs only) or "emailjs"
    mail_provider: str = Field(default="fake", alias="MAIL_PROVIDER")
    emailjs_service_id: Optional[str] = Field(default=None, alias="EMAILJS_SERVICE_ID")
    emailjs_template_id: Optional[str] = Field(default=None, alias="EMAILJS_TEMPLATE_ID")
    emailjs_public_key: Optional[str] = Field(default=None, alias="EMAILJS_PUBLIC_KEY")
    # Only needed when the EmailJS account enforces strict mode for API calls
    emailjs_private_key: Optional[str] = Field(default=None, alias="EMAILJS_PRIVATE_KEY")
    emailjs_base_url: str = Field(default="https://api.emailjs.com", alias="EMAILJS_BASE_URL")

    validation_debounce_ms: int = Field(default=500, alias="VALIDATION_DEBOUNCE_MS")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")

    # Idle contact sessions older than this are dropped on the next create
    contact_session_ttl_seconds: int = Field(default=1800, alias="CONTACT_SESSION_TTL_SECONDS")

    @property
    def debounce_seconds(self) -> float:
        return max(0, self.validation_debounce_ms) / 1000.0

settings = Settings()
