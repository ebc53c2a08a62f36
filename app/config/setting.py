from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "default_jwt_secret_for_development"


class Settings(BaseSettings):
    app_name: str = "travease-auth"
    development_mode: bool = True
    allowed_origins: str = "https://travease-final.vercel.app,http://localhost:8100,http://localhost:4200"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # MongoDB settings
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "travease"
    mongo_users_collection: str = "users"

    # Session token settings
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    # OTP settings
    otp_ttl_minutes: int = 10
    default_country_code: str = "91"
    sms_brand: str = "Travease"

    # Notifier settings: "" picks whichever channel is configured, "none" disables delivery
    sms_provider: str = ""
    notifier_timeout_seconds: float = 10.0

    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_phone_number: str | None = None

    whatsapp_api_url: str | None = None
    whatsapp_session: str | None = None

    @property
    def uses_default_jwt_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
