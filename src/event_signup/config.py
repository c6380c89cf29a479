from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_PORT: int = 8006

    # Active form and the Pub/Sub topic its submission watch publishes to
    FORM_ID: str = ""
    TRIGGER_TOPIC: str = ""

    # Google OAuth
    GOOGLE_CREDENTIALS_FILE: str = "google_credentials.json"
    GOOGLE_TOKEN_FILE: str = "google_token.json"
    OAUTH_REDIRECT_PORT: int = 8080

    # Binding storage (empty keeps properties in memory)
    PROPERTIES_FILE: str = "properties.json"

    USER_TIMEZONE: str = "UTC"
    GUEST_SEND_UPDATES: str = "none"  # all, externalOnly, none

    # Responses submitted this long before a notification was published are re-read
    SUBMISSION_LOOKBACK_MINUTES: int = 10
    # Watches expire after seven days; 0 disables the background check
    TRIGGER_CHECK_INTERVAL_HOURS: float = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()

def validate_required_keys():
    """Validate that the form and trigger settings are present"""
    required_keys = [
        ("FORM_ID", settings.FORM_ID),
        ("TRIGGER_TOPIC", settings.TRIGGER_TOPIC),
    ]

    missing_keys = []
    for key_name, key_value in required_keys:
        if not key_value or key_value.strip() == "":
            missing_keys.append(key_name)

    if missing_keys:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_keys)}. "
            f"Please check your .env file."
        )
