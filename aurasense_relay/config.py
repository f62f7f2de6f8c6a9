from pydantic_settings import BaseSettings, SettingsConfigDict

from aurasense_relay.core.errors import ConfigurationMissing


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    prediction_api_url: str = "https://aurasense-api.onrender.com/predict"
    firestore_project_id: str = ""
    firestore_api_key: str = ""
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    # Relative to the database documents root; {user_id} is required
    display_document_path: str = "user_display/{user_id}/readings/latest"
    default_user_id: str = ""  # placeholder for devices that never send userId; empty disables
    http_timeout_seconds: float = 30.0
    app_env: str = "development"  # "production" turns missing Firestore credentials into a startup error
    rate_limit_default: str = "120/minute"

    @property
    def firestore_documents_url(self) -> str:
        """REST root for documents of the default database."""
        base = self.firestore_base_url.rstrip("/")
        return f"{base}/projects/{self.firestore_project_id}/databases/(default)/documents"

    def missing_store_settings(self) -> list[str]:
        """Names of required Firestore env vars that are unset."""
        missing = []
        if not self.firestore_project_id.strip():
            missing.append("FIRESTORE_PROJECT_ID")
        if not self.firestore_api_key.strip():
            missing.append("FIRESTORE_API_KEY")
        return missing

    def require_store_settings(self) -> None:
        """Raise ConfigurationMissing if Firestore credentials are absent."""
        missing = self.missing_store_settings()
        if missing:
            raise ConfigurationMissing(missing)

    def validate_document_path(self) -> None:
        if "{user_id}" not in self.display_document_path:
            raise RuntimeError("DISPLAY_DOCUMENT_PATH must contain a {user_id} placeholder")


settings = Settings()
