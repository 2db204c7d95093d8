"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``OCRSPACE_API_KEY=K123``
  2. A ``.env`` file in the working directory (local development)

Field ``ocrspace_api_key`` maps to env var ``OCRSPACE_API_KEY``.  An empty
string means "not configured": the matching adapter reports itself
unavailable and the orchestrator leaves it out of the chain.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from smartocr.models.policy import FallbackPolicy


class Settings(BaseSettings):
    """smartocr settings.

    Read once by the host application and passed by reference to the
    factory; nothing in the package re-reads the environment afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Vendor credentials ===
    ocrspace_api_key: str = ""
    google_vision_api_key: str = ""
    openai_api_key: str = ""
    azure_vision_api_key: str = ""
    azure_vision_endpoint: str = ""  # e.g. https://myres.cognitiveservices.azure.com

    # === Orchestration ===
    ocr_fallback_policy: FallbackPolicy = FallbackPolicy.CHAIN
    http_timeout: float = 30.0  # seconds, per HTTP request

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_configured_vendors(self) -> list[str]:
        """Return the external vendor keys whose credentials are present."""
        vendors: list[str] = []
        if self.ocrspace_api_key:
            vendors.append("ocr_space")
        if self.openai_api_key:
            vendors.append("openai_vision")
        if self.google_vision_api_key:
            vendors.append("google_vision")
        if self.azure_vision_api_key and self.azure_vision_endpoint:
            vendors.append("azure_vision")
        return vendors
