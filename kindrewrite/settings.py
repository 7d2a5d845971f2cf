# kindrewrite/settings.py
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Ensure .env is loaded if present
load_dotenv()


class Settings(BaseSettings):
    # Hugging Face token for the Friendly Text Moderation space
    HF_TOKEN: Optional[str] = None

    # Gradio API root of the space; Gradio 4 spaces drop the /gradio_api suffix
    MODERATION_BASE_URL: str = "https://duchaba-friendly-text-moderation.hf.space/gradio_api"
    MODERATION_API_NAME: str = "fetch_toxicity_level"
    MODERATION_TIMEOUT: float = 30.0

    # Server options
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Misc
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@dataclass(frozen=True)
class ModerationConfig:
    """What the moderation proxy needs from the process configuration."""

    api_token: Optional[str] = None
    base_url: str = Settings.model_fields["MODERATION_BASE_URL"].default
    api_name: str = Settings.model_fields["MODERATION_API_NAME"].default
    timeout: float = Settings.model_fields["MODERATION_TIMEOUT"].default

    @property
    def configured(self) -> bool:
        return bool(self.api_token)

    @classmethod
    def from_settings(cls, s: Settings) -> "ModerationConfig":
        return cls(
            api_token=s.HF_TOKEN or None,
            base_url=s.MODERATION_BASE_URL,
            api_name=s.MODERATION_API_NAME,
            timeout=s.MODERATION_TIMEOUT,
        )


settings = Settings()
