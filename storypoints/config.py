from pathlib import Path

from pydantic import AnyUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    """Return the data directory next to the package root."""
    root = Path(__file__).resolve().parent.parent
    return root / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # App
    APP_ENV: str = "dev"  # dev|staging|prod
    APP_DEBUG: bool = False

    # Storage (tasks, model stats, keyword config, trained model)
    DATA_DIR: Path = _default_data_dir()

    # Groq (OpenAI-compatible endpoint)
    GROQ_API_KEY: SecretStr | None = None
    GROQ_BASE_URL: AnyUrl = AnyUrl("https://api.groq.com/openai/v1")
    GROQ_MODEL: str = "llama-3.1-8b-instant"

    # xAI Grok (OpenAI-compatible endpoint)
    XAI_API_KEY: SecretStr | None = None
    XAI_BASE_URL: AnyUrl = AnyUrl("https://api.x.ai/v1")
    XAI_MODEL: str = "grok-3-mini"

    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 10

    # Transformer classifier
    BERT_MODEL_NAME: str = "giseldo/distilbert_bert_uncased_finetuned_story_point"
    BERT_MAX_CHARS: int = 400

    # Local neural classifier
    ML_MIN_TASKS: int = 5
    ML_EPOCHS: int = 50
    ML_LEARNING_RATE: float = 0.01
    ML_VALIDATION_SPLIT: float = 0.2
    ML_RANDOM_STATE: int | None = None

    # Timeouts
    HTTP_TIMEOUT_SECS: int = 30


settings = Settings()
