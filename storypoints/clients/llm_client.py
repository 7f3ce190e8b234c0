from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional
import certifi
import httpx
import structlog
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage
from pydantic import AnyUrl, SecretStr
from storypoints.config import settings
from storypoints.schemas.predictions import AIEstimate
from storypoints.services.estimator import STORY_POINT_SCALE
from storypoints.utils.prompts import estimate_story_points_prompt

logger = structlog.get_logger(__name__)

DEFAULT_POINTS = 3
_number_pat = re.compile(r"\d+")


@dataclass(frozen=True)
class Provider:
    key: str
    label: str
    model: str
    base_url: AnyUrl
    api_key: Optional[SecretStr]


class AIEstimationError(Exception):
    """Provider failure, classified so callers can show a useful message and fall back."""

    def __init__(self, code: str, status_code: int, message: str, user_message: str):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.message = message
        self.user_message = user_message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message, "userMessage": self.user_message}


def default_providers() -> dict[str, Provider]:
    return {
        "groq": Provider("groq", "Groq", settings.GROQ_MODEL, settings.GROQ_BASE_URL, settings.GROQ_API_KEY),
        "grok": Provider("grok", "Grok", settings.XAI_MODEL, settings.XAI_BASE_URL, settings.XAI_API_KEY),
    }


def classify_provider_error(error: Exception, provider: Provider) -> AIEstimationError:
    text = str(error).lower()
    if "credits" in text or "spending limit" in text:
        return AIEstimationError(
            "CREDIT_LIMIT_EXCEEDED", 429,
            "API credit limit reached. Try again later or use the rule-based estimate.",
            "The AI service is temporarily unavailable because of its credit limit. Use the rule-based estimate for now.",
        )
    if "rate limit" in text:
        return AIEstimationError(
            "RATE_LIMIT_EXCEEDED", 429,
            "Too many requests. Try again in a few seconds.",
            "Too many simultaneous requests. Wait a few seconds and try again.",
        )
    if "does not exist" in text or "does not have access" in text:
        return AIEstimationError(
            "MODEL_ACCESS_ERROR", 403,
            "Model unavailable or access denied.",
            f"The {provider.label} model is not available right now. Try the other model or use the rule-based estimate.",
        )
    if "api key" in text:
        return AIEstimationError(
            "API_KEY_ERROR", 401,
            "Problem with the API key.",
            "API configuration error. Use the rule-based estimate for now.",
        )
    return AIEstimationError(
        "API_ERROR", 503,
        "Error talking to the AI model. Try again or use the rule-based estimate.",
        "Temporary error in the AI service. Try again in a moment.",
    )


def parse_points(text: str) -> tuple[int, str | None]:
    """First integer in the reply if it is on the scale, otherwise the default with a note."""
    match = _number_pat.search(text or "")
    points = int(match.group()) if match else None
    if points in STORY_POINT_SCALE:
        return points, None
    return DEFAULT_POINTS, "Default estimate used because the model reply was not a story point value"


def _openai_compatible_chat(provider: Provider) -> ChatOpenAI:
    if provider.api_key is None:
        raise AIEstimationError(
            "API_KEY_ERROR", 401,
            f"No API key configured for {provider.label}.",
            "API configuration error. Use the rule-based estimate for now.",
        )
    return ChatOpenAI(
        model=provider.model,
        base_url=str(provider.base_url),
        api_key=provider.api_key.get_secret_value(),
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        timeout=settings.HTTP_TIMEOUT_SECS,
        http_client=httpx.Client(verify=certifi.where(), timeout=settings.HTTP_TIMEOUT_SECS),
    )


class LLMEstimator:
    def __init__(
        self,
        providers: dict[str, Provider] | None = None,
        chat_factory: Callable[[Provider], Any] | None = None,
    ) -> None:
        self.providers = providers if providers is not None else default_providers()
        self._chat_factory = chat_factory or _openai_compatible_chat
        self._keyless = chat_factory is not None
        self._chats: dict[str, Any] = {}
        self.enabled = bool(self.available_models())

    def available_models(self) -> list[str]:
        return [key for key, p in self.providers.items() if self._keyless or p.api_key is not None]

    def _chat_for(self, provider: Provider):
        chat = self._chats.get(provider.key)
        if chat is None:
            chat = self._chat_factory(provider)
            self._chats[provider.key] = chat
        return chat

    def estimate(self, description: str, task_type: str, model: str) -> AIEstimate:
        provider = self.providers.get(model)
        if provider is None:
            raise AIEstimationError(
                "UNSUPPORTED_MODEL", 400,
                f"Unsupported model: {model}",
                f"Model '{model}' is not supported. Choose one of: {', '.join(self.providers)}.",
            )

        chat = self._chat_for(provider)
        prompt = estimate_story_points_prompt.format(description=description, task_type=task_type)
        try:
            reply = chat.invoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error("llm_estimate_failed", model=model, error=str(e))
            raise classify_provider_error(e, provider) from e

        points, note = parse_points(str(reply.content))
        logger.info("llm_estimate", model=model, points=points, defaulted=note is not None)
        return AIEstimate(points=points, model=model, note=note)
