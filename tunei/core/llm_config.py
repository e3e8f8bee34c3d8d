"""
LLM Configuration - Azure OpenAI chat completions
"""
from typing import Dict, Any, Optional
from dataclasses import dataclass

from .config import Settings, settings as default_settings


@dataclass
class LLMConfig:
    provider: str
    deployment: str
    api_key: str
    endpoint: str
    api_version: str
    max_tokens: int = 1000
    temperature: float = 0.7
    top_p: float = 0.95
    timeout_seconds: float = 30.0

    @property
    def chat_completions_url(self) -> str:
        endpoint = self.endpoint if self.endpoint.endswith("/") else self.endpoint + "/"
        return (
            f"{endpoint}openai/deployments/{self.deployment}/chat/completions"
            f"?api-version={self.api_version}"
        )


class LLMManager:
    PROVIDERS = {
        "azure_openai": {
            "name": "Azure OpenAI",
            "required_keys": ["AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY"],
            "flag": "AZURE_OPENAI_ENABLED",
        }
    }

    @classmethod
    def get_config_from_env(cls, settings: Optional[Settings] = None) -> LLMConfig:
        settings = settings or default_settings
        if not settings.AZURE_OPENAI_ENABLED:
            raise ValueError("Azure OpenAI is not enabled")
        if not settings.AZURE_OPENAI_ENDPOINT:
            raise ValueError("Missing AZURE_OPENAI_ENDPOINT")
        if not settings.AZURE_OPENAI_API_KEY:
            raise ValueError("Missing AZURE_OPENAI_API_KEY")

        return LLMConfig(
            provider="azure_openai",
            deployment=settings.DEPLOYMENT_NAME,
            api_key=settings.AZURE_OPENAI_API_KEY,
            endpoint=settings.AZURE_OPENAI_ENDPOINT,
            api_version=settings.API_VERSION,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
            top_p=settings.LLM_TOP_P,
            timeout_seconds=settings.SUMMARY_TIMEOUT_SECONDS,
        )

    @classmethod
    def list_available_models(cls, settings: Optional[Settings] = None) -> Dict[str, Any]:
        settings = settings or default_settings
        provider = cls.PROVIDERS["azure_openai"]
        return {
            "azure_openai": {
                "name": provider["name"],
                "deployment": settings.DEPLOYMENT_NAME,
                "api_version": settings.API_VERSION,
                "available": settings.has_llm_credentials,
                "required_keys": provider["required_keys"],
            }
        }
