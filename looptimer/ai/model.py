"""LLM model abstraction for consistent model access across the application."""

from pydantic_ai.models import Model
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.groq import GroqProvider
from pydantic_ai.providers.openai import OpenAIProvider

from looptimer.config.settings import settings


def get_model(provider: str, model_name: str) -> Model:
    if provider == "groq":
        return GroqModel(model_name, provider=GroqProvider(api_key=settings.groq_api_key))
    if provider == "openai":
        return OpenAIChatModel(model_name, provider=OpenAIProvider(api_key=settings.openai_api_key))

    raise ValueError(f"Unsupported LLM provider: {provider}")
