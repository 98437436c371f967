import openai
from fastapi import Depends
from google import genai

from receipt_api.config import Settings, get_settings
from receipt_api.errors import ConfigError
from receipt_api.receipt.base import ReceiptExtractor
from receipt_api.receipt.gemini_provider import GeminiReceiptExtractor
from receipt_api.receipt.openai_provider import OpenAIReceiptExtractor


def build_receipt_extractor(settings: Settings) -> ReceiptExtractor:
    """Construct the configured provider with its own client."""
    provider = settings.receipt_provider
    if provider == "gemini":
        if not settings.google_api_key:
            raise ConfigError("Google API key not configured")
        client = genai.Client(api_key=settings.google_api_key)
        return GeminiReceiptExtractor(client, model=settings.gemini_model)
    if provider == "openai":
        if not settings.openai_api_key:
            raise ConfigError("OpenAI API key not configured")
        client = openai.AsyncOpenAI(api_key=settings.openai_api_key)
        return OpenAIReceiptExtractor(client, model=settings.openai_model)
    raise ConfigError(f"Unknown receipt provider: {provider}")


def get_receipt_extractor(settings: Settings = Depends(get_settings)) -> ReceiptExtractor:
    return build_receipt_extractor(settings)
