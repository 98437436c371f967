import logging

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from receipt_api.errors import ErrorKind, ProviderError
from receipt_api.receipt.parsing import extract_json_object
from receipt_api.receipt.prompts import EXTRACTION_PROMPT

logger = logging.getLogger("receipt_api")


def classify_gemini_error(error: genai_errors.APIError) -> ErrorKind:
    if error.code in (401, 403):
        return ErrorKind.AUTH
    if error.code == 429:
        return ErrorKind.QUOTA
    # An invalid key comes back as 400 INVALID_ARGUMENT with reason API_KEY_INVALID
    if error.code == 400 and "API_KEY_INVALID" in str(error.details):
        return ErrorKind.AUTH
    return ErrorKind.PROVIDER


class GeminiReceiptExtractor:
    """Receipt extraction using Google Gemini multimodal models."""

    provider = "gemini"

    def __init__(self, client: genai.Client, model: str = "gemini-1.5-pro"):
        self.client = client
        self.model = model

    async def extract(self, image_bytes: bytes, content_type: str) -> dict:
        image = types.Part.from_bytes(data=image_bytes, mime_type=content_type or "image/jpeg")

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[EXTRACTION_PROMPT, image],
            )
        except genai_errors.APIError as e:
            raise ProviderError(f"Gemini request failed: {e}", classify_gemini_error(e), self.provider) from e

        text = response.text or ""
        logger.debug("Gemini response received", extra={"extra_data": {"chars": len(text)}})
        return extract_json_object(text)
