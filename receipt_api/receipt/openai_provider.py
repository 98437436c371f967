import base64

import openai
from agents import Agent, OpenAIResponsesModel, RunConfig, Runner

from receipt_api.errors import ErrorKind, ProviderError
from receipt_api.receipt.parsing import extract_json_object
from receipt_api.receipt.prompts import EXTRACTION_PROMPT


def classify_openai_error(error: openai.OpenAIError) -> ErrorKind:
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ErrorKind.AUTH
    if isinstance(error, openai.RateLimitError):
        return ErrorKind.QUOTA
    return ErrorKind.PROVIDER


class OpenAIReceiptExtractor:
    """Receipt extraction using OpenAI Agents SDK with GPT-4o vision."""

    provider = "openai"

    def __init__(self, client: openai.AsyncOpenAI, model: str = "gpt-4o"):
        self.agent = Agent(
            name="Receipt Scanner",
            instructions=EXTRACTION_PROMPT,
            model=OpenAIResponsesModel(model=model, openai_client=client),
        )

    async def extract(self, image_bytes: bytes, content_type: str) -> dict:
        b64_image = base64.b64encode(image_bytes).decode("utf-8")
        media_type = content_type or "image/jpeg"

        try:
            result = await Runner.run(
                self.agent,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": "Extract the expense report from this receipt."},
                            {"type": "input_image", "image_url": f"data:{media_type};base64,{b64_image}"},
                        ],
                    }
                ],
                run_config=RunConfig(tracing_disabled=True),
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI request failed: {e}", classify_openai_error(e), self.provider) from e

        return extract_json_object(str(result.final_output or ""))
