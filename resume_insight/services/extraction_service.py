"""Extraction service: the LLM behind resume parsing, injectable for tests."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from resume_insight.config import (
    HTTP_TIMEOUT_SECONDS,
    MODEL_NAME,
    OPENAI_API_KEY,
    TEMPERATURE,
    TOP_P,
)
from resume_insight.errors import (
    EmptyResponseError,
    MalformedResponseShapeError,
    ServiceBlockedError,
    ServiceError,
    ServiceNotConfiguredError,
)
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)


class ExtractionService(ABC):
    """Text-in, text-out language model request."""

    @abstractmethod
    async def generate(self, system_prompt: str, user_content: str, json_output: bool = True) -> str:
        """
        Send one request and return the raw reply text.
        Raises ServiceBlockedError, EmptyResponseError, MalformedResponseShapeError
        or ServiceError.
        """
        ...


class OpenAIExtractionService(ExtractionService):
    """Chat completions via the OpenAI API (e.g. gpt-4o-mini)."""

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = MODEL_NAME,
        client: Optional[Any] = None,
    ) -> None:
        if client is None and not api_key:
            raise ServiceNotConfiguredError()
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=HTTP_TIMEOUT_SECONDS)
        self._model = model

    async def generate(self, system_prompt: str, user_content: str, json_output: bool = True) -> str:
        options: dict = {"temperature": TEMPERATURE, "top_p": TOP_P}
        if json_output:
            options["response_format"] = {"type": "json_object"}
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                **options,
            )
        except openai.APIStatusError as e:
            logger.error("Extraction service returned HTTP %s: %s", e.status_code, e.message)
            raise ServiceBlockedError(f"HTTP {e.status_code} {e.message}") from e
        except openai.OpenAIError as e:
            logger.error("Extraction service request failed: %s", e)
            raise ServiceError(f"Failed to extract data: {e}") from e

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message:
            logger.error("Extraction service returned no choices: %.500r", response)
            raise EmptyResponseError()
        if choice.finish_reason == "content_filter":
            raise ServiceBlockedError("content_filter")
        refusal = getattr(choice.message, "refusal", None)
        if refusal:
            raise ServiceBlockedError(str(refusal))

        content = choice.message.content
        if content is None or content == "":
            raise EmptyResponseError()
        if not isinstance(content, str):
            raise MalformedResponseShapeError(type(content).__name__)
        return content


def build_extraction_service(api_key: Optional[str] = None, model: Optional[str] = None) -> ExtractionService:
    """
    Return the configured extraction service (dependency injection).
    api_key/model override config. Raises ServiceNotConfiguredError without a key.
    """
    key = OPENAI_API_KEY if api_key is None else api_key
    if not key:
        logger.error("OPENAI_API_KEY is not set; cannot build extraction service")
        raise ServiceNotConfiguredError()
    return OpenAIExtractionService(api_key=key, model=model or MODEL_NAME)
