"""Gemini LLM service implementation."""

from google import genai

from common.logging import setup_logging
from exceptions import LLMServiceError
from infrastructure.interfaces import LLMService

logger = setup_logging()


class GeminiLLMService(LLMService):
    """LLM service implementation using Google Gemini."""

    def __init__(
        self,
        client: genai.Client,
        model_name: str,
        system_prompt: str,
        temperature: float = 0.3,
    ):
        self._client = client
        self._model_name = model_name
        self._system_prompt = system_prompt
        self._temperature = temperature

    def complete(self, prompt: str) -> str:
        """
        Requests the session summary from Gemini.

        Args:
            prompt: The summary instructions, roster and transcript.

        Returns:
            The raw JSON text produced by the model.

        Raises:
            LLMServiceError: If the Gemini API call fails or returns nothing.
        """
        try:
            response = self._client.models.generate_content(
                model=self._model_name,
                contents=prompt,
                config={
                    "response_mime_type": "application/json",
                    "system_instruction": self._system_prompt,
                    "temperature": self._temperature,
                },
            )
        except Exception as e:
            logger.exception("Gemini API call failed")
            raise LLMServiceError(f"Gemini summary failed: {e}", cause=e) from e

        if not response.text:
            logger.error("Gemini returned empty response")
            raise LLMServiceError("No summary returned by model")
        logger.info("LLM summary completed", extra={"response_length": len(response.text)})
        return response.text
