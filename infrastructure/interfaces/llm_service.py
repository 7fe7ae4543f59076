"""Abstract interface for LLM service operations."""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """Abstract base class for LLM backends."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Sends a prompt to the model and returns the raw completion text.

        Args:
            prompt: The user prompt describing the expected output.

        Returns:
            The model's reply, unvalidated.

        Raises:
            LLMServiceError: If the call fails or returns no content.
        """
        pass
