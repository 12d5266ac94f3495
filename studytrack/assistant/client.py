import logging

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the generative-language API cannot produce an answer."""


class GenerativeClient:
    """
    Thin wrapper around the generative-language API.

    The API is reached through its OpenAI-compatible endpoint, so the regular
    ``openai`` client does the HTTP work. No prompt logic lives here.
    """

    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 60.0):
        self.model = model
        self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def generate(self, prompt: str, temperature: float = 0.4) -> str:
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
        except OpenAIError as exc:
            logger.exception("Generative API call failed (model=%s)", self.model)
            raise AIServiceError(f"Generative API error: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise AIServiceError(f"Invalid or empty response from generative API ({self.model})")
        return content

    def test_connection(self) -> dict:
        try:
            self.generate("Hello")
        except AIServiceError as exc:
            return {"success": False, "message": f"Connection error: {exc}"}
        return {"success": True, "message": f"Successfully connected with model {self.model}."}
