"""
OpenAI LLM client in JSON mode.
"""
import logging
from typing import Optional

from openai import OpenAI

from ..config import OpenAIConfig, get_config
from ..errors import ConfigurationError


logger = logging.getLogger(__name__)


class LLMClient:
    """
    Thin wrapper around the OpenAI chat completions API.
    The underlying client is created on first use, so constructing an
    LLMClient without an API key is allowed until a call is made.
    """

    def __init__(self, config: Optional[OpenAIConfig] = None, client: Optional[OpenAI] = None):
        self.config = config or get_config().openai
        self.model = self.config.model
        self._client = client

    def is_available(self) -> bool:
        """Check if the LLM client is properly configured."""
        return self._client is not None or bool(self.config.api_key)

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise ConfigurationError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=self.config.api_key)
        return self._client

    def call_json(self, system_prompt: str, user_prompt: str) -> str:
        """
        Make a JSON-mode chat completion and return the message text.

        Returns "{}" when the model sends back no content.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        if not response.choices:
            return "{}"
        return response.choices[0].message.content or "{}"
