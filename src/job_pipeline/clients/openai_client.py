"""
OpenAI client wrapper for drafting outreach messages.

A single prompt-in, text-out call. No retries: failures are wrapped in
TextGenerationError and propagated.
"""

import os

from openai import AsyncOpenAI, OpenAIError

from ..errors import TextGenerationError, wrap_openai_error


class TextGenerationClient:
    """
    Async OpenAI chat client.

    Configuration via environment variables:
    - OPENAI_API_KEY: Required API key
    - OPENAI_CHAT_MODEL: Chat model (default: gpt-4.1-mini)
    - OPENAI_MAX_TOKENS: Completion cap (default: 1024)
    """

    def __init__(
        self,
        api_key: str | None = None,
        chat_model: str | None = None,
        max_tokens: int | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        if not self.api_key and client is None:
            raise ValueError('OPENAI_API_KEY environment variable is required')

        self.chat_model = chat_model or os.getenv('OPENAI_CHAT_MODEL', 'gpt-4.1-mini')
        self.max_tokens = max_tokens or int(os.getenv('OPENAI_MAX_TOKENS', '1024'))
        self._client = client or AsyncOpenAI(api_key=self.api_key)

    async def generate_text(self, prompt: str, system: str | None = None) -> str:
        """
        Generate a completion for a single prompt.

        Args:
            prompt: User prompt
            system: Optional system instructions

        Returns:
            The assistant's response text

        Raises:
            TextGenerationError: If the API call fails or returns no text
        """
        messages: list[dict[str, str]] = []
        if system:
            messages.append({'role': 'system', 'content': system})
        messages.append({'role': 'user', 'content': prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self.chat_model,
                messages=messages,  # type: ignore
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise wrap_openai_error(e, context={'model': self.chat_model}) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise TextGenerationError(
                'Unexpected empty response from text generation',
                context={'model': self.chat_model},
            )
        return content

    async def close(self) -> None:
        await self._client.close()
