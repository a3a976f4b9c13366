"""
OpenAI-compatible chat client with rate limiting using aiolimiter.
"""
import os
from typing import Optional
from aiolimiter import AsyncLimiter
from openai import AsyncOpenAI
from loguru import logger

from skillbridge.config import OPENAI_API_KEY, OPENAI_BASE_URL, LLM_MODEL, CONCURRENCY


class OpenAIClient:
    """
    Rate-limited wrapper around AsyncOpenAI.

    Created once by the caller and passed to the LLM candidate source and the
    email drafter, so tests can substitute a fake.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = LLM_MODEL,
    ):
        api_key = api_key or OPENAI_API_KEY or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY must be set in environment or config")

        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url or OPENAI_BASE_URL)
        # Token bucket: at most CONCURRENCY (capped at 500) requests per second
        self.rate_limiter = AsyncLimiter(max_rate=min(CONCURRENCY, 500), time_period=1.0)

    async def chat_completions_create(self, **kwargs):
        """
        Create a chat completion with rate limiting.
        Accepts all arguments that AsyncOpenAI.chat.completions.create accepts;
        `model` defaults to the client's model.

        Returns:
            The response from the chat completions API.
        """
        kwargs.setdefault("model", self.model)
        async with self.rate_limiter:
            try:
                return await self.client.chat.completions.create(**kwargs)
            except Exception as e:
                logger.debug(f"⚠️ OpenAI API request failed: {e}")
                raise

    async def complete_text(self, prompt: str, **kwargs) -> str:
        """Send a single user message and return the reply text."""
        resp = await self.chat_completions_create(
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return (resp.choices[0].message.content or "").strip()
