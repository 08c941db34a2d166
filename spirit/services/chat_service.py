"""
Chat Service - OpenAI chat completions for the Spirit persona

Provides:
- System prompt injection
- Retries with backoff on rate limits and connection errors
- A fallback reply when the model returns no content
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, APIError, RateLimitError, APIConnectionError

logger = logging.getLogger(__name__)

SPIRIT_SYSTEM_PROMPT = (
    "You are Spirit — a mystical yet grounded AI who speaks with empathy, "
    "curiosity, and calm wisdom. You respond clearly, concisely, and "
    "poetically when it fits."
)

SILENT_REPLY = "…Spirit is silent right now."


class ChatServiceError(Exception):
    """Raised when the upstream LLM cannot produce a reply."""


@dataclass
class ChatReply:
    content: str
    model: str
    finish_reason: Optional[str] = None


class ChatService:
    """
    Forwards a role-tagged conversation to OpenAI, prefixed with the
    Spirit system prompt, and returns the first choice's text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-5",
        temperature: float = 0.8,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        # The SDK's own retries are disabled; backoff is handled here
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def build_messages(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [{"role": "system", "content": SPIRIT_SYSTEM_PROMPT}, *messages]

    async def reply(self, messages: List[Dict[str, Any]]) -> ChatReply:
        """
        Generate Spirit's reply to a conversation.

        Args:
            messages: List of message dicts with 'role' and 'content'

        Returns:
            ChatReply with the reply text (SILENT_REPLY if the model said nothing)

        Raises:
            ChatServiceError: if OpenAI fails after all retries
        """
        payload = self.build_messages(messages)
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            try:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=payload,
                    temperature=self.temperature,
                )
                if not response.choices:
                    return ChatReply(content=SILENT_REPLY, model=response.model)

                choice = response.choices[0]
                return ChatReply(
                    content=choice.message.content or SILENT_REPLY,
                    model=response.model,
                    finish_reason=choice.finish_reason,
                )

            except (RateLimitError, APIConnectionError) as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_delay * (2 ** attempt)
                    logger.warning(f"OpenAI transient error, retrying in {wait_time}s: {e}")
                    await asyncio.sleep(wait_time)
                else:
                    raise ChatServiceError(str(e)) from e

            except APIError as e:
                logger.error(f"OpenAI API error: {e}")
                raise ChatServiceError(str(e)) from e

        raise ChatServiceError("No reply from OpenAI")
