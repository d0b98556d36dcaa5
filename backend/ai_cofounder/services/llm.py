from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from openai import AsyncOpenAI

from ai_cofounder.metrics import CHAT_COMPLETIONS_TOTAL, TOKENS_TOTAL
from ai_cofounder.prompts import COFOUNDER_SYSTEM_PROMPT, FALLBACK_REPLY_EMPTY

if TYPE_CHECKING:
    from ai_cofounder.api_models import ChatHistoryItem
    from ai_cofounder.dependencies import Settings

log = logging.getLogger(__name__)


class ChatCompletionService:
    """Chat completions and embeddings for the co-founder, over a shared AsyncOpenAI client."""

    def __init__(self, client: AsyncOpenAI, settings: "Settings"):
        self.client = client
        self.settings = settings

    def build_messages(self, message: str, history: Sequence["ChatHistoryItem"] = ()) -> List[Dict[str, str]]:
        """System prompt, the last few history entries, then the new user message."""
        window = self.settings.chat_history_window
        recent = list(history)[-window:] if window else []
        messages = [{"role": "system", "content": COFOUNDER_SYSTEM_PROMPT}]
        messages.extend(
            {"role": "assistant" if item.is_ai else "user", "content": item.text}
            for item in recent
        )
        messages.append({"role": "user", "content": message})
        return messages

    async def complete(self, message: str, history: Sequence["ChatHistoryItem"] = ()) -> str:
        """Return the raw assistant reply (directives included).

        Errors from the OpenAI client propagate; the chat router owns the
        user-facing fallback.
        """
        model = self.settings.openai_chat_model
        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=self.build_messages(message, history),
                max_tokens=self.settings.chat_max_tokens,
                temperature=self.settings.chat_temperature,
            )
        except Exception:
            CHAT_COMPLETIONS_TOTAL.labels(outcome="error").inc()
            raise

        CHAT_COMPLETIONS_TOTAL.labels(outcome="ok").inc()
        _count_tokens(model, "chat", getattr(completion, "usage", None))

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            log.info("Chat completion returned no content; using fallback reply.")
            return FALLBACK_REPLY_EMPTY
        return content

    async def embed(self, text: str) -> List[float]:
        model = self.settings.openai_embedding_model
        response = await self.client.embeddings.create(model=model, input=text)
        _count_tokens(model, "embedding", getattr(response, "usage", None))
        return list(response.data[0].embedding)

    async def ping(self) -> None:
        await self.client.models.list()


def _count_tokens(model: str, phase: str, usage: Any) -> None:
    total = getattr(usage, "total_tokens", None)
    if isinstance(total, int) and total > 0:
        TOKENS_TOTAL.labels(model=model, phase=phase).inc(total)
