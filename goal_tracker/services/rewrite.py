import logging
from typing import Optional

import httpx

from goal_tracker.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert goal-setting assistant. Your job is to take vague goals and make them "
    "specific, measurable, achievable, relevant, and time-bound (SMART). "
    "Keep your response to a single sentence."
)


class GoalRewriter:
    """Chat-completion client that turns a vague goal into one SMART sentence."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_MODEL
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    async def complete(self, vague: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f'Turn this vague goal into a specific, actionable 1-sentence goal: "{vague}"',
                },
            ],
            "temperature": 1,
            "max_tokens": 100,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
            response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"] or ""

    async def rewrite(self, vague: str) -> str:
        """Rewritten goal, or the original text if the completion fails."""
        if not self.api_key:
            logger.warning("OPENAI_API_KEY is not configured, returning goal unchanged")
            return vague
        try:
            rewritten = (await self.complete(vague)).strip()
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError):
            logger.exception("Error rewriting goal")
            return vague
        return rewritten or vague


def get_rewriter() -> GoalRewriter:
    return GoalRewriter()
