"""
Player insight generation via the OpenAI chat completion API.
"""

import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from errors import InsightGenerationFailed
from yahoo_integration.config import DEFAULT_OPENAI_MODEL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = 'You are a seasoned fantasy football analyst. Provide clear, concise, and actionable insights.'
USER_PROMPT = ('Offer a fantasy football analysis for player {player}, focusing on recent performance, '
               'strengths, weaknesses, and draft value.')
MAX_TOKENS = 200


def build_messages(player_name: str) -> list:
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        {'role': 'user', 'content': USER_PROMPT.format(player=player_name)},
    ]


class InsightGenerator:
    """Asks the chat model for a short scouting report on one player"""

    def __init__(self, client: Optional[OpenAI] = None, model: str = DEFAULT_OPENAI_MODEL,
                 max_tokens: int = MAX_TOKENS):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_api_key(cls, api_key: Optional[str], model: str = DEFAULT_OPENAI_MODEL) -> 'InsightGenerator':
        if not api_key:
            return cls(client=None, model=model)
        return cls(client=OpenAI(api_key=api_key), model=model)

    def get_insight(self, player_name: str) -> str:
        """
        Generate an analysis for a player

        Raises:
            InsightGenerationFailed: if the API key is missing or the API call fails
        """
        if self.client is None:
            raise InsightGenerationFailed("OPENAI_API_KEY not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(player_name),
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request for {player_name} failed: {e}")
            raise InsightGenerationFailed(f"Insight generation failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise InsightGenerationFailed(f"OpenAI returned no insight for {player_name}")

        return response.choices[0].message.content.strip()
