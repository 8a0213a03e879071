"""Chat service - answers questions about the user's goals via Groq."""
import json
import logging
from datetime import date
from typing import Optional

import httpx

from app.config import Settings, settings as default_settings
from app.models.goal import GoalDetail
from app.services.goal_service import GoalService
from app.utils.dates import current_date


logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "Sorry, I could not generate a response."

SYSTEM_PROMPT_TEMPLATE = """You are an intelligent and encouraging AI productivity assistant integrated within the "Goal Command Centre" dashboard. Your primary purpose is to help the user stay informed, motivated, and on track with the goals they have set.

Core Instructions:
1. Analyze User Queries: Carefully read the user's question to understand their intent. They may be asking for a summary, specific details, or advice on what to do next.
2. Provide Accurate Information: Base your answers strictly on the user goals data provided below. If asked about a goal, retrieve its title, target, action steps, and current streak.
3. Be encouraging: Use the daily_streak data to offer motivation. If a streak is high, congratulate them. If it's low or zero, gently encourage them to get started today.
4. Suggest Next Steps: When a user asks "What should I do next?" analyze their incomplete_tasks and suggest one as a clear, actionable next step.
5. Maintain a Conversational Tone: Be helpful and approachable. Address the user directly.
6. Handle Ambiguity: If the user's query is unclear, ask for clarification.
7. Stay Within Scope: If the user asks a question that cannot be answered using the provided data, gently decline and guide them back to their goals.

Today is {today}.

USER GOALS DATA:
{goals_json}

Remember to:
- Be concise but warm in your responses
- Focus on actionable insights
- Celebrate wins and encourage consistency
- Keep responses under 200 words when possible"""


class ChatUnavailableError(RuntimeError):
    """Raised when no LLM API key is configured."""


class ChatUpstreamError(RuntimeError):
    """Raised when the LLM API call fails or returns an unusable body."""


class ChatService:
    """Service for the goals chat assistant."""

    def __init__(
        self,
        db,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize service.

        Args:
            db: Database connection (used to load the user's goals)
            config: Settings; defaults to the application settings
            http_client: Optional client to reuse (a new one is opened per call otherwise)
        """
        self.db = db
        self.config = config or default_settings
        self.http_client = http_client
        self.goal_service = GoalService(db)

    @staticmethod
    def build_goals_context(goals: list[GoalDetail]) -> list[dict]:
        """
        Reduce goal details to the data the assistant is allowed to see.

        Returns:
            One JSON-serializable dict per goal
        """
        return [
            {
                "id": goal.id,
                "title": goal.title,
                "description": goal.description,
                "target_date": goal.target_date.isoformat() if goal.target_date else None,
                "progress": goal.progress,
                "action_steps": [
                    {"title": step.title, "completed": step.completed}
                    for step in goal.action_steps
                ],
                "daily_streak": goal.stats.current_streak,
                "completed_dates": [
                    record.completed_date.isoformat() for record in goal.completed_dates
                ],
                "incomplete_tasks": [
                    step.title for step in goal.action_steps if not step.completed
                ],
            }
            for goal in goals
        ]

    def build_messages(self, message: str, goals_context: list[dict], today: date) -> list[dict]:
        """Assemble the system and user messages for a chat completion."""
        system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
            today=today.isoformat(),
            goals_json=json.dumps(goals_context, indent=2),
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": message},
        ]

    async def _post_completion(self, payload: dict) -> dict:
        headers = {
            "Authorization": f"Bearer {self.config.groq_api_key}",
            "Content-Type": "application/json",
        }

        if self.http_client is not None:
            response = await self.http_client.post(
                self.config.groq_api_url,
                headers=headers,
                json=payload,
            )
        else:
            async with httpx.AsyncClient(timeout=self.config.groq_timeout_seconds) as client:
                response = await client.post(
                    self.config.groq_api_url,
                    headers=headers,
                    json=payload,
                )

        response.raise_for_status()
        return response.json()

    async def ask(self, user_id: str, message: str, today: Optional[date] = None) -> str:
        """
        Answer a question about the user's goals.

        Args:
            user_id: User ID whose goals form the context
            message: The user's question
            today: Reference day for streaks

        Returns:
            Assistant reply text

        Raises:
            ChatUnavailableError: If no API key is configured
            ChatUpstreamError: If the API call fails
        """
        if not self.config.groq_api_key:
            raise ChatUnavailableError("Groq API key not configured")

        today = today or current_date()
        goals = await self.goal_service.list_goals(user_id, today=today)
        payload = {
            "model": self.config.groq_model,
            "messages": self.build_messages(
                message,
                self.build_goals_context(goals),
                today,
            ),
            "temperature": self.config.groq_temperature,
            "max_tokens": self.config.groq_max_tokens,
            "top_p": 1,
            "stream": False,
        }

        try:
            data = await self._post_completion(payload)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Chat completion rejected",
                extra={"status_code": e.response.status_code, "user_id": user_id},
            )
            raise ChatUpstreamError(f"Chat provider returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Chat completion failed", extra={"error": str(e), "user_id": user_id})
            raise ChatUpstreamError("Failed to generate response") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        return content or FALLBACK_RESPONSE
