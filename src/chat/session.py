"""Conversational session: transcript plus accept/modify/reject decisions.

Each assistant message carrying a suggestion starts in awaiting_decision.
Resolving it clears the state before anything is awaited, so the same message
can never be resolved (and saved) twice, while other messages may still be
pending independently.
"""

import itertools
import time
from typing import Optional

from src.models.models import ChatMessage, Decision, MessageState, RecipeSuggestion, Role
from src.oracle.gemini import RecipeSuggester
from src.orchestrator.recipe_book import RecipeBook
from src.prompts import prompts
from src.utils.errors import RecipeValidationError, SuggestionFailed
from src.utils.logger import logger


MAX_PROMPT_LENGTH = 2000


def format_suggestion(suggestion: RecipeSuggestion) -> str:
    """Render a suggestion as readable markdown for the transcript."""
    lines = [prompts.SUGGESTION_INTRO, "", f"**{suggestion.title}**", "", "Ingredients:"]
    lines.extend(f"- {item}" for item in suggestion.ingredients)
    lines.extend(["", "Steps:"])
    lines.extend(f"{number}. {step}" for number, step in enumerate(suggestion.steps, start=1))
    lines.extend(["", prompts.DECISION_QUESTION])
    return "\n".join(lines)


class ChatSession:
    """One chat panel's transcript, wired to a suggester and a RecipeBook."""

    def __init__(self, suggester: RecipeSuggester, recipe_book: RecipeBook, greeting: Optional[str] = prompts.GREETING) -> None:
        self.suggester = suggester
        self.recipe_book = recipe_book
        self.messages: list[ChatMessage] = []
        # Nanosecond prefix orders ids across sessions, the counter within one
        self._prefix = f"{time.time_ns():x}"
        self._counter = itertools.count(1)
        if greeting:
            self._append(Role.ASSISTANT, greeting)

    def _append(
        self,
        role: Role,
        content: str,
        suggestion: Optional[RecipeSuggestion] = None,
        state: Optional[MessageState] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            id=f"{self._prefix}-{next(self._counter):06d}",
            role=role,
            content=content,
            suggestion=suggestion,
            state=state,
        )
        self.messages.append(message)
        return message

    def get(self, message_id: str) -> ChatMessage:
        for message in self.messages:
            if message.id == message_id:
                return message
        raise KeyError(f"Message '{message_id}' does not exist.")

    def pending(self) -> list[ChatMessage]:
        """Messages whose suggestion still awaits a decision, oldest first."""
        return [message for message in self.messages if message.awaiting_decision]

    async def send(self, text: str) -> ChatMessage:
        """Send user text and append the assistant's answer.

        Returns:
            The assistant message: awaiting a decision with the suggestion
            attached, or carrying the error text if the oracle failed.

        Raises:
            RecipeValidationError: If text is blank or too long (nothing is sent).
        """
        text = (text or "").strip()
        if not text:
            raise RecipeValidationError("Please write what you would like to cook.")
        if len(text) > MAX_PROMPT_LENGTH:
            raise RecipeValidationError(f"Please keep your message under {MAX_PROMPT_LENGTH} characters.")

        self._append(Role.USER, text)

        try:
            suggestion = await self.suggester.suggest(text)
        except SuggestionFailed as e:
            logger.warning(f"Suggestion failed: {e.message}")
            return self._append(Role.ASSISTANT, e.message)

        message = self._append(
            Role.ASSISTANT,
            format_suggestion(suggestion),
            suggestion=suggestion,
            state=MessageState.AWAITING_DECISION,
        )
        logger.info(f"Suggestion '{suggestion.title}' awaiting decision", extra={"message_id": message.id})
        return message

    async def resolve(self, message_id: str, decision: Decision) -> ChatMessage:
        """Resolve the pending decision on a message.

        Args:
            message_id: Id of an assistant message awaiting a decision.
            decision: accept (save it), modify (ask what to change) or reject.

        Returns:
            The assistant reply appended to the transcript.

        Raises:
            KeyError: Unknown message id.
            ValueError: The message is not awaiting a decision.
        """
        decision = Decision(decision)
        message = self.get(message_id)
        if not message.awaiting_decision or message.suggestion is None:
            raise ValueError(f"Message '{message_id}' is not awaiting a decision.")

        message.state = None
        logger.info(f"Decision '{decision.value}' on suggestion '{message.suggestion.title}'", extra={"message_id": message_id})

        if decision == Decision.ACCEPT:
            result = await self.recipe_book.save_suggestion(message.suggestion)
            reply = prompts.ACCEPT_REPLY if result.ok else result.notice.message
            return self._append(Role.ASSISTANT, reply)
        if decision == Decision.MODIFY:
            return self._append(Role.ASSISTANT, prompts.MODIFY_REPLY)
        return self._append(Role.ASSISTANT, prompts.REJECT_REPLY)


__all__ = ["ChatSession", "format_suggestion"]
