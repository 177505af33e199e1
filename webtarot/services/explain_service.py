"""Interpretation backend: builds the prompt and calls the selected LLM."""
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from webtarot.domain.card import Card
from webtarot.i18n import translate
from webtarot.models.enums import InterpretationBackend
from webtarot.services.llm_adapter import GeminiAdapter, OpenAIChatAdapter
from webtarot.services.prompt_service import INTERPRETATION_PROMPT, PromptService

logger = logging.getLogger(__name__)

LABEL_KEYS = (
    "now",
    "question",
    "context",
    "cards_in_order",
    "user_name",
    "user_self_description",
)


def create_prompt_service(prompts_file: Optional[str] = None) -> PromptService:
    """Prompt templates from PROMPTS_FILE when set, built-in otherwise."""
    if prompts_file:
        return PromptService(prompts_file=prompts_file)
    return PromptService.default()


class ExplainService:
    """
    Interpretation backend used by the dispatcher and the CLI.

    Treated by callers as an opaque, slow and fallible call: it either
    returns the interpretation text or raises an ExplainError.
    """

    def __init__(
        self,
        openai_adapter: OpenAIChatAdapter,
        gemini_adapter: GeminiAdapter,
        prompt_service: PromptService,
    ):
        self._adapters = {
            InterpretationBackend.CHATGPT: openai_adapter,
            InterpretationBackend.GEMINI: gemini_adapter,
        }
        self._prompt_service = prompt_service

    def build_user_prompt(
        self,
        question: str,
        context: Optional[str],
        cards: Sequence[Card],
        user_name: Optional[str],
        user_self_description: Optional[str],
        locale: str,
        now: Optional[datetime] = None,
    ) -> str:
        """Render the user message with localized labels and card names."""
        now = now or datetime.now(timezone.utc).astimezone()
        return self._prompt_service.render(
            INTERPRETATION_PROMPT,
            {
                "labels": {key: translate(f"labels.{key}", locale) for key in LABEL_KEYS},
                "now": now.isoformat(),
                "question": question,
                "context": context,
                "cards": [card.describe(locale) for card in cards],
                "user_name": user_name,
                "user_self_description": user_self_description,
            },
        )

    def explain(
        self,
        question: str,
        context: Optional[str],
        cards: Sequence[Card],
        user_name: Optional[str],
        user_self_description: Optional[str],
        backend: InterpretationBackend,
        locale: str,
    ) -> str:
        """
        Ask the backend to interpret the cards drawn for a question.

        Args:
            question: The question asked
            context: Extra context, None when not given
            cards: Drawn cards in order
            user_name: Display name, None when not given
            user_self_description: Self-description, None when not given
            backend: Provider to call
            locale: Language for the prompt

        Returns:
            Interpretation text

        Raises:
            ExplainError: If the provider call fails
        """
        adapter = self._adapters[backend]
        system_prompt = translate("system.prompt", locale)
        user_prompt = self.build_user_prompt(
            question, context, cards, user_name, user_self_description, locale
        )
        logger.debug(
            f"Requesting interpretation from {backend.value} "
            f"({len(cards)} cards, locale={locale})"
        )
        return adapter.complete(system_prompt, user_prompt)
