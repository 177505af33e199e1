"""Shuffle and draw from the terminal, optionally with an interpretation."""
import os

import click

from webtarot.config import DEFAULT_LOCALE
from webtarot.domain.deck import MAX_DRAWS, Deck
from webtarot.i18n import SUPPORTED_LOCALES
from webtarot.models.enums import InterpretationBackend
from webtarot.services.explain_service import ExplainService, create_prompt_service
from webtarot.services.llm_adapter import (
    ExplainError,
    GeminiAdapter,
    OpenAIChatAdapter,
    UnexpectedError,
)

BACKEND_CHOICES = {
    "chatgpt": InterpretationBackend.CHATGPT,
    "gemini": InterpretationBackend.GEMINI,
}


def explain_service_from_env() -> ExplainService:
    """ExplainService configured from OPENAI_* / GOOGLE_* environment variables."""
    return ExplainService(
        openai_adapter=OpenAIChatAdapter(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com"),
        ),
        gemini_adapter=GeminiAdapter(
            api_key=os.getenv("GOOGLE_API_KEY", ""),
            base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"
            ),
        ),
        prompt_service=create_prompt_service(os.getenv("PROMPTS_FILE") or None),
    )


@click.command("draw")
@click.argument("question")
@click.option(
    "--cards", "-c",
    type=click.IntRange(1, MAX_DRAWS),
    default=3,
    show_default=True,
    help="Number of cards to draw",
)
@click.option("--explain/--no-explain", default=True, help="Ask the backend for an interpretation")
@click.option(
    "--backend", "-b",
    type=click.Choice(sorted(BACKEND_CHOICES)),
    default="chatgpt",
    show_default=True,
)
@click.option(
    "--locale", "-l",
    type=click.Choice(SUPPORTED_LOCALES),
    default=DEFAULT_LOCALE,
    show_default=True,
)
def draw_command(question, cards, explain, backend, locale):
    """Shuffle the deck for QUESTION and draw cards."""
    deck = Deck.build()
    shuffled_times = deck.shuffle(question)
    drawn = deck.draw(cards)

    click.echo(f"Question: {question}")
    click.echo(f"Shuffled {shuffled_times} times")
    click.echo("")
    for index, card in enumerate(drawn, start=1):
        click.echo(f"  {index}. {card.describe(locale)}")

    if not explain:
        return

    click.echo("")
    try:
        text = explain_service_from_env().explain(
            question=question,
            context=None,
            cards=drawn,
            user_name=None,
            user_self_description=None,
            backend=BACKEND_CHOICES[backend],
            locale=locale,
        )
    except ExplainError as e:
        message = e.localize(locale)
    except Exception as e:
        message = f"{UnexpectedError(str(e)).localize(locale)} ({e})"
    else:
        click.echo(text)
        return

    click.echo(f"Error: {message}", err=True)
    raise click.exceptions.Exit(1)
