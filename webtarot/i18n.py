"""Message catalogs and locale negotiation.

The locale is always passed explicitly; nothing here keeps per-request state.
"""
from typing import Any, Dict, Optional

SUPPORTED_LOCALES = ("pt", "en")
FALLBACK_LOCALE = "pt"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "system.prompt": (
            "You are an experienced and empathetic tarot reader. Interpret the "
            "cards drawn for the question in the order they were drawn, taking "
            "reversed cards into account. Relate every card to the question and, "
            "when given, to the context and to what the person says about "
            "themselves. Finish with a short synthesis. Answer in English, in "
            "plain text, without markdown headings."
        ),
        "labels.now": "Current date and time:",
        "labels.question": "Question:",
        "labels.context": "Context:",
        "labels.cards_in_order": "Cards in the order they were drawn:",
        "labels.user_name": "Name of the person asking:",
        "labels.user_self_description": "How the person describes themselves:",
        "card.flipped_suffix": " (reversed)",
        "card.minor_format": "{rank} of {suit}",
        "card.major.fool": "The Fool",
        "card.major.magician": "The Magician",
        "card.major.highPriestess": "The High Priestess",
        "card.major.empress": "The Empress",
        "card.major.emperor": "The Emperor",
        "card.major.hierophant": "The Hierophant",
        "card.major.lovers": "The Lovers",
        "card.major.chariot": "The Chariot",
        "card.major.strength": "Strength",
        "card.major.hermit": "The Hermit",
        "card.major.wheelOfFortune": "Wheel of Fortune",
        "card.major.justice": "Justice",
        "card.major.hangedMan": "The Hanged Man",
        "card.major.death": "Death",
        "card.major.temperance": "Temperance",
        "card.major.devil": "The Devil",
        "card.major.tower": "The Tower",
        "card.major.star": "The Star",
        "card.major.moon": "The Moon",
        "card.major.sun": "The Sun",
        "card.major.judgement": "Judgement",
        "card.major.world": "The World",
        "card.rank.ace": "Ace",
        "card.rank.two": "Two",
        "card.rank.three": "Three",
        "card.rank.four": "Four",
        "card.rank.five": "Five",
        "card.rank.six": "Six",
        "card.rank.seven": "Seven",
        "card.rank.eight": "Eight",
        "card.rank.nine": "Nine",
        "card.rank.ten": "Ten",
        "card.rank.page": "Page",
        "card.rank.knight": "Knight",
        "card.rank.queen": "Queen",
        "card.rank.king": "King",
        "card.suit.cups": "Cups",
        "card.suit.pentacles": "Pentacles",
        "card.suit.swords": "Swords",
        "card.suit.wands": "Wands",
        "explain.missing_api_key": (
            "The API key for the interpretation service is not configured."
        ),
        "explain.http_client_build": "Error creating HTTP client: {detail}",
        "explain.request": "Failed to call the interpretation API: {detail}",
        "explain.api_error": "The interpretation API returned an error ({status}): {body}",
        "explain.parse_response": "Failed to read the interpretation API response: {detail}",
        "explain.empty_response": "Could not get the interpretation of the cards right now.",
        "explain.unknown": "Unexpected error while interpreting the cards.",
        "interpretation.not_found": "Not found",
        "error.not_found": "Not found",
        "error.already_exists": "Already exists",
        "error.validate": "Invalid request: {detail}",
        "error.forbidden": "Forbidden",
        "error.unauthorized": "Unauthorized",
        "error.internal": "Internal server error",
        "error.method_not_allowed": "Method not allowed",
        "error.rate_limited": "Rate limit exceeded",
    },
    "pt": {
        "system.prompt": (
            "Você é um tarólogo experiente e empático. Interprete as cartas "
            "tiradas para a pergunta na ordem em que saíram, levando em conta as "
            "cartas invertidas. Relacione cada carta com a pergunta e, quando "
            "houver, com o contexto e com o que a pessoa diz sobre si mesma. "
            "Termine com uma síntese curta. Responda em português, em texto "
            "simples, sem títulos em markdown."
        ),
        "labels.now": "Data e hora atuais:",
        "labels.question": "Pergunta:",
        "labels.context": "Contexto:",
        "labels.cards_in_order": "Cartas na ordem em que foram tiradas:",
        "labels.user_name": "Nome de quem pergunta:",
        "labels.user_self_description": "Como a pessoa se descreve:",
        "card.flipped_suffix": " (invertida)",
        "card.minor_format": "{rank} de {suit}",
        "card.major.fool": "O Louco",
        "card.major.magician": "O Mago",
        "card.major.highPriestess": "A Sacerdotisa",
        "card.major.empress": "A Imperatriz",
        "card.major.emperor": "O Imperador",
        "card.major.hierophant": "O Hierofante",
        "card.major.lovers": "Os Enamorados",
        "card.major.chariot": "O Carro",
        "card.major.strength": "A Força",
        "card.major.hermit": "O Eremita",
        "card.major.wheelOfFortune": "A Roda da Fortuna",
        "card.major.justice": "A Justiça",
        "card.major.hangedMan": "O Enforcado",
        "card.major.death": "A Morte",
        "card.major.temperance": "A Temperança",
        "card.major.devil": "O Diabo",
        "card.major.tower": "A Torre",
        "card.major.star": "A Estrela",
        "card.major.moon": "A Lua",
        "card.major.sun": "O Sol",
        "card.major.judgement": "O Julgamento",
        "card.major.world": "O Mundo",
        "card.rank.ace": "Ás",
        "card.rank.two": "Dois",
        "card.rank.three": "Três",
        "card.rank.four": "Quatro",
        "card.rank.five": "Cinco",
        "card.rank.six": "Seis",
        "card.rank.seven": "Sete",
        "card.rank.eight": "Oito",
        "card.rank.nine": "Nove",
        "card.rank.ten": "Dez",
        "card.rank.page": "Valete",
        "card.rank.knight": "Cavaleiro",
        "card.rank.queen": "Rainha",
        "card.rank.king": "Rei",
        "card.suit.cups": "Copas",
        "card.suit.pentacles": "Ouros",
        "card.suit.swords": "Espadas",
        "card.suit.wands": "Paus",
        "explain.missing_api_key": (
            "A chave de API do serviço de interpretação não está configurada."
        ),
        "explain.http_client_build": "Erro criando cliente HTTP: {detail}",
        "explain.request": "Falha ao chamar a API de interpretação: {detail}",
        "explain.api_error": "A API de interpretação retornou erro ({status}): {body}",
        "explain.parse_response": "Falha ao ler resposta da API de interpretação: {detail}",
        "explain.empty_response": (
            "Não foi possível obter a interpretação das cartas no momento."
        ),
        "explain.unknown": "Erro inesperado ao interpretar as cartas.",
        "interpretation.not_found": "Não encontrado",
        "error.not_found": "Não encontrado",
        "error.already_exists": "Já existe",
        "error.validate": "Requisição inválida: {detail}",
        "error.forbidden": "Proibido",
        "error.unauthorized": "Não autorizado",
        "error.internal": "Erro interno do servidor",
        "error.method_not_allowed": "Método não permitido",
        "error.rate_limited": "Limite de requisições excedido",
    },
}


def normalize_locale(value: Optional[str], default: str = FALLBACK_LOCALE) -> str:
    """Reduce a language tag to a supported two-letter locale."""
    if not value:
        return default
    code = value.strip()[:2].lower()
    if code in SUPPORTED_LOCALES:
        return code
    return default


def negotiate_locale(
    x_locale: Optional[str],
    accept_language: Optional[str],
    default: str = FALLBACK_LOCALE,
) -> str:
    """
    Pick the request locale.

    X-Locale wins over Accept-Language; only the first two characters of
    either header are considered.

    Args:
        x_locale: Value of the X-Locale header
        accept_language: Value of the Accept-Language header
        default: Locale used when neither header names a supported one

    Returns:
        Supported locale code
    """
    default = normalize_locale(default, FALLBACK_LOCALE)
    if x_locale and x_locale.strip():
        return normalize_locale(x_locale, default)
    return normalize_locale(accept_language, default)


def translate(key: str, locale: str, **params: Any) -> str:
    """
    Look up a message in the locale catalog and format it.

    Falls back to the default catalog, then to the key itself.
    """
    catalog = CATALOGS.get(locale) or CATALOGS[FALLBACK_LOCALE]
    template = catalog.get(key)
    if template is None:
        template = CATALOGS[FALLBACK_LOCALE].get(key, key)
    if params:
        return template.format(**params)
    return template
