"""Enumeration types for models."""
import enum


class MajorArcana(enum.Enum):
    """The 22 major arcana in canonical deck order."""

    FOOL = "fool"
    MAGICIAN = "magician"
    HIGH_PRIESTESS = "highPriestess"
    EMPRESS = "empress"
    EMPEROR = "emperor"
    HIEROPHANT = "hierophant"
    LOVERS = "lovers"
    CHARIOT = "chariot"
    STRENGTH = "strength"
    HERMIT = "hermit"
    WHEEL_OF_FORTUNE = "wheelOfFortune"
    JUSTICE = "justice"
    HANGED_MAN = "hangedMan"
    DEATH = "death"
    TEMPERANCE = "temperance"
    DEVIL = "devil"
    TOWER = "tower"
    STAR = "star"
    MOON = "moon"
    SUN = "sun"
    JUDGEMENT = "judgement"
    WORLD = "world"


class Rank(enum.Enum):
    """Minor arcana rank, ace to king."""

    ACE = "ace"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE = "five"
    SIX = "six"
    SEVEN = "seven"
    EIGHT = "eight"
    NINE = "nine"
    TEN = "ten"
    PAGE = "page"
    KNIGHT = "knight"
    QUEEN = "queen"
    KING = "king"


class Suit(enum.Enum):
    """Minor arcana suit, in canonical deck order."""

    CUPS = "cups"
    PENTACLES = "pentacles"
    SWORDS = "swords"
    WANDS = "wands"


class InterpretationStatus(enum.Enum):
    """Lifecycle status of a reading's interpretation."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class InterpretationBackend(enum.Enum):
    """External LLM provider used to interpret a reading."""

    CHATGPT = "ChatGPT"
    GEMINI = "Gemini"
