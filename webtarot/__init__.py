"""webtarot backend: tarot readings with asynchronous LLM interpretations."""

__version__ = "0.1.0"
