"""Prompt Service for rendering LLM prompts with Jinja2 templating"""
import json
import os
from typing import Any, Dict, Optional
from jinja2 import Template, TemplateSyntaxError

INTERPRETATION_PROMPT = "interpretation_user"

DEFAULT_PROMPTS: Dict[str, Any] = {
    "_defaults": {},
    INTERPRETATION_PROMPT: {
        "template": (
            "{{ labels.now }} {{ now }}\n"
            "{{ labels.question }} {{ question }}\n"
            "{% if context %}{{ labels.context }} {{ context }}\n{% endif %}"
            "{{ labels.cards_in_order }}\n"
            "{% for card in cards %}{{ loop.index }}. {{ card }}\n{% endfor %}"
            "{% if user_name %}{{ labels.user_name }} {{ user_name }}\n{% endif %}"
            "{% if user_self_description %}"
            "{{ labels.user_self_description }} {{ user_self_description }}\n"
            "{% endif %}"
        ),
        "variables": [
            "labels",
            "now",
            "question",
            "context",
            "cards",
            "user_name",
            "user_self_description",
        ],
    },
}


class PromptService:
    """Load and render LLM prompt templates."""

    def __init__(self, prompts_file: Optional[str] = None, prompts_data: Optional[Dict[str, Any]] = None):
        """Initialize service with prompts file path or data dict.

        Args:
            prompts_file: Path to JSON prompts file (optional)
            prompts_data: Prompts data as dictionary (optional)

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If JSON is invalid
            ValueError: If neither file nor data provided
        """
        if prompts_file:
            self.prompts_file = prompts_file
            self.prompts = self._load_prompts()
        elif prompts_data:
            self.prompts_file = None
            self.prompts = prompts_data
        else:
            raise ValueError("Either prompts_file or prompts_data must be provided")

        self.defaults = self.prompts.get('_defaults', {})

    @classmethod
    def from_dict(cls, prompts_data: Dict[str, Any]) -> 'PromptService':
        """Create PromptService from a prompts dictionary."""
        return cls(prompts_data=prompts_data)

    @classmethod
    def default(cls) -> 'PromptService':
        """PromptService with the built-in interpretation prompt."""
        return cls.from_dict(DEFAULT_PROMPTS)

    def _load_prompts(self) -> Dict[str, Any]:
        """Load prompts from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If JSON is invalid
        """
        if not os.path.exists(self.prompts_file):
            raise FileNotFoundError(f"Prompt file not found: {self.prompts_file}")

        with open(self.prompts_file) as f:
            return json.load(f)

    def get_prompt(self, slug: str) -> Dict[str, Any]:
        """Get prompt with defaults merged in.

        Raises:
            ValueError: If slug is internal (_*) or doesn't exist
        """
        if slug.startswith('_'):
            raise ValueError(f"Cannot access internal prompt: {slug}")

        prompt = self.prompts.get(slug)
        if not prompt:
            raise ValueError(f"Prompt not found: {slug}")

        resolved = {**self.defaults}
        resolved.update(prompt)
        return resolved

    def render(self, slug: str, context: Dict[str, Any]) -> str:
        """Render prompt template with context using Jinja2.

        Args:
            slug: Prompt identifier
            context: Variables to interpolate into template

        Returns:
            Rendered template string, trailing whitespace removed

        Raises:
            ValueError: If slug doesn't exist or the template is invalid
        """
        prompt = self.get_prompt(slug)
        template = prompt.get('template', '')

        try:
            return Template(template).render(context).rstrip()
        except TemplateSyntaxError as e:
            raise ValueError(f"Error rendering prompt '{slug}': {e}")
