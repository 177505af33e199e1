"""LLM adapters: HTTP calls to the OpenAI and Gemini text generation APIs."""
import logging
from typing import Any, Dict

import requests

from webtarot.i18n import translate

logger = logging.getLogger(__name__)

USER_AGENT = "webtarot/0.1"
DEFAULT_TIMEOUT = 300


class ExplainError(Exception):
    """
    Raised when an interpretation backend call fails.

    ``localize`` renders the message shown to the user; ``str()`` keeps
    the raw detail for logs.
    """

    message_key = "explain.empty_response"

    def params(self) -> Dict[str, Any]:
        return {}

    def localize(self, locale: str) -> str:
        return translate(self.message_key, locale, **self.params())


class MissingApiKey(ExplainError):
    """No API key configured for the requested provider."""

    message_key = "explain.missing_api_key"


class HttpClientBuild(ExplainError):
    """The request could not be built (bad base URL, bad scheme)."""

    message_key = "explain.http_client_build"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def params(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class RequestFailed(ExplainError):
    """Network failure or timeout while calling the API."""

    message_key = "explain.request"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def params(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class ApiError(ExplainError):
    """The API answered with a non-success status."""

    message_key = "explain.api_error"

    def __init__(self, status: int, body: str):
        super().__init__(f"{status}: {body}")
        self.status = status
        self.body = body

    def params(self) -> Dict[str, Any]:
        return {"status": self.status, "body": self.body}


class ParseResponse(ExplainError):
    """The response body did not have the expected shape."""

    message_key = "explain.parse_response"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def params(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class EmptyResponse(ExplainError):
    """The API returned no usable text."""

    message_key = "explain.empty_response"


class UnexpectedError(ExplainError):
    """Any other failure while preparing or reading an interpretation."""

    message_key = "explain.unknown"


def _post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: int,
) -> Dict[str, Any]:
    """POST a JSON payload and return the decoded JSON response."""
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema) as e:
        raise HttpClientBuild(str(e))
    except requests.Timeout:
        raise RequestFailed("request timed out")
    except requests.RequestException as e:
        raise RequestFailed(str(e))

    if not 200 <= response.status_code < 300:
        logger.warning(f"LLM API {url} returned {response.status_code}")
        raise ApiError(response.status_code, response.text)

    try:
        return response.json()
    except ValueError as e:
        raise ParseResponse(str(e))


class OpenAIChatAdapter:
    """Adapter for the OpenAI chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        model: str = "gpt-5.1",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.api_endpoint = self._normalize_endpoint(base_url)
        self.model = model
        self.timeout = timeout

    @staticmethod
    def _normalize_endpoint(base_url: str) -> str:
        """Build the chat completions URL from a base URL.

        Accepts both full paths and base URLs:
          https://api.openai.com                      -> .../v1/chat/completions
          https://api.openai.com/v1                   -> .../v1/chat/completions
          https://api.openai.com/v1/chat/completions  -> as-is
        """
        if not base_url:
            return base_url
        endpoint = base_url.rstrip("/")
        if endpoint.endswith("/chat/completions"):
            return endpoint
        if not endpoint.endswith("/v1"):
            endpoint += "/v1"
        return endpoint + "/chat/completions"

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one system and one user message and return the reply text.

        Raises:
            ExplainError: If the API call fails.
        """
        if not self.api_key:
            raise MissingApiKey("OPENAI_API_KEY is not set")
        if not self.api_endpoint:
            raise HttpClientBuild("OpenAI base URL is not configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

        data = _post_json(self.api_endpoint, payload, headers, self.timeout)
        try:
            choices = data["choices"]
            content = choices[0]["message"]["content"] if choices else ""
        except (KeyError, IndexError, TypeError) as e:
            raise ParseResponse(f"unexpected response shape: {e}")

        if content and not isinstance(content, str):
            raise ParseResponse(f"unexpected content type: {type(content).__name__}")
        if not content or not content.strip():
            raise EmptyResponse("no content in response")
        return content


class GeminiAdapter:
    """Adapter for the Google Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com",
        model: str = "gemini-2.5-flash",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.base_url = (base_url or "").rstrip("/")
        self.model = model
        self.timeout = timeout

    @property
    def api_endpoint(self) -> str:
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a reply for the user prompt under the system instruction.

        Raises:
            ExplainError: If the API call fails.
        """
        if not self.api_key:
            raise MissingApiKey("GOOGLE_API_KEY is not set")
        if not self.base_url:
            raise HttpClientBuild("Gemini base URL is not configured")

        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        }
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

        data = _post_json(self.api_endpoint, payload, headers, self.timeout)
        try:
            candidates = data.get("candidates") or []
            parts = candidates[0]["content"]["parts"] if candidates else []
            content = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ParseResponse(f"unexpected response shape: {e}")

        if not content.strip():
            raise EmptyResponse("no content in response")
        return content

