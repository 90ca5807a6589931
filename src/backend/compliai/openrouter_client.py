import logging
import os

import requests
from dotenv import load_dotenv

from .errors import RequestFailed
from .prompts import Prompt

load_dotenv()

logger = logging.getLogger(__name__)

# ── LLM generation options (from .env) ──
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL")
OPENROUTER_TEMPERATURE = float(os.getenv("OPENROUTER_TEMPERATURE"))


class OpenRouterClient:
    def __init__(self, api_key: str, model: str = None, base_url: str = None, timeout: float = None):
        self.api_key = api_key
        self.model = model or OPENROUTER_MODEL
        self.base_url = (base_url or os.getenv("OPENROUTER_BASE_URL")).rstrip("/")
        self.timeout = timeout or float(os.getenv("OPENROUTER_TIMEOUT"))

    def analyze(self, prompt: Prompt) -> str:
        """One chat-completion round trip. Never retried here."""
        payload = {
            "model": self.model,
            "temperature": OPENROUTER_TEMPERATURE,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user}
            ]
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            r = requests.post(
                f"{self.base_url}/chat/completions", json=payload, headers=headers, timeout=self.timeout
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            logger.warning("Scoring request to %s failed: %s", self.base_url, e)
            raise RequestFailed(f"Scoring request failed: {e}") from e

        return _message_content(data)


def _message_content(data) -> str:
    """choices[0].message.content of a chat-completion envelope.

    No choices or a null content yields "" (the parser rejects it). Any other
    shape is a malformed reply and raises RequestFailed.
    """
    if not isinstance(data, dict):
        raise RequestFailed("Malformed completion envelope: expected a JSON object.")
    choices = data.get("choices")
    if not choices:
        return ""
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        raise RequestFailed("Malformed completion envelope: 'choices' must be a list of objects.")
    message = choices[0].get("message")
    if message is None:
        return ""
    if not isinstance(message, dict):
        raise RequestFailed("Malformed completion envelope: 'message' must be an object.")
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise RequestFailed(f"Malformed completion envelope: 'content' is {type(content).__name__}, not text.")
    return content
