import logging

logger = logging.getLogger(__name__)

OPENROUTER = "openrouter"


class CredentialStore:
    """In-process API credentials, one string per provider name."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._keys: dict[str, str] = {}
        for provider, value in (initial or {}).items():
            if value and value.strip():
                self.set(provider, value)

    def get(self, provider: str) -> str | None:
        return self._keys.get(provider)

    def set(self, provider: str, value: str) -> None:
        if not value or not value.strip():
            raise ValueError("Please enter a valid API key")
        self._keys[provider] = value.strip()
        logger.info("Stored API credential for provider '%s'", provider)

    def has(self, provider: str) -> bool:
        return provider in self._keys
