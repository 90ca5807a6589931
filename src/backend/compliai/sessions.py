"""Per-session wizard state: regulation selection, draft text and the orchestrator."""
import os

from dotenv import load_dotenv

from .credentials import OPENROUTER, CredentialStore
from .openrouter_client import OpenRouterClient
from .orchestrator import AnalysisOrchestrator
from .regulations import RegulationSelector

load_dotenv()

credentials = CredentialStore({OPENROUTER: os.getenv("OPENROUTER_API_KEY") or ""})

_sessions: dict[str, "AssessmentSession"] = {}


def build_client() -> OpenRouterClient | None:
    api_key = credentials.get(OPENROUTER)
    return OpenRouterClient(api_key=api_key) if api_key else None


class AssessmentSession:
    def __init__(self, client: OpenRouterClient | None):
        self.selector = RegulationSelector()
        self.orchestrator = AnalysisOrchestrator(client=client)
        self.document_text = ""

    def close(self) -> None:
        self.orchestrator.close()


def get_session(sid: str) -> AssessmentSession:
    if sid not in _sessions:
        _sessions[sid] = AssessmentSession(client=build_client())
    return _sessions[sid]


def find_session(sid: str) -> AssessmentSession | None:
    return _sessions.get(sid)


def close_session(sid: str) -> bool:
    session = _sessions.pop(sid, None)
    if session is None:
        return False
    session.close()
    return True


def rebind_clients() -> None:
    """Push the current credential into every open session."""
    client = build_client()
    for session in _sessions.values():
        session.orchestrator.configure_client(client)
