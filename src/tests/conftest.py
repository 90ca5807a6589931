"""
Shared fixtures for unit and integration tests.
"""

import os
import sys
import pytest
from unittest.mock import MagicMock
from io import BytesIO

# ── Ensure backend package is importable without an install ──
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(ROOT, "backend"))

# ── Fake .env values used by every test ──
ENV_DEFAULTS = {
    "OPENROUTER_BASE_URL": "https://openrouter.test/api/v1",
    "OPENROUTER_MODEL": "openai/gpt-4o-mini",
    "OPENROUTER_TEMPERATURE": "0.2",
    "OPENROUTER_TIMEOUT": "60",
    "OPENROUTER_API_KEY": "",
    "ANALYSIS_DEBOUNCE_MS": "1000",
    "CORS_ORIGINS": "*",
    "LOG_LEVEL": "WARNING",
    "API_BASE": "http://127.0.0.1:8000",
    "ANALYZE_TIMEOUT": "120",
}


@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Inject all required env vars so modules never blow up on import."""
    for k, v in ENV_DEFAULTS.items():
        monkeypatch.setenv(k, v)


@pytest.fixture
def sample_pdf_bytes():
    """
    Build a minimal valid PDF in memory with reportlab (if available)
    or fall back to a hand-crafted tiny PDF.
    """
    try:
        from reportlab.lib.pagesizes import letter
        from reportlab.pdfgen import canvas

        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=letter)
        c.drawString(100, 700, "Privacy Policy")
        c.drawString(100, 680, "We collect emails without consent.")
        c.drawString(100, 660, "Data is retained indefinitely.")
        c.save()
        return buf.getvalue()
    except ImportError:
        return (
            b"%PDF-1.4\n1 0 obj<</Type/Catalog/Pages 2 0 R>>endobj\n"
            b"2 0 obj<</Type/Pages/Kids[3 0 R]/Count 1>>endobj\n"
            b"3 0 obj<</Type/Page/MediaBox[0 0 612 792]/Parent 2 0 R"
            b"/Contents 4 0 R>>endobj\n"
            b"4 0 obj<</Length 44>>stream\nBT /F1 12 Tf 100 700 Td "
            b"(Privacy Policy) Tj ET\nendstream\nendobj\n"
            b"xref\n0 5\n0000000000 65535 f \n0000000009 00000 n \n"
            b"0000000058 00000 n \n0000000115 00000 n \n0000000214 00000 n \n"
            b"trailer<</Size 5/Root 1 0 R>>\nstartxref\n309\n%%EOF"
        )


@pytest.fixture
def mock_scoring_client():
    """Return a MagicMock that behaves like OpenRouterClient."""
    client = MagicMock()
    client.api_key = "sk-or-test"
    client.model = "openai/gpt-4o-mini"
    client.base_url = "https://openrouter.test/api/v1"
    client.timeout = 60
    return client


@pytest.fixture
def sample_report_json():
    """The raw JSON report for the consent scenario."""
    return (
        '{"score":72,"issues":[{"severity":"high",'
        '"description":"Missing explicit user consent for data collection",'
        '"recommendation":"Add clear consent mechanisms before collecting user data"}],'
        '"summary":"Consent gap found."}'
    )


@pytest.fixture
def sample_fenced_response(sample_report_json):
    """The same report wrapped in prose and a ```json fence."""
    return (
        "Here is the compliance analysis you asked for:\n\n"
        "```json\n"
        f"{sample_report_json}\n"
        "```\n"
        "Let me know if you need anything else."
    )


@pytest.fixture
def chat_completion():
    """Factory for a mocked requests.Response carrying a chat-completion envelope."""
    def _make(content: str) -> MagicMock:
        resp = MagicMock()
        resp.json.return_value = {"choices": [{"message": {"role": "assistant", "content": content}}]}
        resp.raise_for_status = MagicMock()
        return resp
    return _make
