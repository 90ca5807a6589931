"""Analysis state machine: Idle -> Checking -> Succeeded | Failed."""
import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Sequence

from dotenv import load_dotenv

from .analyzer import ParseFailure, analyze_document
from .errors import InputValidationError, RequestFailed
from .models import AnalysisState, AnalysisStatus, ComplianceReport, ErrorKind
from .regulations import RegulationId, unique_regulations

load_dotenv()

logger = logging.getLogger(__name__)

# ── configurable via .env ──
ANALYSIS_DEBOUNCE_MS = int(os.getenv("ANALYSIS_DEBOUNCE_MS"))

MISSING_TEXT = "Please enter document text to check for compliance"
MISSING_REGULATIONS = "Please select at least one regulation to check against"
MISSING_CREDENTIAL = "Please configure your OpenRouter API key in the settings"


def validate_request(document_text: str, regulations: Sequence, client) -> None:
    if not (document_text or "").strip():
        raise InputValidationError(MISSING_TEXT)
    if not regulations:
        raise InputValidationError(MISSING_REGULATIONS)
    if client is None or not getattr(client, "api_key", None):
        raise InputValidationError(MISSING_CREDENTIAL)


class AnalysisOrchestrator:
    """
    Owns the AnalysisState of one session.

    Overlapping attempts are resolved by sequence number: only the most
    recently started attempt may write its outcome, older completions are
    dropped. The live variant debounces input with a loop timer that is
    cancelled on every new change and on close().
    """

    def __init__(self, client=None, debounce_ms: int = None):
        self.client = client
        self.debounce_ms = ANALYSIS_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self.state = AnalysisState.idle()
        self.regulations: list[RegulationId] = []
        self.validation_message: str | None = None
        self.closed = False
        self._seq = 0
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: asyncio.Task | None = None

    def configure_client(self, client) -> None:
        self.client = client

    @property
    def pending(self) -> bool:
        return self._timer is not None

    async def submit(self, document_text: str, regulations: Sequence) -> AnalysisState:
        """Run one analysis attempt. Raises InputValidationError before any network call."""
        regs = unique_regulations(regulations)
        validate_request(document_text, regs, self.client)
        self.validation_message = None

        self._seq += 1
        attempt = self._seq
        self.regulations = regs
        self.state = AnalysisState.checking()
        logger.info("Analysis #%d started (%s)", attempt, ", ".join(r.value for r in regs))

        try:
            result = await asyncio.to_thread(analyze_document, self.client, document_text, regs)
        except RequestFailed as e:
            logger.error("Analysis #%d request failed: %s", attempt, e.message)
            return self._apply(attempt, AnalysisState.failed(ErrorKind.REQUEST_FAILED))

        if isinstance(result, ParseFailure):
            logger.error("Analysis #%d returned an unparseable report: %s", attempt, result.reason)
            return self._apply(attempt, AnalysisState.failed(ErrorKind.PARSE_ERROR))

        report = ComplianceReport.from_payload(result.payload, datetime.now(timezone.utc).isoformat())
        logger.info("Analysis #%d succeeded: score=%d issues=%d", attempt, report.score, len(report.issues))
        return self._apply(attempt, AnalysisState.succeeded(report))

    def _apply(self, attempt: int, state: AnalysisState) -> AnalysisState:
        if self.closed or attempt != self._seq:
            logger.info("Discarding stale result of analysis #%d (latest is #%d)", attempt, self._seq)
            return self.state
        self.state = state
        return state

    # ---------- Live variant ----------
    def schedule(self, document_text: str, regulations: Sequence) -> None:
        """(Re)start the debounce window; only the last change in a burst triggers submit()."""
        if self.closed:
            return
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(
            self.debounce_ms / 1000, self._fire, document_text, list(regulations)
        )

    def cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.debug("Pending analysis trigger cancelled")

    def _fire(self, document_text: str, regulations: list) -> None:
        self._timer = None
        if self.closed:
            return
        self._inflight = asyncio.get_running_loop().create_task(self._run_live(document_text, regulations))

    async def _run_live(self, document_text: str, regulations: list) -> None:
        try:
            await self.submit(document_text, regulations)
        except InputValidationError as e:
            logger.info("Live analysis skipped: %s", e.message)
            self.validation_message = e.message

    def reset(self) -> None:
        """Start over: discard the current report and any in-flight result."""
        self.cancel_pending()
        self._seq += 1
        self.validation_message = None
        self.state = AnalysisState.idle()

    def close(self) -> None:
        self.cancel_pending()
        self.closed = True

    @property
    def report(self) -> ComplianceReport | None:
        if self.state.status is AnalysisStatus.SUCCEEDED:
            return self.state.report
        return None
