import logging
import os
import uuid

from dotenv import load_dotenv
from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .credentials import OPENROUTER
from .errors import InputValidationError
from .export import render_report_text, report_filename
from .models import (
    AnalyzeRequest, AnalyzeResponse, ApiKeyRequest, ApiKeyStatus,
    AssessmentRequest, DraftRequest, SelectionResponse,
)
from .prompts import questionnaire_to_document
from .regulations import RegulationId
from .sessions import (
    AssessmentSession, close_session, credentials, find_session, get_session, rebind_clients,
)
from .utils_pdf import extract_text_from_pdf_bytes

load_dotenv()

# ── configurable via .env ──
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL")
CORS_ORIGINS = os.getenv("CORS_ORIGINS").split(",")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CompliAI Compliance Assessment", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)


def _response(sid: str, session: AssessmentSession) -> AnalyzeResponse:
    return AnalyzeResponse(
        session_id=sid,
        state=session.orchestrator.state,
        regulations=list(session.selector.selected),
        validation_message=session.orchestrator.validation_message,
    )


async def _run_analysis(sid: str, document_text: str, regulations) -> AnalyzeResponse:
    session = get_session(sid)
    session.document_text = document_text
    regs = session.selector.selected if regulations is None else regulations
    try:
        await session.orchestrator.submit(document_text, regs)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return _response(sid, session)


def _existing(sid: str) -> AssessmentSession:
    session = find_session(sid)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    return session


@app.get("/health")
async def health():
    return {"status": "ok", "model": OPENROUTER_MODEL}

# ============== Settings ==============

@app.get("/settings/api-key", response_model=ApiKeyStatus)
async def api_key_status():
    return ApiKeyStatus(configured=credentials.has(OPENROUTER))


@app.put("/settings/api-key", response_model=ApiKeyStatus)
async def save_api_key(req: ApiKeyRequest):
    try:
        credentials.set(OPENROUTER, req.api_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    rebind_clients()
    return ApiKeyStatus(configured=True)

# ============== Analysis ==============

@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(req: AnalyzeRequest):
    sid = req.session_id or str(uuid.uuid4())
    return await _run_analysis(sid, req.document_text, req.regulations)


@app.post("/analyze/pdf", response_model=AnalyzeResponse)
async def analyze_pdf(
    file: UploadFile = File(...),
    regulations: list[RegulationId] = Query(default=[]),
    session_id: str | None = None,
):
    if not file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Please upload a PDF.")

    sid = session_id or str(uuid.uuid4())
    pdf_bytes = await file.read()
    try:
        text = extract_text_from_pdf_bytes(pdf_bytes)
    except Exception as e:
        logger.warning("PDF extraction failed for %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail="Could not read text from the PDF.")
    return await _run_analysis(sid, text, regulations or None)


@app.post("/assessment", response_model=AnalyzeResponse)
async def assessment(req: AssessmentRequest):
    """Guided questionnaire variant: answers are folded into one document."""
    sid = req.session_id or str(uuid.uuid4())
    return await _run_analysis(sid, questionnaire_to_document(req), req.regulations)

# ============== Sessions ==============

@app.post("/sessions/{session_id}/regulations/{regulation}", response_model=SelectionResponse)
async def toggle_regulation(session_id: str, regulation: RegulationId, live: bool = False):
    session = get_session(session_id)
    session.selector.toggle(regulation)
    if live:
        session.orchestrator.schedule(session.document_text, session.selector.selected)
    return SelectionResponse(session_id=session_id, regulations=list(session.selector.selected))


@app.post("/sessions/{session_id}/draft", response_model=AnalyzeResponse)
async def update_draft(session_id: str, req: DraftRequest):
    """Live variant: each edit restarts the debounce window."""
    session = get_session(session_id)
    session.document_text = req.document_text
    session.orchestrator.schedule(req.document_text, session.selector.selected)
    return _response(session_id, session)


@app.post("/sessions/{session_id}/reset", response_model=AnalyzeResponse)
async def new_analysis(session_id: str):
    """Back to Idle; a result still in flight for this session is dropped."""
    session = _existing(session_id)
    session.orchestrator.reset()
    return _response(session_id, session)


@app.get("/sessions/{session_id}", response_model=AnalyzeResponse)
async def session_state(session_id: str):
    return _response(session_id, _existing(session_id))


@app.get("/sessions/{session_id}/report.txt", response_class=PlainTextResponse)
async def download_report(session_id: str):
    orchestrator = _existing(session_id).orchestrator
    if orchestrator.report is None:
        raise HTTPException(status_code=409, detail="No compliance report available.")
    filename = report_filename()
    return PlainTextResponse(
        render_report_text(orchestrator.report, orchestrator.regulations),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    if not close_session(session_id):
        raise HTTPException(status_code=404, detail="Unknown session.")
    return {"session_id": session_id, "closed": True}
