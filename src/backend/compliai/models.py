from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from .regulations import RegulationId


SEVERITY_ORDER = ("high", "medium", "low")


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Literal["high", "medium", "low"]
    description: StrictStr
    recommendation: StrictStr


class ReportPayload(BaseModel):
    """The JSON object the scoring backend is instructed to return."""
    model_config = ConfigDict(frozen=True)

    score: StrictInt = Field(ge=0, le=100)
    issues: list[Issue]
    summary: StrictStr

    @field_validator("score", mode="before")
    @classmethod
    def _integral_score(cls, v):
        # JSON numbers like 72.0 are whole scores; 72.5 and "72" still fail.
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v


class ComplianceReport(ReportPayload):
    timestamp: str

    @classmethod
    def from_payload(cls, payload: ReportPayload, timestamp: str) -> "ComplianceReport":
        return cls(
            score=payload.score,
            issues=list(payload.issues),
            summary=payload.summary,
            timestamp=timestamp,
        )


class ErrorKind(str, Enum):
    REQUEST_FAILED = "request_failed"
    PARSE_ERROR = "parse_error"


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


FAILED_MESSAGE = "Compliance analysis failed. Please try again."


class AnalysisState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: AnalysisStatus = AnalysisStatus.IDLE
    report: ComplianceReport | None = None
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> "AnalysisState":
        return cls()

    @classmethod
    def checking(cls) -> "AnalysisState":
        return cls(status=AnalysisStatus.CHECKING)

    @classmethod
    def succeeded(cls, report: ComplianceReport) -> "AnalysisState":
        return cls(status=AnalysisStatus.SUCCEEDED, report=report)

    @classmethod
    def failed(cls, error: ErrorKind) -> "AnalysisState":
        return cls(status=AnalysisStatus.FAILED, error=error, message=FAILED_MESSAGE)


# ---------- API schemas ----------
class QuestionnaireAnswers(BaseModel):
    data_handling: str = ""
    security_measures: str = ""
    vendor_management: str = ""


class AnalyzeRequest(BaseModel):
    session_id: str | None = None
    document_text: str = ""
    regulations: list[RegulationId] | None = None


class AssessmentRequest(QuestionnaireAnswers):
    session_id: str | None = None
    regulations: list[RegulationId] | None = None


class DraftRequest(BaseModel):
    document_text: str = ""


class AnalyzeResponse(BaseModel):
    session_id: str
    state: AnalysisState
    regulations: list[RegulationId] = []
    validation_message: str | None = None


class SelectionResponse(BaseModel):
    session_id: str
    regulations: list[RegulationId]


class ApiKeyRequest(BaseModel):
    api_key: str


class ApiKeyStatus(BaseModel):
    configured: bool
