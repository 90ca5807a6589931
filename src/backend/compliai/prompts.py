from dataclasses import dataclass
from typing import Sequence

from .models import QuestionnaireAnswers
from .regulations import RegulationId


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


# Single template: the parser's contract depends on the JSON shape described here.
ANALYSIS_SYSTEM = (
    "You are a strict regulatory compliance auditor. "
    "Analyze the document supplied by the user for compliance with the following regulations: {regulations}.\n"
    "Identify every compliance gap you find and give a concrete recommendation for each one.\n"
    "Return ONLY a JSON object with these keys:\n"
    "  score: integer 0-100, the overall compliance score\n"
    '  issues: array of objects, each with\n'
    '    severity: "high" | "medium" | "low"\n'
    "    description: one sentence describing the gap\n"
    "    recommendation: one sentence describing how to close it\n"
    "  summary: a short paragraph summarising the overall compliance posture\n"
    "If no gaps are found return an empty issues array. Do not add any other keys.\n"
    'Respond with ONLY valid JSON: {{"score": N, "issues": [...], "summary": "..."}}'
)

# Guided assessment steps, in wizard order
QUESTIONNAIRE_SECTIONS = [
    ("data_handling", "Data Handling Procedures"),
    ("security_measures", "Security Measures"),
    ("vendor_management", "Vendor Management"),
]

NO_ANSWER = "No information provided"


def regulation_list(regulations: Sequence[RegulationId]) -> str:
    return ", ".join(RegulationId(r).label for r in regulations)


def build_prompt(document_text: str, regulations: Sequence[RegulationId]) -> Prompt:
    """Inputs are validated by the orchestrator before this is called."""
    return Prompt(
        system=ANALYSIS_SYSTEM.format(regulations=regulation_list(regulations)),
        user=document_text,
    )


def questionnaire_to_document(answers: QuestionnaireAnswers) -> str:
    """
    Render guided-assessment answers as one document, one titled section per step.
    Returns "" when every step is blank so the orchestrator's guard rejects it.
    """
    values = {key: (getattr(answers, key) or "").strip() for key, _ in QUESTIONNAIRE_SECTIONS}
    if not any(values.values()):
        return ""
    return "\n\n".join(
        f"{title}:\n{values[key] or NO_ANSWER}" for key, title in QUESTIONNAIRE_SECTIONS
    )
